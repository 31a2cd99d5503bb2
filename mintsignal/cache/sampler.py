"""PriceSampler — keeps the price history cache fed.

Polls a spot price for every actively tracked mint once per interval and
appends it to the cache.  Runs as a background asyncio task next to the
signal waiters.
"""

import asyncio
import logging
from typing import Protocol

from mintsignal.cache.price_history import PriceHistoryCache
from mintsignal.signals.amounts import ms_to_seconds

logger = logging.getLogger("mintsignal.sampler")


class PriceSource(Protocol):
    async def price(self, instrument: str) -> float:
        ...


class PriceSampler:
    """Background loop sampling prices into a ``PriceHistoryCache``.

    Args:
        cache: The cache to append to.
        source: Anything with ``async price(instrument) -> float``.
        interval_ms: Milliseconds between sampling cycles.
    """

    def __init__(
        self,
        cache: PriceHistoryCache,
        source: PriceSource,
        interval_ms: int,
        sleep=asyncio.sleep,
    ) -> None:
        self._cache = cache
        self._source = source
        self._interval = ms_to_seconds(interval_ms)
        self._sleep = sleep
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the sampler to stop after the current cycle."""
        self._running = False

    async def sample_once(self) -> int:
        """Prune finished mints, then sample every active mint once.

        Returns the number of prices recorded.
        """
        pruned = self._cache.prune_done()
        if pruned:
            logger.debug("Pruned %d finished mint(s) from price history", pruned)

        recorded = 0
        for instrument in self._cache.active_instruments():
            try:
                price = await self._source.price(instrument)
            except Exception as exc:
                logger.debug("Failed to sample price for %s: %s", instrument, exc)
                continue
            if self._cache.add_price(instrument, price):
                recorded += 1
        return recorded

    async def run(self, max_cycles: int = 0) -> None:
        """Run until stopped, or for *max_cycles* cycles when non-zero."""
        self._running = True
        cycle = 0
        logger.info("Price sampler started (interval %.2fs)", self._interval)

        while self._running:
            cycle += 1
            await self.sample_once()
            if max_cycles > 0 and cycle >= max_cycles:
                break
            await self._sleep(self._interval)

        self._running = False
        logger.info("Price sampler stopped after %d cycle(s)", cycle)
