"""Buy-signal waiter — polls price history until momentum says enter.

Flow:
    1. Technical analysis disabled → buy immediately.
    2. Register the mint with the price history provider.
    3. Every ``buy_signal_price_interval`` recompute RSI + MACD from the
       full price sequence:
         - oversold RSI with a bullish MACD cross → buy;
         - past the grace deadline with too few samples → skip;
         - past the grace deadline with nothing computable → skip.
    4. Deadline reached without a decision → skip.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from mintsignal.config import Config
from mintsignal.signals.amounts import ms_to_seconds
from mintsignal.signals.base import RSI_OVERSOLD, IndicatorEvaluator, PriceHistoryProvider
from mintsignal.signals.models import IndicatorSnapshot

logger = logging.getLogger("mintsignal")


class BuySignalWaiter:
    """Decides whether to enter a freshly created instrument.

    Args:
        history: Price history provider (register / get_prices).
        indicators: Indicator evaluator (rsi / macd).
        clock: Monotonic time source in seconds.
        sleep: Awaitable sleep used between ticks.
    """

    def __init__(
        self,
        history: PriceHistoryProvider,
        indicators: IndicatorEvaluator,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ) -> None:
        self._history = history
        self._indicators = indicators
        self._clock = clock
        self._sleep = sleep
        self.last_outcome: str = ""

    async def evaluate(self, instrument: str, config: Config) -> bool:
        """Wait up to ``buy_signal_time_to_wait`` for a buy signal.

        Returns ``True`` to buy, ``False`` to abstain.  The kind of
        decision is left in ``last_outcome``: ``disabled``, ``entry``,
        ``low_volume``, ``no_data`` or ``timeout``.
        """
        if not config.use_technical_analysis:
            self.last_outcome = "disabled"
            return True

        self._history.register(instrument)
        logger.debug("Waiting for buy signal for %s", instrument)

        total = ms_to_seconds(config.buy_signal_time_to_wait)
        interval = ms_to_seconds(config.buy_signal_price_interval)
        grace = total * (config.buy_signal_fraction_percentage_time_to_wait / 100)

        start = self._clock()
        ticks = 0
        previous_rsi: Optional[float] = None

        while True:
            try:
                prices = self._history.get_prices(instrument)
                if prices:
                    snapshot = self._snapshot(prices)
                    if snapshot.rsi != previous_rsi:
                        logger.debug(
                            "(%d) Waiting for buy signal for %s: RSI: %.3f, MACD: %s, Signal: %s",
                            ticks, instrument, snapshot.rsi,
                            snapshot.macd_line, snapshot.signal_line,
                        )
                        previous_rsi = snapshot.rsi

                    decision = self._decide(
                        snapshot, len(prices), self._clock() - start, grace, config,
                    )
                    if decision is not None:
                        return decision
            except Exception as exc:
                logger.debug("Failed to check token price for %s: %s", instrument, exc)

            ticks += 1
            await self._sleep(interval)
            if self._clock() - start >= total:
                break

        logger.debug(
            "No buy signal for %s after %d tick(s) in %.1fs", instrument, ticks, total,
        )
        self.last_outcome = "timeout"
        return False

    def _snapshot(self, prices: list[float]) -> IndicatorSnapshot:
        macd = self._indicators.macd(prices)
        return IndicatorSnapshot(
            rsi=self._indicators.rsi(prices),
            macd_line=macd.macd,
            signal_line=macd.signal,
        )

    def _decide(
        self,
        snapshot: IndicatorSnapshot,
        samples: int,
        elapsed: float,
        grace: float,
        config: Config,
    ) -> Optional[bool]:
        """Apply the entry and abort rules to one tick.  ``None`` keeps waiting."""
        if (
            0 < snapshot.rsi < RSI_OVERSOLD
            and snapshot.has_macd
            and snapshot.macd_line > snapshot.signal_line
        ):
            logger.debug("RSI is less than %.0f, MACD above signal, sending buy signal", RSI_OVERSOLD)
            self.last_outcome = "entry"
            return True

        if elapsed <= grace:
            return None

        if samples < config.buy_signal_low_volume_threshold:
            logger.debug(
                "Not enough volume for signal after %.1f seconds (%d samples), skipping buy signal",
                grace, samples,
            )
            self.last_outcome = "low_volume"
            return False

        # A zero MACD line counts as missing here, same as a None one
        if snapshot.rsi == 0 and not snapshot.macd_line:
            logger.debug(
                "Not enough data for signal after %.1f seconds, skipping buy signal", grace,
            )
            self.last_outcome = "no_data"
            return False

        return None
