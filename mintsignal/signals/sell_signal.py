"""Sell-signal waiter — polls live quotes until the take-profit target is hit."""

from __future__ import annotations

import asyncio
import logging
import time

from mintsignal.config import Config
from mintsignal.signals.amounts import ms_to_seconds, take_profit_target
from mintsignal.signals.base import Notifier, PriceHistoryProvider, QuoteProvider
from mintsignal.signals.models import Holding

logger = logging.getLogger("mintsignal")


def no_sell_message(instrument: str) -> str:
    """Alert text sent when the price check runs out without a sell signal."""
    return (
        "🚫NO SELL🚫\n\n"
        f"Mint <code>{instrument}</code>\n"
        "Time ran out without reaching take profit, position is still held"
    )


class SellSignalWaiter:
    """Decides when to exit a held position.

    Args:
        history: Price history provider; the mint's buy-wait tracking is
                 marked done as soon as evaluation starts.
        quotes: Quote provider re-queried on every check.
        notifier: Receives one alert when time runs out and auto-sell is off.
        clock: Monotonic time source in seconds; bounds the whole wait.
        sleep: Awaitable sleep used between checks.
    """

    def __init__(
        self,
        history: PriceHistoryProvider,
        quotes: QuoteProvider,
        notifier: Notifier,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ) -> None:
        self._history = history
        self._quotes = quotes
        self._notifier = notifier
        self._clock = clock
        self._sleep = sleep
        self.last_outcome: str = ""

    async def evaluate(self, holding: Holding, instrument: str, config: Config) -> bool:
        """Wait up to ``price_check_duration`` for the quote to beat take profit.

        Returns ``True`` to sell, ``False`` to keep holding.  The kind of
        decision is left in ``last_outcome``: ``disabled``, ``take_profit``,
        ``auto_sell`` or ``hold``.
        """
        self._history.mark_done(instrument)

        if config.price_check_duration == 0 or config.price_check_interval == 0:
            self.last_outcome = "disabled"
            return True

        times_to_check = -(-config.price_check_duration // config.price_check_interval)
        duration = ms_to_seconds(config.price_check_duration)
        interval = ms_to_seconds(config.price_check_interval)
        target = take_profit_target(holding.cost, config.take_profit)
        start = self._clock()

        for check in range(1, times_to_check + 1):
            try:
                amount_out = await self._quotes.quote(
                    instrument, holding.amount, config.sell_slippage,
                )
                logger.debug(
                    "%s %d/%d Take profit: %d | Current: %d",
                    instrument, check, times_to_check, target, amount_out,
                )
                if amount_out > target:
                    self.last_outcome = "take_profit"
                    return True
            except Exception as exc:
                logger.debug("Failed to check token price for %s: %s", instrument, exc)

            # Deadline wins over the check count when quotes are slow
            if check == times_to_check or self._clock() - start >= duration:
                break
            await self._sleep(interval)
            if self._clock() - start >= duration:
                break

        if config.auto_sell_without_sell_signal:
            logger.info("No sell signal for %s, selling anyway", instrument)
            self.last_outcome = "auto_sell"
            return True

        self.last_outcome = "hold"
        try:
            await self._notifier.send(no_sell_message(instrument), instrument)
        except Exception as exc:
            logger.warning("Failed to send no-sell notification for %s: %s", instrument, exc)
        return False
