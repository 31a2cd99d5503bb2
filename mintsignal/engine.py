"""MintSignal — trade signal orchestration.

Composes the buy and sell waiters over one set of collaborators and
publishes every decision to the status API.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from mintsignal.api.routers import record_signal
from mintsignal.config import Config
from mintsignal.signals.base import IndicatorEvaluator, Notifier, PriceHistoryProvider, QuoteProvider
from mintsignal.signals.buy_signal import BuySignalWaiter
from mintsignal.signals.indicators import TechnicalAnalysis
from mintsignal.signals.models import Holding
from mintsignal.signals.sell_signal import SellSignalWaiter

logger = logging.getLogger("mintsignal")

_BUY_REASONS = {
    "disabled": "Technical analysis disabled",
    "entry": "RSI oversold with bullish MACD cross",
    "low_volume": "Not enough volume",
    "no_data": "Not enough data",
    "timeout": "No buy signal",
}

_SELL_REASONS = {
    "disabled": "Price check disabled",
    "take_profit": "Take profit reached",
    "auto_sell": "Sold without sell signal",
    "hold": "No sell signal, holding",
}


class TradeSignals:
    """Entry/exit decision facade for one agent.

    Args:
        config: Application configuration.
        quotes: Quote provider for sell checks.
        notifier: Alert channel for unsold positions.
        history: Price history provider shared with the sampler.
        indicators: Indicator evaluator. Defaults to ``TechnicalAnalysis``.
    """

    def __init__(
        self,
        config: Config,
        quotes: QuoteProvider,
        notifier: Notifier,
        history: PriceHistoryProvider,
        indicators: Optional[IndicatorEvaluator] = None,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ) -> None:
        self._config = config
        self._buy = BuySignalWaiter(
            history,
            indicators or TechnicalAnalysis(config),
            clock=clock,
            sleep=sleep,
        )
        self._sell = SellSignalWaiter(history, quotes, notifier, clock=clock, sleep=sleep)

    async def wait_for_buy_signal(self, instrument: str) -> bool:
        """Block until a buy decision is reached for *instrument*."""
        decision = await self._buy.evaluate(instrument, self._config)
        reason = _BUY_REASONS.get(self._buy.last_outcome, self._buy.last_outcome)
        logger.info("Buy decision for %s: %s (%s)", instrument, decision, reason)
        record_signal({
            "instrument": instrument,
            "side": "buy",
            "status": "buy" if decision else "skipped",
            "reason": reason,
            "evaluated_at": datetime.now(timezone.utc).isoformat(),
        })
        return decision

    async def wait_for_sell_signal(self, holding: Holding, instrument: str) -> bool:
        """Block until a sell decision is reached for *holding*."""
        decision = await self._sell.evaluate(holding, instrument, self._config)
        reason = _SELL_REASONS.get(self._sell.last_outcome, self._sell.last_outcome)
        logger.info("Sell decision for %s: %s (%s)", instrument, decision, reason)
        record_signal({
            "instrument": instrument,
            "side": "sell",
            "status": "sell" if decision else "hold",
            "reason": reason,
            "evaluated_at": datetime.now(timezone.utc).isoformat(),
        })
        return decision
