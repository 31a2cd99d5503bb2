"""Collaborator protocols and shared signal thresholds.

Defines the interfaces the buy and sell waiters depend on.  Any object
satisfying them (including test doubles) can be injected.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from mintsignal.signals.models import MACDResult


# RSI strictly between 0 and this value counts as oversold.
RSI_OVERSOLD: float = 30.0


@runtime_checkable
class IndicatorEvaluator(Protocol):
    """Computes momentum indicators from a price sequence."""

    def rsi(self, prices: list[float]) -> float:
        """Latest RSI, or ``0.0`` when not computable."""
        ...

    def macd(self, prices: list[float]) -> MACDResult:
        """Latest MACD and signal line values."""
        ...


@runtime_checkable
class PriceHistoryProvider(Protocol):
    """Per-instrument price accumulator with idempotent lifecycle calls."""

    def register(self, instrument: str) -> None:
        ...

    def mark_done(self, instrument: str) -> None:
        ...

    def get_prices(self, instrument: str) -> Optional[list[float]]:
        ...


@runtime_checkable
class QuoteProvider(Protocol):
    """Quotes the expected swap output for an input amount."""

    async def quote(
        self,
        instrument: str,
        input_amount: int,
        slippage_percent: float,
    ) -> int:
        """Return the expected raw output amount.

        Raises ``ProviderError`` on venue or network failure.
        """
        ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers a human-readable alert about an instrument."""

    async def send(self, message: str, instrument: str) -> None:
        ...
