"""Signal data models — typed representations for waiter inputs and indicator outputs."""

from dataclasses import dataclass
from typing import Optional

from mintsignal.signals.amounts import to_raw_amount


@dataclass(frozen=True)
class MACDResult:
    """Latest MACD line and signal line; ``None`` when not computable."""

    macd: Optional[float] = None
    signal: Optional[float] = None


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Momentum state recomputed from the full price sequence on each tick."""

    rsi: float
    macd_line: Optional[float] = None
    signal_line: Optional[float] = None

    @property
    def has_macd(self) -> bool:
        return self.macd_line is not None and self.signal_line is not None


@dataclass(frozen=True)
class Holding:
    """An open position awaiting a sell decision.

    ``amount`` is the raw base-token quantity held (quoted on exit) and
    ``cost`` the raw quote-currency amount spent acquiring it (take-profit
    basis).  Both are normalised to ``int`` on construction.
    """

    amount: int
    cost: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_raw_amount(self.amount))
        object.__setattr__(self, "cost", to_raw_amount(self.cost))
        if self.amount < 0 or self.cost < 0:
            raise ValueError(
                f"Holding amounts must be non-negative, got amount={self.amount}, cost={self.cost}"
            )
