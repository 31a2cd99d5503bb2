"""Technical indicators — EMA, RSI, MACD over raw price lists. Pure functions, no I/O.

``TechnicalAnalysis`` wraps them as the default indicator evaluator used by
the buy-signal waiter.
"""

from __future__ import annotations

import math

from mintsignal.config import Config
from mintsignal.signals.models import MACDResult


def calculate_ema(prices: list[float], period: int) -> list[float]:
    """Calculate an Exponential Moving Average series.

    Uses the standard EMA formula:
        ``EMA_today = price × k + EMA_yesterday × (1 - k)``
    where ``k = 2 / (period + 1)``.

    The first EMA value is seeded with the SMA of the first *period*
    prices.  Returns the full series (same length as *prices*); entries
    before the seed are ``float('nan')``.

    Raises ``ValueError`` if fewer than *period* prices are provided.
    """
    if len(prices) < period:
        raise ValueError(
            f"Need at least {period} prices for EMA({period}), "
            f"got {len(prices)}"
        )

    k = 2.0 / (period + 1)
    ema: list[float] = [float("nan")] * len(prices)
    ema[period - 1] = sum(prices[:period]) / period

    for i in range(period, len(prices)):
        ema[i] = prices[i] * k + ema[i - 1] * (1 - k)

    return ema


# ── RSI ──────────────────────────────────────────────────────────────────


def calculate_rsi(prices: list[float], period: int = 14) -> list[float]:
    """Calculate Wilder's Relative Strength Index.

    Algorithm (Wilder-smoothed):
        1. delta = price[i] - price[i-1]
        2. Separate gains (positive) and losses (|negative|).
        3. Seed average gain/loss = SMA of first *period* deltas.
        4. Subsequent: avg = (prev_avg × (period-1) + current) / period
        5. RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Requires at least ``period + 1`` prices.  Returns a list the same
    length as *prices*; entries before the seed are ``float('nan')``.
    """
    if len(prices) < period + 1:
        raise ValueError(
            f"Need at least {period + 1} prices for RSI({period}), "
            f"got {len(prices)}"
        )

    deltas = [prices[i] - prices[i - 1] for i in range(1, len(prices))]
    gains = [max(d, 0.0) for d in deltas]
    losses = [abs(min(d, 0.0)) for d in deltas]

    rsi: list[float] = [float("nan")] * len(prices)

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    def _rsi_from_avgs(ag: float, al: float) -> float:
        if al == 0:
            return 100.0
        return 100.0 - 100.0 / (1.0 + ag / al)

    rsi[period] = _rsi_from_avgs(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        # deltas are offset by one from prices
        rsi[i + 1] = _rsi_from_avgs(avg_gain, avg_loss)

    return rsi


# ── MACD ─────────────────────────────────────────────────────────────────


def calculate_macd(
    prices: list[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[list[float], list[float]]:
    """Calculate the MACD line and its signal line.

    MACD   = EMA(fast) − EMA(slow)
    Signal = EMA(signal_period) of the MACD line

    Requires at least ``slow_period + signal_period - 1`` prices.

    Returns ``(macd, signal)``, both the same length as *prices*, with
    ``float('nan')`` before each series is ready.
    """
    min_prices = slow_period + signal_period - 1
    if len(prices) < min_prices:
        raise ValueError(
            f"Need at least {min_prices} prices for "
            f"MACD({fast_period},{slow_period},{signal_period}), got {len(prices)}"
        )

    fast = calculate_ema(prices, fast_period)
    slow = calculate_ema(prices, slow_period)
    macd = [f - s for f, s in zip(fast, slow)]

    # Signal EMA runs over the defined part of the MACD line only
    start = slow_period - 1
    signal_tail = calculate_ema(macd[start:], signal_period)
    signal = [float("nan")] * start + signal_tail

    return macd, signal


# ── Evaluator ────────────────────────────────────────────────────────────


class TechnicalAnalysis:
    """Default indicator evaluator.

    Returns the latest RSI and MACD values for a price sequence, using the
    insufficient-data conventions the buy waiter expects: RSI ``0.0`` and
    MACD fields ``None``.
    """

    def __init__(self, config: Config | None = None) -> None:
        self._rsi_period = config.rsi_period if config else 14
        self._fast = config.macd_fast_period if config else 12
        self._slow = config.macd_slow_period if config else 26
        self._signal = config.macd_signal_period if config else 9

    def rsi(self, prices: list[float]) -> float:
        try:
            latest = calculate_rsi(prices, self._rsi_period)[-1]
        except ValueError:
            return 0.0
        return 0.0 if math.isnan(latest) else latest

    def macd(self, prices: list[float]) -> MACDResult:
        try:
            macd, signal = calculate_macd(prices, self._fast, self._slow, self._signal)
        except ValueError:
            return MACDResult()
        return MACDResult(
            macd=None if math.isnan(macd[-1]) else macd[-1],
            signal=None if math.isnan(signal[-1]) else signal[-1],
        )
