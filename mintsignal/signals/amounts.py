"""Fixed-point amount helpers — exact integer math, no I/O.

Token amounts are raw integer units.  Percentages are converted to
``Fraction`` so profit targets never pick up float rounding drift.
"""

import math
from decimal import Decimal, InvalidOperation
from fractions import Fraction


def to_raw_amount(value) -> int:
    """Normalise an exact amount representation to ``int``.

    Accepts ``int``, integral ``Decimal`` / ``Fraction`` / ``float`` values
    and decimal-digit strings.

    Raises:
        TypeError: For ``bool`` or unsupported types.
        ValueError: For non-integral or non-finite values.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a valid token amount")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                value = Decimal(text)
            except InvalidOperation:
                raise ValueError(f"Token amount must be numeric, got {text!r}") from None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValueError(f"Token amount must be integral, got {value!r}")
        return int(value)
    if isinstance(value, (Decimal, Fraction)):
        if isinstance(value, Decimal) and not value.is_finite():
            raise ValueError(f"Token amount must be finite, got {value!r}")
        if value != int(value):
            raise ValueError(f"Token amount must be integral, got {value!r}")
        return int(value)
    raise TypeError(f"Unsupported token amount type: {type(value).__name__}")


def percent_to_fraction(pct) -> Fraction:
    """Convert a percentage (e.g. ``12.5``) to an exact ``Fraction``.

    Floats go through ``str`` so ``12.5`` becomes ``25/2`` rather than its
    binary expansion.
    """
    if isinstance(pct, bool):
        raise TypeError("bool is not a valid percentage")
    if isinstance(pct, float):
        if not math.isfinite(pct):
            raise ValueError(f"Percentage must be finite, got {pct!r}")
        return Fraction(str(pct))
    return Fraction(pct)


def take_profit_target(cost, take_profit_pct) -> int:
    """Return ``cost + floor(cost × take_profit_pct / 100)``.

    >>> take_profit_target(1000, 10)
    1100
    """
    raw = to_raw_amount(cost)
    profit = (raw * percent_to_fraction(take_profit_pct)) // 100
    return raw + int(profit)


def slippage_bps(pct) -> int:
    """Convert a slippage percentage to whole basis points (floored)."""
    return int(percent_to_fraction(pct) * 100 // 1)


def ms_to_seconds(ms: int) -> float:
    return ms / 1000.0
