"""Tests for fixed-point amount helpers and the Holding model."""

from decimal import Decimal
from fractions import Fraction

import pytest

from mintsignal.signals.amounts import (
    percent_to_fraction,
    slippage_bps,
    take_profit_target,
    to_raw_amount,
)
from mintsignal.signals.models import Holding


class TestTakeProfitTarget:
    def test_ten_percent_of_thousand(self):
        assert take_profit_target(1000, 10) == 1100

    @pytest.mark.parametrize(
        "holding",
        [1000, Decimal("1000"), Decimal("1000.000"), Fraction(1000), 1000.0, "1000"],
    )
    def test_equivalent_representations(self, holding):
        assert take_profit_target(holding, 10) == 1100

    def test_profit_is_floored(self):
        # 1001 × 12.5 % = 125.125 → 125
        assert take_profit_target(1001, 12.5) == 1126

    def test_float_percent_has_no_binary_drift(self):
        # 0.1 + 0.2 style drift would make 1000 × 7 % = 70.00000000000001
        assert take_profit_target(1000, 7.0) == 1070
        assert take_profit_target(10**18, 33.3) == 10**18 + 333 * 10**15

    def test_repeatable(self):
        results = {take_profit_target(123_456_789, 40) for _ in range(10)}
        assert results == {123_456_789 + 49_382_715}

    def test_zero_take_profit(self):
        assert take_profit_target(1000, 0) == 1000


class TestToRawAmount:
    def test_rejects_fractional(self):
        with pytest.raises(ValueError):
            to_raw_amount(1000.5)
        with pytest.raises(ValueError):
            to_raw_amount(Decimal("1.5"))

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            to_raw_amount(True)

    def test_rejects_garbage_string(self):
        with pytest.raises(ValueError):
            to_raw_amount("lots")

    def test_rejects_nan(self):
        with pytest.raises(ValueError):
            to_raw_amount(float("nan"))

    def test_large_values_stay_exact(self):
        assert to_raw_amount("123456789012345678901234567890") == 123456789012345678901234567890


class TestPercentHelpers:
    def test_percent_to_fraction_uses_decimal_text(self):
        assert percent_to_fraction(12.5) == Fraction(25, 2)
        assert percent_to_fraction(0.1) == Fraction(1, 10)

    def test_slippage_bps(self):
        assert slippage_bps(20) == 2000
        assert slippage_bps(0.5) == 50
        assert slippage_bps(12.345) == 1234


class TestHolding:
    def test_normalises_amounts(self):
        h = Holding(amount="5000000", cost=Decimal("1000"))
        assert h.amount == 5_000_000
        assert h.cost == 1000
        assert isinstance(h.cost, int)

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            Holding(amount=-1, cost=1000)
