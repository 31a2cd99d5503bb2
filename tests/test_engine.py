"""Tests for the TradeSignals facade.

Verifies the buy → sell hand-off over a shared price cache and that every
decision lands in the status API history.
"""

import pytest

from mintsignal.api import routers
from mintsignal.cache.price_history import PriceHistoryCache
from mintsignal.config import Config
from mintsignal.engine import TradeSignals
from mintsignal.signals.models import Holding, MACDResult

MINT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"


# ── Helpers ──────────────────────────────────────────────────────────────


def _make_config(**overrides) -> Config:
    defaults = dict(
        quote_mint="So11111111111111111111111111111111111111112",
        buy_signal_time_to_wait=5_000,
        buy_signal_price_interval=1_000,
        buy_signal_fraction_percentage_time_to_wait=100.0,
        buy_signal_low_volume_threshold=1,
        price_check_duration=4_000,
        price_check_interval=1_000,
        take_profit=10.0,
        auto_sell_without_sell_signal=False,
    )
    defaults.update(overrides)
    return Config(**defaults)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


class OversoldIndicators:
    """Always reports oversold RSI with a bullish MACD cross."""

    def rsi(self, prices):
        return 25.0

    def macd(self, prices):
        return MACDResult(macd=0.002, signal=0.001)


class NeutralIndicators:
    def rsi(self, prices):
        return 55.0

    def macd(self, prices):
        return MACDResult(macd=0.001, signal=0.002)


class FakeQuotes:
    def __init__(self, amount_out: int) -> None:
        self.amount_out = amount_out

    async def quote(self, instrument, input_amount, slippage_percent):
        return self.amount_out


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send(self, message, instrument):
        self.sent.append((message, instrument))


@pytest.fixture(autouse=True)
def _clear_history():
    routers.clear_signals()
    yield
    routers.clear_signals()


def _signals(config, cache, indicators, quotes, notifier=None) -> TradeSignals:
    clock = FakeClock()
    return TradeSignals(
        config=config,
        quotes=quotes,
        notifier=notifier or FakeNotifier(),
        history=cache,
        indicators=indicators,
        clock=clock,
        sleep=clock.sleep,
    )


# ── Tests ────────────────────────────────────────────────────────────────


class TestTradeSignals:
    @pytest.mark.asyncio
    async def test_buy_then_sell_cycle(self):
        cache = PriceHistoryCache()
        cache.register(MINT)
        cache.add_price(MINT, 0.0025)
        signals = _signals(_make_config(), cache, OversoldIndicators(), FakeQuotes(1200))

        assert await signals.wait_for_buy_signal(MINT) is True
        assert cache.is_active(MINT)

        assert await signals.wait_for_sell_signal(Holding(amount=5_000_000, cost=1000), MINT) is True
        assert not cache.is_active(MINT)

        history = routers._signal_history
        assert [(e["side"], e["status"]) for e in history] == [("buy", "buy"), ("sell", "sell")]
        assert all(e["instrument"] == MINT for e in history)
        assert all(e["evaluated_at"] for e in history)

    @pytest.mark.asyncio
    async def test_skipped_buy_is_recorded(self):
        cache = PriceHistoryCache()
        signals = _signals(_make_config(), cache, NeutralIndicators(), FakeQuotes(0))
        cache.register(MINT)
        cache.add_price(MINT, 0.0025)

        assert await signals.wait_for_buy_signal(MINT) is False
        assert routers._signal_history[-1]["status"] == "skipped"
        assert routers._signal_history[-1]["reason"] == "No buy signal"

    @pytest.mark.asyncio
    async def test_buy_without_technical_analysis(self):
        cache = PriceHistoryCache()
        signals = _signals(
            _make_config(use_technical_analysis=False), cache, NeutralIndicators(), FakeQuotes(0),
        )

        assert await signals.wait_for_buy_signal(MINT) is True
        assert cache.snapshot() == []
        assert routers._signal_history[-1]["reason"] == "Technical analysis disabled"

    @pytest.mark.asyncio
    async def test_hold_is_recorded_and_notified(self):
        cache = PriceHistoryCache()
        notifier = FakeNotifier()
        signals = _signals(_make_config(), cache, NeutralIndicators(), FakeQuotes(900), notifier)

        result = await signals.wait_for_sell_signal(Holding(amount=5_000_000, cost=1000), MINT)

        assert result is False
        assert len(notifier.sent) == 1
        assert routers._signal_history[-1]["status"] == "hold"
        assert routers._signal_history[-1]["reason"] == "No sell signal, holding"


class TestDecisionReasons:
    @pytest.mark.asyncio
    async def test_take_profit_and_auto_sell_are_distinguished(self):
        cache = PriceHistoryCache()
        holding = Holding(amount=5_000_000, cost=1000)

        winning = _signals(_make_config(), cache, NeutralIndicators(), FakeQuotes(1200))
        assert await winning.wait_for_sell_signal(holding, MINT) is True
        assert routers._signal_history[-1]["reason"] == "Take profit reached"

        flat = _signals(
            _make_config(auto_sell_without_sell_signal=True),
            cache, NeutralIndicators(), FakeQuotes(900),
        )
        assert await flat.wait_for_sell_signal(holding, MINT) is True
        assert routers._signal_history[-1]["status"] == "sell"
        assert routers._signal_history[-1]["reason"] == "Sold without sell signal"

    @pytest.mark.asyncio
    async def test_disabled_price_check_reason(self):
        signals = _signals(
            _make_config(price_check_duration=0),
            PriceHistoryCache(), NeutralIndicators(), FakeQuotes(0),
        )

        assert await signals.wait_for_sell_signal(Holding(amount=1, cost=1), MINT) is True
        assert routers._signal_history[-1]["reason"] == "Price check disabled"

    @pytest.mark.asyncio
    async def test_low_volume_abort_reason(self):
        cache = PriceHistoryCache()
        cache.register(MINT)
        cache.add_price(MINT, 0.0025)
        signals = _signals(
            _make_config(
                buy_signal_fraction_percentage_time_to_wait=20.0,
                buy_signal_low_volume_threshold=30,
            ),
            cache, NeutralIndicators(), FakeQuotes(0),
        )

        assert await signals.wait_for_buy_signal(MINT) is False
        assert routers._signal_history[-1]["reason"] == "Not enough volume"
