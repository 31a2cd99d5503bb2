"""MintSignal — application configuration.

Loads .env variables into a typed config object.
Validates required variables and value ranges on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


_REQUIRED_VARS = [
    "QUOTE_MINT",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables.

    All durations and intervals are integer milliseconds.
    """

    quote_mint: str

    # Buy side
    use_technical_analysis: bool = True
    buy_signal_time_to_wait: int = 120_000
    buy_signal_price_interval: int = 1_000
    buy_signal_fraction_percentage_time_to_wait: float = 40.0
    buy_signal_low_volume_threshold: int = 30

    # Sell side
    price_check_duration: int = 600_000
    price_check_interval: int = 2_000
    take_profit: float = 40.0  # percent
    sell_slippage: float = 20.0  # percent
    auto_sell_without_sell_signal: bool = True

    # Indicators
    rsi_period: int = 14
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9

    # Price sampling / quoting
    price_sample_interval: int = 1_000
    price_probe_amount: int = 1_000_000
    quote_api_url: str = "https://quote-api.jup.ag/v6"

    # Notifications
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    log_level: str = "INFO"
    api_port: int = 8080

    @property
    def telegram_enabled(self) -> bool:
        """Return True when both Telegram credentials are configured."""
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(
    name: str,
    default: float,
    minimum: float = 0.0,
    maximum: float | None = None,
) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"[{minimum}, {maximum}]" if maximum is not None else f">= {minimum}"
        raise ValueError(f"{name} must be {bounds}, got {value}")
    return value


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the offending variable when a
    required variable is absent or a value cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [v for v in _REQUIRED_VARS if not os.environ.get(v)]
    if missing:
        raise ValueError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    return Config(
        quote_mint=os.environ["QUOTE_MINT"],
        use_technical_analysis=_env_bool("USE_TECHNICAL_ANALYSIS", True),
        buy_signal_time_to_wait=_env_int("BUY_SIGNAL_TIME_TO_WAIT", 120_000),
        buy_signal_price_interval=_env_int("BUY_SIGNAL_PRICE_INTERVAL", 1_000),
        buy_signal_fraction_percentage_time_to_wait=_env_float(
            "BUY_SIGNAL_FRACTION_PERCENTAGE_TIME_TO_WAIT", 40.0, maximum=100.0,
        ),
        buy_signal_low_volume_threshold=_env_int("BUY_SIGNAL_LOW_VOLUME_THRESHOLD", 30),
        price_check_duration=_env_int("PRICE_CHECK_DURATION", 600_000),
        price_check_interval=_env_int("PRICE_CHECK_INTERVAL", 2_000),
        take_profit=_env_float("TAKE_PROFIT", 40.0),
        sell_slippage=_env_float("SELL_SLIPPAGE", 20.0, maximum=100.0),
        auto_sell_without_sell_signal=_env_bool("AUTO_SELL_WITHOUT_SELL_SIGNAL", True),
        rsi_period=_env_int("RSI_PERIOD", 14, minimum=1),
        macd_fast_period=_env_int("MACD_FAST_PERIOD", 12, minimum=1),
        macd_slow_period=_env_int("MACD_SLOW_PERIOD", 26, minimum=1),
        macd_signal_period=_env_int("MACD_SIGNAL_PERIOD", 9, minimum=1),
        price_sample_interval=_env_int("PRICE_SAMPLE_INTERVAL", 1_000, minimum=1),
        price_probe_amount=_env_int("PRICE_PROBE_AMOUNT", 1_000_000, minimum=1),
        quote_api_url=os.environ.get("QUOTE_API_URL", "https://quote-api.jup.ag/v6"),
        telegram_bot_token=os.environ.get("TELEGRAM_BOT_TOKEN", ""),
        telegram_chat_id=os.environ.get("TELEGRAM_CHAT_ID", ""),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        api_port=_env_int("API_PORT", 8080, minimum=1),
    )
