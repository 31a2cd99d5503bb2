"""Internal API routers — /signals and /tracked endpoints.

No business logic. Exposes the decision log pushed by ``TradeSignals``
and the price cache registration state.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

logger = logging.getLogger("mintsignal")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_MAX_HISTORY = 50

_price_history = None  # Set via configure_routers()
_signal_history: list[dict] = []  # Recent decision log (max 50 entries)


def configure_routers(price_history=None) -> None:
    """Inject dependencies from the application startup.

    Args:
        price_history: A ``PriceHistoryCache`` (or duck-type for tests).
    """
    global _price_history  # noqa: PLW0603
    _price_history = price_history


def record_signal(signal_data: dict) -> None:
    """Append one waiter decision to the signal history log."""
    entry = {
        "instrument": signal_data.get("instrument", ""),
        "side": signal_data.get("side", ""),
        "status": signal_data.get("status", ""),
        "reason": signal_data.get("reason", ""),
        "evaluated_at": signal_data.get("evaluated_at", ""),
    }
    _signal_history.append(entry)
    if len(_signal_history) > _MAX_HISTORY:
        del _signal_history[0]


def clear_signals() -> None:
    _signal_history.clear()


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/signals")
async def get_signals(
    instrument: Optional[str] = Query(None, description="Filter by mint"),
    limit: int = Query(50, ge=1, le=_MAX_HISTORY),
):
    """Return recent buy/sell decisions, newest first."""
    entries = [
        e for e in reversed(_signal_history)
        if instrument is None or e["instrument"] == instrument
    ]
    return {"signals": entries[:limit]}


@router.get("/tracked")
async def get_tracked():
    """Return instruments registered in the price history cache."""
    if _price_history is None:
        return {"instruments": []}
    return {"instruments": _price_history.snapshot()}
