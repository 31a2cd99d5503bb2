"""In-memory price history cache — one append-only price series per mint.

Registration state is shared between concurrently running waiters, so
every access goes through a lock.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class _TrackedInstrument:
    prices: list[float] = field(default_factory=list)
    done: bool = False
    registered_at: str = ""


class PriceHistoryCache:
    """Accumulates observed prices for instruments awaiting a buy signal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, _TrackedInstrument] = {}

    # ── Lifecycle ────────────────────────────────────────────────────────

    def register(self, instrument: str) -> None:
        """Start (or resume) price accumulation for *instrument*.

        Idempotent.  Re-registering a finished mint re-activates it and
        keeps its existing prices.
        """
        with self._lock:
            entry = self._entries.get(instrument)
            if entry is None:
                self._entries[instrument] = _TrackedInstrument(
                    registered_at=datetime.now(timezone.utc).isoformat(),
                )
            else:
                entry.done = False

    def mark_done(self, instrument: str) -> None:
        """Stop accumulating prices for *instrument*.  Unknown mints are ignored."""
        with self._lock:
            entry = self._entries.get(instrument)
            if entry is not None:
                entry.done = True

    def prune_done(self) -> int:
        """Drop finished entries.  Returns how many were removed."""
        with self._lock:
            finished = [k for k, v in self._entries.items() if v.done]
            for key in finished:
                del self._entries[key]
            return len(finished)

    # ── Prices ───────────────────────────────────────────────────────────

    def add_price(self, instrument: str, price: float) -> bool:
        """Append *price* if *instrument* is actively tracked.

        Returns ``True`` when the price was recorded.
        """
        with self._lock:
            entry = self._entries.get(instrument)
            if entry is None or entry.done:
                return False
            entry.prices.append(float(price))
            return True

    def get_prices(self, instrument: str) -> Optional[list[float]]:
        """Return a copy of the price series, or ``None`` if nothing is recorded."""
        with self._lock:
            entry = self._entries.get(instrument)
            if entry is None or not entry.prices:
                return None
            return list(entry.prices)

    # ── Queries ──────────────────────────────────────────────────────────

    def active_instruments(self) -> list[str]:
        with self._lock:
            return [k for k, v in self._entries.items() if not v.done]

    def is_active(self, instrument: str) -> bool:
        with self._lock:
            entry = self._entries.get(instrument)
            return entry is not None and not entry.done

    def snapshot(self) -> list[dict]:
        """Per-mint summary for the status API."""
        with self._lock:
            return [
                {
                    "instrument": key,
                    "samples": len(entry.prices),
                    "last_price": entry.prices[-1] if entry.prices else None,
                    "done": entry.done,
                    "registered_at": entry.registered_at,
                }
                for key, entry in self._entries.items()
            ]
