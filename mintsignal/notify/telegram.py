"""Telegram Bot API notifier.

Sends HTML alerts through ``sendMessage``.  Without credentials the alert
is only logged.
"""

import logging

import httpx

from mintsignal.config import Config

logger = logging.getLogger("mintsignal")

_TELEGRAM_API_URL = "https://api.telegram.org"


class NotificationError(Exception):
    """An alert could not be delivered."""


class TelegramNotifier:
    """Async notifier posting to a single Telegram chat."""

    def __init__(self, config: Config) -> None:
        self._token = config.telegram_bot_token
        self._chat_id = config.telegram_chat_id
        self._enabled = config.telegram_enabled

    async def send(self, message: str, instrument: str) -> None:
        """Deliver *message* about *instrument*.

        Raises ``NotificationError`` if Telegram rejects the message or
        cannot be reached.
        """
        if not self._enabled:
            logger.info("Notification for %s (Telegram disabled): %s", instrument, message)
            return

        url = f"{_TELEGRAM_API_URL}/bot{self._token}/sendMessage"
        payload = {
            "chat_id": self._chat_id,
            "text": message,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(url, json=payload, timeout=10.0)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise NotificationError(
                f"Telegram sendMessage failed for {instrument}: {exc}"
            ) from exc

        logger.debug("Sent Telegram notification for %s", instrument)
