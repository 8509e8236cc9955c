# File: lesson_scout/notifications.py
"""lesson_scout.notifications: progress messages for the people running crawls."""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from lesson_scout.config import ScraperConfig, TelegramConfig
from lesson_scout.errors import NotificationError
from lesson_scout.logger import get_logger

__all__ = ["Notifier", "LogNotifier", "TelegramNotifier", "build_notifier"]

logger = get_logger(__name__)


class Notifier(Protocol):
    async def send_message(self, text: str) -> None: ...


class LogNotifier:
    """Used when no chat backend is configured."""

    async def send_message(self, text: str) -> None:
        logger.info("[notify] %s", text)


class TelegramNotifier:
    """Sends messages through the Telegram Bot API ``sendMessage`` method."""

    def __init__(self, config: TelegramConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self._session = session

    @property
    def endpoint(self) -> str:
        base = str(self.config.api_base).rstrip("/")
        return f"{base}/bot{self.config.token.get_secret_value()}/sendMessage"

    async def send_message(self, text: str) -> None:
        payload = {"chat_id": self.config.chat_id, "text": text}
        try:
            if self._session is not None:
                await self._post(self._session, payload)
            else:
                timeout = ClientTimeout(total=self.config.timeout)
                async with ClientSession(timeout=timeout) as session:
                    await self._post(session, payload)
        except (ClientError, asyncio.TimeoutError) as exc:
            raise NotificationError(f"telegram sendMessage failed: {exc}") from exc

    async def _post(self, session: ClientSession, payload: dict) -> None:
        async with session.post(self.endpoint, json=payload) as resp:
            if resp.status != 200:
                body = await resp.text()
                raise NotificationError(f"telegram sendMessage returned HTTP {resp.status}: {body[:200]}")


def build_notifier(config: ScraperConfig) -> Notifier:
    if config.telegram is None:
        return LogNotifier()
    return TelegramNotifier(config.telegram)
