from __future__ import annotations

from typing import Any
import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"
MAX_MESSAGE_LENGTH = 4096


class TelegramTransportError(RuntimeError):
    pass


class TelegramClient:
    """Minimal Bot API client: the bot only ever replies with plain text."""

    def __init__(
        self,
        token: str | None,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _method_url(self, method: str) -> str:
        return f"{self.api_base}/bot{self.token}/{method}"

    def send_message(self, chat_id: int | str, text: str) -> dict[str, Any]:
        if not self.token:
            raise TelegramTransportError("BOT_TOKEN is not configured")

        payload = {"chat_id": chat_id, "text": (text or "")[:MAX_MESSAGE_LENGTH]}
        try:
            response = self.session.post(self._method_url("sendMessage"), json=payload, timeout=self.timeout)
        except requests.RequestException as error:
            raise TelegramTransportError(f"sendMessage to chat {chat_id} failed") from error

        try:
            body = response.json()
        except ValueError:
            body = {"ok": False, "description": response.text[:400]}

        logger.info("sendMessage chat=%s status=%s", chat_id, response.status_code)
        if not response.ok or not body.get("ok", False):
            raise TelegramTransportError(
                f"sendMessage to chat {chat_id} rejected: {response.status_code} {body.get('description', '')}"
            )
        return body
