from typing import Any

import httpx

from intake.notification.base import BaseNotifier
from intake.notification.exceptions import (
    NotificationError,
    NotificationNetworkError,
    NotificationNotConfiguredError,
)
from intake.notification.models import NotifierStatus


class TelegramNotifier(BaseNotifier):
    """Sends messages through the Telegram Bot API."""

    name = "Telegram Bot"

    def __init__(
        self,
        *,
        bot_token: str,
        chat_id: str,
        api_base_url: str = "https://api.telegram.org",
        timeout_seconds: int = 10,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._api_base_url = api_base_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self._bot_token and self._chat_id)

    def send_message(self, text: str) -> None:
        if not self.is_configured:
            raise NotificationNotConfiguredError("Telegram bot token or chat id is missing")
        self._call(
            "sendMessage",
            json={"chat_id": self._chat_id, "text": text, "parse_mode": "HTML"},
        )

    def status(self) -> NotifierStatus:
        if not self._bot_token:
            return NotifierStatus(configured=False, connected=False, provider="telegram")
        try:
            bot = self._call("getMe")
        except NotificationError as exc:
            return NotifierStatus(
                configured=self.is_configured,
                connected=False,
                provider="telegram",
                error=str(exc),
            )
        return NotifierStatus(
            configured=self.is_configured,
            connected=True,
            provider="telegram",
            username=bot.get("username"),
        )

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self._api_base_url}/bot{self._bot_token}/{method}"
        try:
            response = self._client.post(url, json=json or {})
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise NotificationNetworkError(f"Telegram {method} network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise NotificationError(f"Telegram {method} failed: {exc}") from exc

        if response.status_code == 429 or response.status_code >= 500:
            raise NotificationNetworkError(
                f"Telegram {method} returned HTTP {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise NotificationError(f"Telegram {method} returned invalid JSON") from exc
        if not payload.get("ok"):
            raise NotificationError(
                f"Telegram {method} rejected: {payload.get('description', 'unknown error')}"
            )
        result = payload.get("result")
        return result if isinstance(result, dict) else {}
