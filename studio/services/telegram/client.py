from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import httpx

from ..exceptions import ConfigurationError, NotificationDeliveryError

logger = logging.getLogger("telegram.client")

DATA_URL_PREFIX = "data:image/"


def decode_data_url(value: str) -> tuple[bytes, str]:
    """Split an inline ``data:image/...;base64,`` reference into bytes and mime type."""

    header, _, encoded = value.partition(",")
    mime_type = header[len("data:"):].split(";", 1)[0] or "image/jpeg"
    try:
        return base64.b64decode(encoded, validate=True), mime_type
    except (binascii.Error, ValueError) as exc:
        raise NotificationDeliveryError("Design image is not valid base64 data") from exc


class TelegramBotClient:
    """Minimal Bot API client covering sendMessage and sendPhoto."""

    def __init__(
        self,
        *,
        token: str | None,
        api_base_url: str = "https://api.telegram.org",
        transport: httpx.BaseTransport | None = None,
    ):
        if not token:
            raise ConfigurationError("Telegram bot token is not configured")
        self._client = httpx.Client(base_url=f"{api_base_url.rstrip('/')}/bot{token}", transport=transport)

    def __enter__(self) -> "TelegramBotClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _post(self, method: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.post(f"/{method}", **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Telegram %s request failed: %s", method, exc)
            raise NotificationDeliveryError(f"Telegram {method} request failed: {exc}") from exc
        if response.is_error:
            logger.error("Telegram %s returned %s: %s", method, response.status_code, response.text)
            raise NotificationDeliveryError(f"Telegram API error: {response.text}")
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Telegram %s answered with a non-JSON body: %s", method, response.text[:200])
            raise NotificationDeliveryError(f"Telegram {method} returned an unreadable response") from exc

    def send_message(self, chat_id: str, text: str, *, markdown: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if markdown:
            payload["parse_mode"] = "Markdown"
        return self._post("sendMessage", json=payload)

    def send_photo(self, chat_id: str, photo: str, *, caption: str) -> dict[str, Any]:
        if photo.startswith(DATA_URL_PREFIX):
            content, mime_type = decode_data_url(photo)
            return self._post(
                "sendPhoto",
                data={"chat_id": chat_id, "caption": caption, "parse_mode": "Markdown"},
                files={"photo": ("design.jpg", content, mime_type)},
            )
        return self._post(
            "sendPhoto",
            json={"chat_id": chat_id, "photo": photo, "caption": caption, "parse_mode": "Markdown"},
        )
