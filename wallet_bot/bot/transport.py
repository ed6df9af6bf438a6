"""Chat transport contract and the Telegram Bot API implementation."""

from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from ..conversation.commands import Command, encode_callback
from ..logging import get_logger

logger = get_logger("telegram")


@dataclass(frozen=True)
class Button:
    text: str
    command: Command


Keyboard = list[list[Button]]


@dataclass(frozen=True)
class InboundEvent:
    """One update from the chat: either free text or a button press."""
    chat_id: int
    user_id: int
    text: Optional[str] = None
    callback_data: Optional[str] = None
    message_id: Optional[int] = None
    callback_id: Optional[str] = None

    @property
    def is_callback(self) -> bool:
        return self.callback_data is not None


class ChatTransport(Protocol):
    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> Optional[int]: ...

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> None: ...

    async def delete_message(self, chat_id: int, message_id: int) -> None: ...

    async def answer_callback(self, callback_id: str) -> None: ...


class TransportError(Exception):
    """The chat service rejected a request."""


class TelegramError(TransportError):
    """The Bot API answered with ok=false."""


def render_keyboard(keyboard: Keyboard) -> dict:
    return {
        "inline_keyboard": [
            [{"text": b.text, "callback_data": encode_callback(b.command)} for b in row]
            for row in keyboard
        ]
    }


class TelegramTransport:
    """Async client for the Telegram Bot HTTP API."""

    def __init__(self, token: str, api_url: str = "https://api.telegram.org", client: Optional[httpx.AsyncClient] = None):
        self.base_url = f"{api_url.rstrip('/')}/bot{token}"
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def close(self):
        await self._client.aclose()

    async def _call(self, method: str, payload: dict) -> dict:
        try:
            resp = await self._client.post(f"{self.base_url}/{method}", json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Bot API {method} unreachable: {e}")
            raise TransportError(f"{method} failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning(f"Bot API {method} returned a non-JSON body (HTTP {resp.status_code})")
            raise TelegramError(f"HTTP {resp.status_code}") from e

        if not data.get("ok"):
            description = data.get("description", f"HTTP {resp.status_code}")
            logger.warning(f"Bot API {method} failed: {description}")
            raise TelegramError(description)
        return data.get("result") or {}

    @staticmethod
    def _payload(text: str, keyboard: Optional[Keyboard], parse_mode: Optional[str]) -> dict:
        payload: dict = {"text": text, "disable_web_page_preview": True}
        if keyboard is not None:
            payload["reply_markup"] = render_keyboard(keyboard)
        if parse_mode:
            payload["parse_mode"] = parse_mode
        return payload

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> Optional[int]:
        result = await self._call(
            "sendMessage",
            {"chat_id": chat_id, **self._payload(text, keyboard, parse_mode)},
        )
        return result.get("message_id")

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        await self._call(
            "editMessageText",
            {"chat_id": chat_id, "message_id": message_id, **self._payload(text, keyboard, parse_mode)},
        )

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        await self._call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})

    async def answer_callback(self, callback_id: str) -> None:
        await self._call("answerCallbackQuery", {"callback_query_id": callback_id})
