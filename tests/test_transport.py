import json

import httpx
import pytest

from wallet_bot.bot.transport import Button, TelegramError, TelegramTransport, TransportError
from wallet_bot.conversation.commands import Wallets


def _transport(reply: dict, seen: list) -> TelegramTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json=reply)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramTransport("abc:123", api_url="https://tg.test/", client=client)


@pytest.mark.asyncio
async def test_send_message_renders_keyboard_and_returns_id():
    seen = []
    transport = _transport({"ok": True, "result": {"message_id": 77}}, seen)

    message_id = await transport.send_message(42, "hi", keyboard=[[Button("Wallets", Wallets())]], parse_mode="HTML")

    assert message_id == 77
    path, body = seen[0]
    assert path == "/botabc:123/sendMessage"
    assert body["chat_id"] == 42
    assert body["parse_mode"] == "HTML"
    assert body["reply_markup"] == {"inline_keyboard": [[{"text": "Wallets", "callback_data": "wallets"}]]}


@pytest.mark.asyncio
async def test_api_failure_raises_telegram_error():
    seen = []
    transport = _transport({"ok": False, "description": "Bad Request: message to delete not found"}, seen)

    with pytest.raises(TelegramError, match="message to delete not found"):
        await transport.delete_message(42, 5)
    assert seen[0] == ("/botabc:123/deleteMessage", {"chat_id": 42, "message_id": 5})


@pytest.mark.asyncio
async def test_answer_callback():
    seen = []
    transport = _transport({"ok": True, "result": True}, seen)

    await transport.answer_callback("cbq")

    assert seen == [("/botabc:123/answerCallbackQuery", {"callback_query_id": "cbq"})]


def _failing(handler) -> TelegramTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramTransport("abc:123", api_url="https://tg.test", client=client)


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection refused"):
        await _failing(handler).send_message(42, "hi")


@pytest.mark.asyncio
async def test_non_json_gateway_page_raises_telegram_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html><body>Bad Gateway</body></html>")

    with pytest.raises(TelegramError, match="HTTP 502"):
        await _failing(handler).edit_message(42, 5, "hi")
