"""Tests for TelegramClient request shapes against a mocked Bot API."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio

from models.keyboards import done_keyboard
from services.telegram_client import TelegramClient
from utils.errors import TelegramApiError

BASE = "https://api.test"
TOKEN = "123:abc"


class FakeBotApi:
    """Route Bot API requests to canned responses and record them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.path.rsplit("/", 1)[-1]
        if request.url.path.startswith(f"/file/bot{TOKEN}/"):
            key = "download"
        response = self.responses.get(key)
        if response is None:
            return httpx.Response(200, json={"ok": True, "result": True})
        return response


@pytest.fixture
def api() -> FakeBotApi:
    return FakeBotApi()


@pytest_asyncio.fixture
async def client(api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(api.handler)) as http:
        yield TelegramClient(TOKEN, http, base_url=BASE)


def test_token_required():
    with pytest.raises(ValueError):
        TelegramClient("", None)


@pytest.mark.asyncio
async def test_send_text_posts_json_with_markup(client, api):
    await client.send_text(5, "hello", done_keyboard())

    request = api.requests[-1]
    assert request.url.path == f"/bot{TOKEN}/sendMessage"
    body = json.loads(request.content)
    assert body == {
        "chat_id": 5,
        "text": "hello",
        "reply_markup": {"inline_keyboard": [[{"text": "✅ Done", "callback_data": "COMPRESS_DONE"}]]},
    }


@pytest.mark.asyncio
async def test_send_text_without_keyboard_omits_markup(client, api):
    await client.send_text(5, "plain")

    body = json.loads(api.requests[-1].content)
    assert "reply_markup" not in body


@pytest.mark.asyncio
async def test_send_photo_uses_multipart(client, api):
    await client.send_photo(5, b"\xff\xd8jpeg", "caption text", done_keyboard())

    request = api.requests[-1]
    assert request.url.path == f"/bot{TOKEN}/sendPhoto"
    assert request.headers["content-type"].startswith("multipart/form-data")
    content = request.content
    assert b"\xff\xd8jpeg" in content
    assert b"caption text" in content
    assert b'"callback_data": "COMPRESS_DONE"' in content
    assert b'name="chat_id"' in content


@pytest.mark.asyncio
async def test_answer_action(client, api):
    await client.answer_action("cb-9")

    request = api.requests[-1]
    assert request.url.path == f"/bot{TOKEN}/answerCallbackQuery"
    assert json.loads(request.content) == {"callback_query_id": "cb-9"}


@pytest.mark.asyncio
async def test_fetch_file_resolves_path_then_downloads(client, api):
    api.responses["getFile"] = httpx.Response(
        200, json={"ok": True, "result": {"file_id": "f1", "file_path": "photos/file_1.jpg"}}
    )
    api.responses["download"] = httpx.Response(200, content=b"raw-bytes")

    data = await client.fetch_file("f1")

    assert data == b"raw-bytes"
    assert api.requests[0].url.path == f"/bot{TOKEN}/getFile"
    assert api.requests[1].url.path == f"/file/bot{TOKEN}/photos/file_1.jpg"


@pytest.mark.asyncio
async def test_fetch_file_download_error(client, api):
    api.responses["getFile"] = httpx.Response(200, json={"ok": True, "result": {"file_path": "x.jpg"}})
    api.responses["download"] = httpx.Response(404, content=b"")

    with pytest.raises(TelegramApiError):
        await client.fetch_file("f1")


@pytest.mark.asyncio
async def test_fetch_file_missing_path(client, api):
    api.responses["getFile"] = httpx.Response(200, json={"ok": True, "result": {"file_id": "f1"}})

    with pytest.raises(TelegramApiError):
        await client.fetch_file("f1")


@pytest.mark.asyncio
async def test_api_error_is_raised(client, api):
    api.responses["sendMessage"] = httpx.Response(
        400, json={"ok": False, "error_code": 400, "description": "Bad Request: chat not found"}
    )

    with pytest.raises(TelegramApiError) as excinfo:
        await client.send_text(5, "hello")

    assert excinfo.value.method == "sendMessage"
    assert excinfo.value.status_code == 400
    assert "chat not found" in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_json_response_is_an_error(client, api):
    api.responses["sendMessage"] = httpx.Response(502, content=b"<html>bad gateway</html>")

    with pytest.raises(TelegramApiError):
        await client.send_text(5, "hello")


@pytest.mark.asyncio
async def test_network_error_is_wrapped():
    def _boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_boom)) as http:
        client = TelegramClient(TOKEN, http, base_url=BASE)
        with pytest.raises(TelegramApiError):
            await client.send_text(5, "hello")


@pytest.mark.asyncio
async def test_get_updates_passes_offset(client, api):
    api.responses["getUpdates"] = httpx.Response(
        200, json={"ok": True, "result": [{"update_id": 10, "message": {"chat": {"id": 1}, "text": "hi"}}]}
    )

    updates = await client.get_updates(offset=10, timeout=5)

    assert updates[0]["update_id"] == 10
    body = json.loads(api.requests[-1].content)
    assert body["offset"] == 10
    assert body["timeout"] == 5
    assert body["allowed_updates"] == ["message", "callback_query"]


@pytest.mark.asyncio
async def test_set_webhook_sends_secret(client, api):
    assert await client.set_webhook("https://bot.example/telegram/webhook", secret_token="s3cret")

    body = json.loads(api.requests[-1].content)
    assert body["url"] == "https://bot.example/telegram/webhook"
    assert body["secret_token"] == "s3cret"
