"""Telegram Bot API client used as the chat transport."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from models.keyboards import Keyboard, inline_markup
from utils.config import DEFAULT_API_BASE_URL
from utils.errors import TelegramApiError

LOGGER = logging.getLogger(__name__)


class TelegramClient:
    """Thin async wrapper over the Bot API HTTP endpoints.

    Implements the `ChatTransport` protocol plus the update and webhook calls
    needed by the polling and webhook entry points.
    """

    def __init__(
        self,
        token: str,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        """Initialize the client.

        Args:
            token: Bot API token.
            http_client: Shared async HTTP client; its lifecycle is owned by the caller.
            base_url: Bot API root URL.
        """
        if not token:
            raise ValueError("A bot token is required.")
        self.token = token
        self.http = http_client
        self.base_url = base_url.rstrip("/")

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    def _file_url(self, file_path: str) -> str:
        return f"{self.base_url}/file/bot{self.token}/{file_path}"

    async def _call(
        self,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """POST one Bot API method and return its `result` field.

        Raises:
            TelegramApiError: On transport failures, non-JSON bodies, or `ok: false`.
        """
        params = {k: v for k, v in (payload or {}).items() if v is not None}
        request_kwargs: Dict[str, Any] = {}
        if timeout is not None:
            request_kwargs["timeout"] = timeout
        try:
            if files:
                # Multipart fields must be strings; nested objects travel as JSON
                form = {k: v if isinstance(v, str) else json.dumps(v) for k, v in params.items()}
                response = await self.http.post(self._method_url(method), data=form, files=files, **request_kwargs)
            else:
                response = await self.http.post(self._method_url(method), json=params, **request_kwargs)
        except httpx.HTTPError as exc:
            raise TelegramApiError(method, f"request error: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise TelegramApiError(method, "response is not JSON", response.status_code) from exc

        if not body.get("ok"):
            description = body.get("description") or f"HTTP {response.status_code}"
            raise TelegramApiError(method, description, response.status_code)
        return body.get("result")

    async def get_updates(self, offset: Optional[int] = None, timeout: float = 30.0) -> List[Dict[str, Any]]:
        """Long-poll for new updates starting at `offset`."""
        result = await self._call(
            "getUpdates",
            {
                "offset": offset,
                "timeout": int(timeout),
                "allowed_updates": ["message", "callback_query"],
            },
            timeout=timeout + 10,
        )
        return list(result or [])

    async def get_file(self, file_id: str) -> Dict[str, Any]:
        """Return the File object describing a stored file."""
        return await self._call("getFile", {"file_id": file_id})

    async def fetch_file(self, file_id: str) -> bytes:
        """Resolve a file id to a download path and return the file bytes."""
        info = await self.get_file(file_id)
        file_path = (info or {}).get("file_path")
        if not file_path:
            raise TelegramApiError("getFile", f"no file_path returned for {file_id}")
        try:
            response = await self.http.get(self._file_url(file_path))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TelegramApiError("download", f"could not download {file_path}: {exc}") from exc
        return response.content

    async def send_message(self, chat_id: int, text: str, reply_markup: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._call("sendMessage", {"chat_id": chat_id, "text": text, "reply_markup": reply_markup})

    async def send_photo_bytes(
        self,
        chat_id: int,
        data: bytes,
        caption: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
        filename: str = "compressed.jpg",
    ) -> Dict[str, Any]:
        return await self._call(
            "sendPhoto",
            {"chat_id": str(chat_id), "caption": caption, "reply_markup": reply_markup},
            files={"photo": (filename, data, "image/jpeg")},
        )

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> bool:
        return bool(await self._call("answerCallbackQuery", {"callback_query_id": callback_query_id, "text": text}))

    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> bool:
        LOGGER.info("Registering webhook at %s", url)
        return bool(
            await self._call(
                "setWebhook",
                {
                    "url": url,
                    "secret_token": secret_token,
                    "allowed_updates": ["message", "callback_query"],
                },
            )
        )

    async def delete_webhook(self) -> bool:
        return bool(await self._call("deleteWebhook", {}))

    # ChatTransport protocol

    async def send_text(self, chat_id: int, text: str, keyboard: Optional[Keyboard] = None) -> None:
        await self.send_message(chat_id, text, reply_markup=inline_markup(keyboard))

    async def send_photo(self, chat_id: int, data: bytes, caption: str, keyboard: Optional[Keyboard] = None) -> None:
        await self.send_photo_bytes(chat_id, data, caption=caption, reply_markup=inline_markup(keyboard))

    async def answer_action(self, callback_id: str) -> None:
        await self.answer_callback_query(callback_id)
