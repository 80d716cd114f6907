"""FastAPI routes receiving Bot API updates over a webhook."""

import logging
import secrets

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from controllers.conversation_controller import ConversationController
from models.chat_events import parse_update

LOGGER = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

router = APIRouter(prefix="/telegram")


def _get_controller(request: Request) -> ConversationController:
	"""Retrieve the shared conversation controller from the app state."""
	controller = getattr(request.app.state, "controller", None)
	if controller is None:
		raise HTTPException(status_code=500, detail="Conversation controller not initialized.")
	return controller


def _check_secret(request: Request) -> None:
	settings = getattr(request.app.state, "settings", None)
	expected = getattr(settings, "webhook_secret", None)
	if not expected:
		return
	supplied = request.headers.get(SECRET_HEADER) or ""
	if not secrets.compare_digest(supplied, expected):
		raise HTTPException(status_code=403, detail="Invalid webhook secret")


@router.get("/webhook", response_class=PlainTextResponse)
async def webhook_health():
	"""Answer platform health-check GETs."""
	return "OK"


@router.post("/webhook", response_class=PlainTextResponse)
async def receive_update(request: Request):
	"""Handle one update and acknowledge it with `OK`, or `Error` on failure."""
	_check_secret(request)
	try:
		update = await request.json()
		event = parse_update(update)
		if event is not None:
			await _get_controller(request).handle(event)
	except Exception:  # pylint: disable=broad-exception-caught
		LOGGER.exception("Error handling update")
		return PlainTextResponse("Error", status_code=500)
	return "OK"
