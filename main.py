import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request

from controllers.conversation_controller import ConversationController
from routes.webhook_route import router as webhook_router
from services.image_compressor import ImageCompressor
from services.session_store import SessionStore
from services.telegram_client import TelegramClient
from services.transform_adapter import TransformAdapter
from services.transport import ChatTransport
from services.update_poller import UpdatePoller
from utils.config import Settings

LOGGER = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_controller(settings: Settings, transport: ChatTransport) -> ConversationController:
    """Wire the session store, transform adapter, and controller around a transport."""
    store = SessionStore(default_quality=settings.default_quality)
    transformer = TransformAdapter(
        transport,
        ImageCompressor(),
        fetch_timeout=settings.fetch_timeout,
        transform_timeout=settings.transform_timeout,
    )
    return ConversationController(store, transport, transformer)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the shared httpx client and Bot API client
      - the session store and conversation controller
    and attach them to `app.state`. Registers the webhook when WEBHOOK_URL is set.
    """
    settings: Settings = app.state.settings
    http_client = httpx.AsyncClient(timeout=settings.fetch_timeout)
    telegram = TelegramClient(settings.bot_token, http_client, base_url=settings.api_base_url)

    app.state.http_client = http_client
    app.state.telegram = telegram
    app.state.controller = build_controller(settings, telegram)

    try:
        if settings.webhook_url:
            await telegram.set_webhook(settings.webhook_url, secret_token=settings.webhook_secret)
        yield
    finally:
        await http_client.aclose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance (webhook mode).
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting controller presence and live session count.
        """
        controller = getattr(request.app.state, "controller", None)
        return {
            "ok": controller is not None,
            "sessions": len(controller.store) if controller is not None else 0,
        }

    app.include_router(webhook_router)

    return app


async def run_polling(settings: Settings) -> None:
    """Run the bot with long polling until cancelled."""
    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as http_client:
        telegram = TelegramClient(settings.bot_token, http_client, base_url=settings.api_base_url)
        # getUpdates is refused while a webhook is registered
        await telegram.delete_webhook()
        poller = UpdatePoller(
            telegram,
            build_controller(settings, telegram),
            poll_timeout=settings.poll_timeout,
            error_delay=settings.poll_error_delay,
        )
        try:
            await poller.run()
        finally:
            poller.stop()


def main() -> None:
    """Serve the webhook when WEBHOOK_URL is set, otherwise long-poll."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    if settings.webhook_url:
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
        return
    try:
        asyncio.run(run_polling(settings))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
