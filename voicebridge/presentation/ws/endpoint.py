"""WebSocket endpoint hosting one live pipeline per connection."""

import asyncio
import contextlib
from uuid import uuid4

import httpx
from fastapi import WebSocket, WebSocketDisconnect

from voicebridge.application.live.controller import PipelineController
from voicebridge.application.live.translation_client import TranslationClient
from voicebridge.config import Settings
from voicebridge.infrastructure.telemetry.logging import (
    clear_request_context,
    get_logger,
    set_request_context,
)
from voicebridge.infrastructure.telemetry.metrics import LIVE_SESSIONS_ACTIVE
from voicebridge.presentation.ws.bridge import (
    Outbox,
    RemoteRecognitionEngine,
    RemoteSynthesisEngine,
    WebSocketView,
)
from voicebridge.presentation.ws.router import LiveConnection, router

logger = get_logger(__name__)

IN_PROCESS_BASE_URL = "http://voicebridge"


def _flag(value: str | None, default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _translation_http_client(websocket: WebSocket, settings: Settings) -> httpx.AsyncClient:
    """Client for POST /translate: the configured base URL, else this app in-process."""
    if settings.live_translate_base_url:
        return httpx.AsyncClient(
            base_url=settings.live_translate_base_url,
            timeout=settings.provider_timeout_seconds,
        )
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=websocket.app),
        base_url=IN_PROCESS_BASE_URL,
        timeout=settings.provider_timeout_seconds,
    )


async def live_websocket_endpoint(websocket: WebSocket) -> None:
    """Live pipeline over WebSocket.

    Query parameters `recognition` and `synthesis` (default "1") tell the
    server which engines the client actually has; a missing one is degraded
    once at startup.
    """
    settings: Settings = websocket.app.state.settings
    connection_id = uuid4().hex
    set_request_context(session_id=connection_id)

    await websocket.accept()

    outbox = Outbox()
    recognition = (
        RemoteRecognitionEngine(outbox)
        if _flag(websocket.query_params.get("recognition"))
        else None
    )
    synthesis = (
        RemoteSynthesisEngine(outbox)
        if _flag(websocket.query_params.get("synthesis"))
        else None
    )

    http_client = _translation_http_client(websocket, settings)
    controller = PipelineController(
        WebSocketView(outbox),
        TranslationClient(client=http_client),
        recognition,
        synthesis,
        source_lang=settings.default_source_lang,
        region=settings.default_region,
        debounce_window_seconds=settings.debounce_window_seconds,
        fallback_languages=settings.voice_fallback_list,
    )
    connection = LiveConnection(
        connection_id=connection_id,
        outbox=outbox,
        controller=controller,
        recognition=recognition,
        synthesis=synthesis,
    )

    sender = asyncio.create_task(outbox.pump(websocket), name="ws.sender")
    LIVE_SESSIONS_ACTIVE.inc()
    logger.info(
        "Live session opened",
        extra={
            "recognition_available": recognition is not None,
            "synthesis_available": synthesis is not None,
        },
    )

    controller.startup()

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError as e:
                logger.warning("Invalid JSON received", extra={"error": str(e)})
                connection.send_error("INVALID_JSON", "Message must be valid JSON")
                continue
            await router.route(connection, message)
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected by client")
    finally:
        await controller.aclose()
        await http_client.aclose()
        outbox.close()
        with contextlib.suppress(Exception):
            await asyncio.wait_for(sender, timeout=2.0)
        if not sender.done():
            sender.cancel()
        LIVE_SESSIONS_ACTIVE.dec()
        logger.info(
            "Live session closed",
            extra={"received": connection.received_count, "sent": outbox.sent_count},
        )
        clear_request_context()
