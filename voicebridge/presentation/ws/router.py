"""WebSocket message router for /ws/live."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from voicebridge.application.live.controller import PipelineController
from voicebridge.infrastructure.telemetry.logging import get_logger
from voicebridge.presentation.ws.bridge import (
    Outbox,
    RemoteRecognitionEngine,
    RemoteSynthesisEngine,
)

logger = get_logger(__name__)


@dataclass
class LiveConnection:
    """Per-socket state: one controller and the remote engines it drives."""

    connection_id: str
    outbox: Outbox
    controller: PipelineController
    recognition: RemoteRecognitionEngine | None = None
    synthesis: RemoteSynthesisEngine | None = None
    received_count: int = field(default=0)

    def send_error(self, code: str, message: str) -> None:
        self.outbox.send("error", {"code": code, "message": message})


# Type alias for message handlers
MessageHandler = Callable[[LiveConnection, dict[str, Any]], Awaitable[None]]


class MessageRouter:
    """Routes WebSocket messages to handlers by `type`."""

    def __init__(self) -> None:
        self._handlers: dict[str, MessageHandler] = {}

    def register(self, message_type: str, handler: MessageHandler) -> None:
        self._handlers[message_type] = handler

    def handler(self, message_type: str) -> Callable[[MessageHandler], MessageHandler]:
        """Decorator to register a message handler.

        Usage:
            @router.handler("ping")
            async def handle_ping(connection, payload):
                ...
        """

        def decorator(func: MessageHandler) -> MessageHandler:
            self.register(message_type, func)
            return func

        return decorator

    async def route(self, connection: LiveConnection, message: Any) -> None:
        connection.received_count += 1
        message_type = message.get("type") if isinstance(message, dict) else None

        if not message_type:
            logger.warning("Message missing type field")
            connection.send_error("INVALID_MESSAGE", "Message must include 'type' field")
            return

        handler = self._handlers.get(message_type)
        if handler is None:
            logger.warning("Unknown message type", extra={"message_type": message_type})
            connection.send_error("UNKNOWN_MESSAGE_TYPE", f"Unknown message type: {message_type}")
            return

        payload = message.get("payload") or {}
        if not isinstance(payload, dict):
            connection.send_error("INVALID_MESSAGE", "'payload' must be an object")
            return

        try:
            await handler(connection, payload)
        except Exception as e:
            logger.error(
                "Handler error",
                extra={"message_type": message_type, "error": str(e)},
                exc_info=True,
            )
            connection.send_error("HANDLER_ERROR", "An error occurred processing your request")


router = MessageRouter()


def _require_recognition(connection: LiveConnection) -> RemoteRecognitionEngine | None:
    if connection.recognition is None:
        connection.send_error("UNSUPPORTED", "Recognition is not available on this connection")
    return connection.recognition


def _require_synthesis(connection: LiveConnection) -> RemoteSynthesisEngine | None:
    if connection.synthesis is None:
        connection.send_error("UNSUPPORTED", "Synthesis is not available on this connection")
    return connection.synthesis


@router.handler("ping")
async def handle_ping(connection: LiveConnection, payload: dict[str, Any]) -> None:
    connection.outbox.send("pong", payload)


@router.handler("session.configure")
async def handle_configure(connection: LiveConnection, payload: dict[str, Any]) -> None:
    voice_output = payload.get("voiceOutput")
    connection.controller.configure(
        source_lang=payload.get("sourceLang"),
        target_lang=payload.get("targetLang"),
        voice_output=bool(voice_output) if voice_output is not None else None,
    )


@router.handler("listen.start")
async def handle_listen_start(connection: LiveConnection, payload: dict[str, Any]) -> None:
    connection.controller.start_listening()


@router.handler("listen.stop")
async def handle_listen_stop(connection: LiveConnection, payload: dict[str, Any]) -> None:
    connection.controller.stop_listening()


@router.handler("listen.toggle")
async def handle_listen_toggle(connection: LiveConnection, payload: dict[str, Any]) -> None:
    connection.controller.toggle_listening()


@router.handler("recognition.result")
async def handle_recognition_result(connection: LiveConnection, payload: dict[str, Any]) -> None:
    if engine := _require_recognition(connection):
        engine.deliver_result(payload)


@router.handler("recognition.error")
async def handle_recognition_error(connection: LiveConnection, payload: dict[str, Any]) -> None:
    if engine := _require_recognition(connection):
        engine.deliver_error(payload)


@router.handler("recognition.end")
async def handle_recognition_end(connection: LiveConnection, payload: dict[str, Any]) -> None:
    if engine := _require_recognition(connection):
        engine.deliver_end()


@router.handler("synthesis.voices")
async def handle_synthesis_voices(connection: LiveConnection, payload: dict[str, Any]) -> None:
    if engine := _require_synthesis(connection):
        engine.deliver_voices(payload)


@router.handler("synthesis.end")
async def handle_synthesis_end(connection: LiveConnection, payload: dict[str, Any]) -> None:
    if engine := _require_synthesis(connection):
        engine.deliver_end(payload)


# Translation and speech suspend; they run as tasks so the receive loop keeps
# delivering recognition events meanwhile.


@router.handler("translate")
async def handle_translate(connection: LiveConnection, payload: dict[str, Any]) -> None:
    text = payload.get("text")
    connection.controller.run_in_background(
        connection.controller.translate_text(text if isinstance(text, str) else None),
        name="translate.manual",
    )


@router.handler("speak")
async def handle_speak(connection: LiveConnection, payload: dict[str, Any]) -> None:
    text = payload.get("text")
    connection.controller.run_in_background(
        connection.controller.speak(text if isinstance(text, str) else None),
        name="speak.manual",
    )
