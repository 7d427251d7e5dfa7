"""Ordered in-process event channel for the live pipeline.

Recognition callbacks arrive on the event loop one at a time; the channel
hands each one to subscribers synchronously and in registration order, so
the controller sees events exactly in the order the engine produced them.

Design:
- Synchronous dispatch (no task hop between engine callback and handler)
- Handler registration by event type
- Continue-on-error: a failing handler is logged, later handlers still run

Usage:
    channel = EventChannel()

    @channel.on("recognition.final")
    def handle_final(event_type, data):
        print(data["text"])

    channel.emit("recognition.final", {"text": "namaskara"})
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

# Event types published by RecognitionSession
RECOGNITION_PARTIAL = "recognition.partial"
RECOGNITION_FINAL = "recognition.final"
RECOGNITION_ERROR = "recognition.error"
RECOGNITION_STATUS = "recognition.status"
RECOGNITION_ENDED = "recognition.ended"


class EventHandler(Protocol):
    """Protocol for event handlers."""

    def __call__(self, event_type: str, data: dict[str, Any]) -> None:
        ...


class EventChannel:
    """Publish-subscribe channel with synchronous, ordered delivery."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def on(self, event_type: str) -> Callable[[EventHandler], EventHandler]:
        """Decorator to register an event handler.

        Example:
            @channel.on("recognition.partial")
            def handle_partial(event_type, data):
                ...
        """

        def decorator(handler: EventHandler) -> EventHandler:
            self.subscribe(event_type, handler)
            return handler

        return decorator

    def emit(self, event_type: str, data: dict[str, Any] | None = None) -> int:
        """Deliver an event to every subscriber before returning.

        Returns:
            Number of handlers that ran without raising
        """
        if self._closed:
            logger.debug("Event dropped on closed channel", extra={"event_type": event_type})
            return 0

        payload = data or {}
        delivered = 0
        for handler in self._handlers.get(event_type, [])[:]:
            try:
                handler(event_type, payload)
                delivered += 1
            except Exception:
                logger.error(
                    f"Event handler failed: {event_type}",
                    exc_info=True,
                    extra={"event_type": event_type},
                )
        return delivered

    def close(self) -> None:
        """Drop all handlers; later emits are ignored."""
        self._handlers.clear()
        self._closed = True
