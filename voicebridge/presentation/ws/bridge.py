"""Adapters that let a browser connection stand in for the host speech engines.

The browser owns the microphone and the speakers. Over /ws/live it receives
commands (`recognition.start`, `synthesis.speak`, ...) and reports what its
engines did (`recognition.result`, `synthesis.end`, ...). The classes here
turn that traffic into the RecognitionEngine, SynthesisEngine and
PipelineView contracts, so the controller cannot tell it is remote.

Outbound messages are queued and written by one sender task; engine calls
stay synchronous and their order on the wire matches the call order.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from typing import Any

from fastapi import WebSocket

from voicebridge.domain.protocols.capabilities import (
    RecognitionAlternative,
    RecognitionErrorEvent,
    RecognitionResult,
    RecognitionResultEvent,
    SynthesisVoice,
    Utterance,
)
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

_CLOSE = object()


class Outbox:
    """FIFO of server -> client messages."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False
        self.sent_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message_type: str, payload: dict[str, Any] | None = None) -> None:
        if self._closed:
            logger.debug("Outbound message dropped", extra={"message_type": message_type})
            return
        self._queue.put_nowait({"type": message_type, "payload": payload or {}})

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSE)

    async def pump(self, websocket: WebSocket) -> None:
        """Write queued messages until closed."""
        while True:
            message = await self._queue.get()
            if message is _CLOSE:
                return
            await websocket.send_json(message)
            self.sent_count += 1


# --- Inbound payload parsing ---


def parse_result_event(payload: dict[str, Any]) -> RecognitionResultEvent:
    """Parse `{resultIndex, results: [{isFinal, alternatives: [{transcript, confidence}]}]}`."""
    results = []
    for raw in payload.get("results") or []:
        alternatives = tuple(
            RecognitionAlternative(
                transcript=str(alt.get("transcript", "")),
                confidence=alt.get("confidence"),
            )
            for alt in raw.get("alternatives") or []
        )
        results.append(RecognitionResult(alternatives=alternatives, is_final=bool(raw.get("isFinal"))))
    return RecognitionResultEvent(
        results=tuple(results),
        result_index=int(payload.get("resultIndex") or 0),
    )


def parse_voices(payload: dict[str, Any]) -> list[SynthesisVoice]:
    return [
        SynthesisVoice(
            name=str(v.get("name", "")),
            lang=str(v.get("lang", "")),
            default=bool(v.get("default", False)),
        )
        for v in payload.get("voices") or []
    ]


# --- Engines ---


class RemoteRecognitionEngine:
    """RecognitionEngine backed by the browser's SpeechRecognition."""

    def __init__(self, outbox: Outbox) -> None:
        self._outbox = outbox
        self._running = False
        self.lang = "en-US"
        self.continuous = False
        self.interim_results = False
        self.max_alternatives = 1
        self.on_result: Callable[[RecognitionResultEvent], None] | None = None
        self.on_error: Callable[[RecognitionErrorEvent], None] | None = None
        self.on_end: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            raise RuntimeError("recognition has already started")
        if self._outbox.closed:
            raise RuntimeError("connection closed")
        self._running = True
        self._outbox.send(
            "recognition.start",
            {
                "lang": self.lang,
                "continuous": self.continuous,
                "interimResults": self.interim_results,
                "maxAlternatives": self.max_alternatives,
            },
        )

    def stop(self) -> None:
        self._outbox.send("recognition.stop")

    def deliver_result(self, payload: dict[str, Any]) -> None:
        if self.on_result is not None:
            self.on_result(parse_result_event(payload))

    def deliver_error(self, payload: dict[str, Any]) -> None:
        if self.on_error is not None:
            self.on_error(
                RecognitionErrorEvent(
                    error=str(payload.get("error", "")),
                    message=str(payload.get("message", "")),
                )
            )

    def deliver_end(self) -> None:
        self._running = False
        if self.on_end is not None:
            self.on_end()


class RemoteSynthesisEngine:
    """SynthesisEngine backed by the browser's speechSynthesis."""

    def __init__(self, outbox: Outbox) -> None:
        self._outbox = outbox
        self._voices: list[SynthesisVoice] = []
        self._utterances: dict[int, Utterance] = {}
        self._ids = itertools.count(1)
        self.on_voices_changed: Callable[[], None] | None = None

    def get_voices(self) -> list[SynthesisVoice]:
        return list(self._voices)

    def speak(self, utterance: Utterance) -> None:
        utterance_id = next(self._ids)
        self._utterances[utterance_id] = utterance
        voice = utterance.voice
        self._outbox.send(
            "synthesis.speak",
            {
                "id": utterance_id,
                "text": utterance.text,
                "lang": utterance.lang,
                "voice": getattr(voice, "name", None),
            },
        )

    def cancel(self) -> None:
        self._outbox.send("synthesis.cancel")

    def deliver_voices(self, payload: dict[str, Any]) -> None:
        self._voices = parse_voices(payload)
        logger.debug("Client voices received", extra={"voice_count": len(self._voices)})
        if self.on_voices_changed is not None:
            self.on_voices_changed()

    def deliver_end(self, payload: dict[str, Any]) -> None:
        utterance = self._utterances.pop(int(payload.get("id") or 0), None)
        if utterance is not None and utterance.on_end is not None:
            utterance.on_end()


# --- View ---


class WebSocketView:
    """PipelineView that mirrors every update to the client."""

    def __init__(self, outbox: Outbox) -> None:
        self._outbox = outbox

    def set_status(self, text: str, is_error: bool = False) -> None:
        self._outbox.send("view.status", {"text": text, "isError": is_error})

    def set_source_text(self, text: str) -> None:
        self._outbox.send("view.source_text", {"text": text})

    def set_translated_text(self, text: str) -> None:
        self._outbox.send("view.translated_text", {"text": text})

    def set_listening(self, listening: bool) -> None:
        self._outbox.send("view.listening", {"listening": listening})

    def set_controls(self, *, listen_available: bool, speak_available: bool) -> None:
        self._outbox.send(
            "view.controls",
            {"listenAvailable": listen_available, "speakAvailable": speak_available},
        )
