"""Live speech -> translate -> speak pipeline.

PipelineController owns one user's listening lifecycle. Recognition output
arrives through the EventChannel, final text is debounced, the settled text
is translated and the result is shown and optionally spoken. Everything
runs on one event loop; the only suspension points are the translation
response and the voice catalog load.
"""

from __future__ import annotations

import asyncio
import itertools
import time
import uuid
from collections.abc import Coroutine, Iterable
from enum import Enum
from functools import partial
from typing import Any, Protocol

from voicebridge.application.live.debounce import DEFAULT_WINDOW_SECONDS, Debouncer, Scheduler
from voicebridge.application.live.events import (
    RECOGNITION_ENDED,
    RECOGNITION_ERROR,
    RECOGNITION_FINAL,
    RECOGNITION_PARTIAL,
    EventChannel,
)
from voicebridge.application.live.recognition import (
    RecognitionFailure,
    RecognitionSession,
    RecognitionStatus,
)
from voicebridge.application.live.voices import DEFAULT_FALLBACK_LANGUAGES, VoiceCatalog
from voicebridge.domain.entities.transcript import TranscriptState
from voicebridge.domain.entities.translation import TranslationResult
from voicebridge.domain.errors import RecognitionStartError
from voicebridge.domain.languages import recognition_tag, translation_source
from voicebridge.domain.protocols.capabilities import (
    RecognitionEngine,
    SynthesisEngine,
    Utterance,
)
from voicebridge.domain.protocols.view import PipelineView
from voicebridge.infrastructure.telemetry.logging import get_logger, turn_id_var
from voicebridge.infrastructure.telemetry.metrics import record_utterance

logger = get_logger(__name__)

# User-facing status texts
STATUS_READY = "Ready"
STATUS_LISTENING = "Listening..."
STATUS_STOPPED = "Stopped listening"
STATUS_TRANSLATING = "Translating..."
STATUS_TRANSLATED = "Translated."
STATUS_EMPTY_TRANSLATE = "Please enter text or use live speech."
STATUS_EMPTY_SPEAK = "Please enter or speak text first"
STATUS_NO_RECOGNITION = "SpeechRecognition not supported on this host"
STATUS_NO_SYNTHESIS = "SpeechSynthesis not supported on this host"


class PipelineState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    TRANSLATING = "translating"
    SPEAKING = "speaking"


class Translator(Protocol):
    async def translate(
        self, text: str, source_lang: str, target_lang: str
    ) -> TranslationResult:
        ...


class PipelineController:
    """Orchestrates recognition, debouncing, translation and speech output.

    `listening` is tracked apart from `state`: translation and speech run
    while the microphone stays open, and `state` only reflects the most
    recent transition.

    Every translation gets a request id from a monotonic counter. When a
    response arrives for an id that is no longer the latest, it is dropped
    without touching the view, so the newest trigger always wins.
    """

    def __init__(
        self,
        view: PipelineView,
        translator: Translator,
        recognition_engine: RecognitionEngine | None = None,
        synthesis_engine: SynthesisEngine | None = None,
        *,
        source_lang: str = "en",
        target_lang: str = "kn",
        voice_output: bool = True,
        region: str = "IN",
        debounce_window_seconds: float = DEFAULT_WINDOW_SECONDS,
        fallback_languages: Iterable[str] = DEFAULT_FALLBACK_LANGUAGES,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._view = view
        self._translator = translator
        self._synthesis = synthesis_engine
        self._source_lang = source_lang
        self._target_lang = target_lang
        self._voice_output = voice_output
        self._region = region

        self._channel = EventChannel()
        self._channel.subscribe(RECOGNITION_PARTIAL, self._on_partial)
        self._channel.subscribe(RECOGNITION_FINAL, self._on_final)
        self._channel.subscribe(RECOGNITION_ERROR, self._on_recognition_error)
        self._channel.subscribe(RECOGNITION_ENDED, self._on_recognition_ended)

        self._session = RecognitionSession(recognition_engine, self._channel)
        self._catalog = VoiceCatalog(synthesis_engine, fallback_languages)
        self._debouncer = Debouncer(self._on_settled, debounce_window_seconds, scheduler)

        self._transcript = TranscriptState()
        self._state = PipelineState.IDLE
        self._listening = False
        self._source_text = ""
        self._translated_text = ""
        self._request_ids = itertools.count(1)
        self._latest_request_id = 0
        self._current_utterance: Utterance | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    # --- Read-only views ---

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def listening(self) -> bool:
        return self._listening

    @property
    def transcript(self) -> TranscriptState:
        return TranscriptState(interim=self._transcript.interim, final=self._transcript.final)

    @property
    def source_text(self) -> str:
        return self._source_text

    @property
    def translated_text(self) -> str:
        return self._translated_text

    @property
    def source_lang(self) -> str:
        return self._source_lang

    @property
    def target_lang(self) -> str:
        return self._target_lang

    @property
    def voice_output(self) -> bool:
        return self._voice_output

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    @property
    def session(self) -> RecognitionSession:
        return self._session

    @property
    def catalog(self) -> VoiceCatalog:
        return self._catalog

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # --- Lifecycle ---

    def startup(self) -> None:
        """Detect host capabilities once and degrade the missing ones."""
        listen_available = self._session.supported
        speak_available = self._synthesis is not None
        self._view.set_controls(
            listen_available=listen_available,
            speak_available=speak_available,
        )
        self._view.set_listening(False)
        if listen_available:
            self._view.set_status(STATUS_READY)
        else:
            self._view.set_status(STATUS_NO_RECOGNITION, is_error=True)
        logger.info(
            "Pipeline ready",
            extra={
                "recognition_available": listen_available,
                "synthesis_available": speak_available,
                "source_lang": self._source_lang,
                "target_lang": self._target_lang,
            },
        )

    def configure(
        self,
        source_lang: str | None = None,
        target_lang: str | None = None,
        voice_output: bool | None = None,
    ) -> None:
        """Change languages or voice output. A new source language applies from the next turn."""
        if source_lang:
            self._source_lang = source_lang
        if target_lang:
            self._target_lang = target_lang
        if voice_output is not None:
            self._voice_output = voice_output
        logger.debug(
            "Pipeline configured",
            extra={
                "source_lang": self._source_lang,
                "target_lang": self._target_lang,
                "voice_output": self._voice_output,
            },
        )

    async def drain(self) -> None:
        """Wait until every background task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._listening = False
        self._session.stop()
        self._debouncer.cancel()
        self._channel.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("Pipeline closed")

    # --- Listening ---

    def start_listening(self) -> bool:
        if self._listening:
            return True
        if not self._session.supported:
            self._view.set_status(STATUS_NO_RECOGNITION, is_error=True)
            return False

        self._transcript.reset()
        turn_id_var.set(uuid.uuid4().hex[:12])
        tag = recognition_tag(self._source_lang, self._region)
        try:
            self._session.start(tag)
        except RecognitionStartError as e:
            self._view.set_listening(False)
            self._view.set_status(e.message, is_error=True)
            return False

        self._listening = True
        self._set_state(PipelineState.LISTENING)
        self._view.set_listening(True)
        self._view.set_status(STATUS_LISTENING)
        return True

    def stop_listening(self) -> None:
        self._listening = False
        self._session.stop()
        self._debouncer.cancel()
        self._transcript.reset()
        self._set_state(PipelineState.IDLE)
        self._view.set_listening(False)
        self._view.set_status(STATUS_STOPPED)
        turn_id_var.set(None)

    def toggle_listening(self) -> bool:
        """Returns whether the pipeline is listening afterwards."""
        if self._listening:
            self.stop_listening()
            return False
        return self.start_listening()

    # --- Translation ---

    async def translate_text(self, text: str | None = None) -> TranslationResult | None:
        """Manual translate: no debounce, straight to Translating."""
        if text is not None:
            self._source_text = text
        query = self._source_text.strip()
        if not query:
            self._view.set_status(STATUS_EMPTY_TRANSLATE, is_error=True)
            return None
        return await self._translate(query)

    async def _translate(self, text: str) -> TranslationResult | None:
        request_id = next(self._request_ids)
        self._latest_request_id = request_id
        self._set_state(PipelineState.TRANSLATING)
        self._view.set_status(STATUS_TRANSLATING)

        source = translation_source(self._source_lang)
        started = time.perf_counter()
        result = await self._translator.translate(text, source, self._target_lang)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        if self._closed:
            return None
        if request_id != self._latest_request_id:
            logger.info(
                "Stale translation discarded",
                extra={"request_id": request_id, "latest_request_id": self._latest_request_id},
            )
            return None

        self._settle_state()
        if not result.ok:
            logger.warning(
                "Translation failed",
                extra={
                    "request_id": request_id,
                    "error_kind": result.error_kind.value,
                    "detail": result.detail,
                    "latency_ms": elapsed_ms,
                },
            )
            self._view.set_status(result.describe(), is_error=True)
            return result

        logger.info(
            "Translation applied",
            extra={"request_id": request_id, "latency_ms": elapsed_ms},
        )
        self._translated_text = result.translated_text
        self._view.set_translated_text(result.translated_text)
        self._view.set_status(STATUS_TRANSLATED)
        if self._voice_output and self._synthesis is not None and result.translated_text.strip():
            await self.speak(result.translated_text)
        return result

    def _on_settled(self, text: str) -> None:
        self.run_in_background(self._translate(text), name="translate.settled")

    # --- Speech output ---

    async def speak(self, text: str | None = None) -> bool:
        """Speak `text`, else the translated text, else the source text.

        Any utterance already playing is cancelled first.
        """
        if self._synthesis is None:
            self._view.set_status(STATUS_NO_SYNTHESIS, is_error=True)
            return False

        if text is None:
            text = self._translated_text.strip() or self._source_text.strip()
        text = text.strip()
        if not text:
            self._view.set_status(STATUS_EMPTY_SPEAK, is_error=True)
            return False

        selection = await self._catalog.select(self._target_lang)
        if self._closed:
            return False

        utterance = Utterance(
            text=text,
            lang=selection.language_tag,
            voice=selection.voice.handle if selection.voice is not None else None,
        )
        utterance.on_end = partial(self._on_utterance_end, utterance)
        self._current_utterance = utterance

        self._synthesis.cancel()
        self._synthesis.speak(utterance)
        record_utterance(selection.match.value)
        self._set_state(PipelineState.SPEAKING)
        logger.info(
            "Speaking",
            extra={
                "language_tag": selection.language_tag,
                "match": selection.match.value,
                "text_length": len(text),
            },
        )
        return True

    def _on_utterance_end(self, utterance: Utterance) -> None:
        if utterance is not self._current_utterance:
            return
        self._current_utterance = None
        if self._state is PipelineState.SPEAKING:
            self._settle_state()

    # --- Recognition events ---

    def _on_partial(self, event_type: str, data: dict[str, Any]) -> None:
        if not self._listening:
            return
        self._transcript.update_interim(data.get("text", ""))
        self._show_source(self._transcript.text)

    def _on_final(self, event_type: str, data: dict[str, Any]) -> None:
        if not self._listening:
            return
        self._transcript.append_final(data.get("text", ""))
        self._transcript.update_interim(data.get("interim", ""))
        self._show_source(self._transcript.text)
        self._debouncer.trigger(self._transcript.text)

    def _on_recognition_error(self, event_type: str, data: dict[str, Any]) -> None:
        failure: RecognitionFailure = data["failure"]
        logger.warning(
            "Recognition failure reported",
            extra={"error": failure.to_error().to_dict(), "fatal": failure.fatal},
        )
        self._view.set_status(failure.describe(), is_error=True)
        if failure.fatal and self._listening:
            self._listening = False
            self._debouncer.cancel()
            self._set_state(PipelineState.IDLE)
            self._view.set_listening(False)

    def _on_recognition_ended(self, event_type: str, data: dict[str, Any]) -> None:
        status = data.get("status")
        logger.debug(
            "Recognition ended",
            extra={"status": status.value if isinstance(status, RecognitionStatus) else status},
        )
        if not self._listening:
            self._view.set_listening(False)

    # --- Helpers ---

    def run_in_background(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Run `coro` as a tracked task; failures are logged and shown."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        logger.error(
            "Pipeline task failed",
            exc_info=exc,
            extra={"task_name": task.get_name()},
        )
        if not self._closed:
            self._view.set_status(f"Error: {exc}", is_error=True)

    def _show_source(self, text: str) -> None:
        self._source_text = text
        self._view.set_source_text(text)

    def _settle_state(self) -> None:
        self._set_state(PipelineState.LISTENING if self._listening else PipelineState.IDLE)

    def _set_state(self, state: PipelineState) -> None:
        if state is self._state:
            return
        logger.debug(
            "Pipeline state changed",
            extra={"from_state": self._state.value, "to_state": state.value},
        )
        self._state = state
