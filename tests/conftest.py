"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from voicebridge.application.live.controller import PipelineController
from voicebridge.config import Settings
from voicebridge.domain.entities.translation import TranslationResult, TranslationSuccess
from voicebridge.domain.protocols.capabilities import (
    RecognitionAlternative,
    RecognitionErrorEvent,
    RecognitionResult,
    RecognitionResultEvent,
    SynthesisVoice,
    Utterance,
)


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        environment="test",
        translation_provider="stub",
        mymemory_base_url="https://mymemory.test",
        log_level="DEBUG",
        log_format="text",
        otel_enabled=False,
    )


# --- Time ---


class ManualHandle:
    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when the test says so."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self.handles if not h.cancelled and not h.fired)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [
                h for h in self.handles
                if not h.cancelled and not h.fired and h.deadline <= target
            ]
            if not due:
                break
            handle = min(due, key=lambda h: h.deadline)
            self.now = handle.deadline
            handle.fired = True
            handle.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


# --- Host engines ---


class FakeRecognitionEngine:
    """In-memory RecognitionEngine; the test plays the browser."""

    def __init__(self) -> None:
        self.lang = ""
        self.continuous = False
        self.interim_results = False
        self.max_alternatives = 0
        self.on_result = None
        self.on_error = None
        self.on_end = None
        self.start_calls = 0
        self.stop_calls = 0
        self.start_error: Exception | None = None

    def start(self) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error

    def stop(self) -> None:
        self.stop_calls += 1

    def emit(self, *segments: tuple[str, bool], result_index: int = 0) -> None:
        """Deliver one result batch of (transcript, is_final) segments."""
        results = tuple(
            RecognitionResult(
                alternatives=(RecognitionAlternative(transcript=text, confidence=0.9),),
                is_final=is_final,
            )
            for text, is_final in segments
        )
        self.on_result(RecognitionResultEvent(results=results, result_index=result_index))

    def fail(self, code: str, message: str = "") -> None:
        self.on_error(RecognitionErrorEvent(error=code, message=message))

    def end(self) -> None:
        self.on_end()


class FakeSynthesisEngine:
    """In-memory SynthesisEngine recording every call in order."""

    def __init__(self, voices: list[SynthesisVoice] | None = None) -> None:
        self.voices = list(voices or [])
        self.on_voices_changed = None
        self.calls: list[tuple[str, Any]] = []
        self.get_voices_calls = 0

    def get_voices(self) -> list[SynthesisVoice]:
        self.get_voices_calls += 1
        return list(self.voices)

    def speak(self, utterance: Utterance) -> None:
        self.calls.append(("speak", utterance))

    def cancel(self) -> None:
        self.calls.append(("cancel", None))

    @property
    def spoken(self) -> list[Utterance]:
        return [u for name, u in self.calls if name == "speak"]

    def publish_voices(self, voices: list[SynthesisVoice]) -> None:
        self.voices = list(voices)
        if self.on_voices_changed is not None:
            self.on_voices_changed()


@pytest.fixture
def make_synthesis_engine():
    """Factory for engines that start with no voices, or the given ones."""
    return FakeSynthesisEngine


@pytest.fixture
def recognition_engine() -> FakeRecognitionEngine:
    return FakeRecognitionEngine()


@pytest.fixture
def synthesis_engine() -> FakeSynthesisEngine:
    return FakeSynthesisEngine(
        voices=[
            SynthesisVoice(name="Google US English", lang="en-US"),
            SynthesisVoice(name="Google Kannada", lang="kn-IN"),
        ]
    )


# --- View and translator ---


class RecordingView:
    def __init__(self) -> None:
        self.statuses: list[tuple[str, bool]] = []
        self.source_texts: list[str] = []
        self.translated_texts: list[str] = []
        self.listening: list[bool] = []
        self.controls: dict[str, bool] | None = None

    @property
    def status(self) -> str | None:
        return self.statuses[-1][0] if self.statuses else None

    @property
    def status_is_error(self) -> bool:
        return bool(self.statuses) and self.statuses[-1][1]

    def set_status(self, text: str, is_error: bool = False) -> None:
        self.statuses.append((text, is_error))

    def set_source_text(self, text: str) -> None:
        self.source_texts.append(text)

    def set_translated_text(self, text: str) -> None:
        self.translated_texts.append(text)

    def set_listening(self, listening: bool) -> None:
        self.listening.append(listening)

    def set_controls(self, *, listen_available: bool, speak_available: bool) -> None:
        self.controls = {"listen": listen_available, "speak": speak_available}


class FakeTranslator:
    """Translator returning a fixed result, or holding each call until released."""

    def __init__(self, result: TranslationResult | None = None) -> None:
        self.result = result or TranslationSuccess("ನಮಸ್ಕಾರ")
        self.calls: list[tuple[str, str, str]] = []
        self.hold = False
        self.pending: list[asyncio.Future] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> TranslationResult:
        self.calls.append((text, source_lang, target_lang))
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        return self.result


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def make_controller(view, translator, recognition_engine, synthesis_engine, scheduler):
    """Build a started PipelineController wired to the fakes."""

    def factory(**overrides: Any) -> PipelineController:
        kwargs: dict[str, Any] = {
            "recognition_engine": recognition_engine,
            "synthesis_engine": synthesis_engine,
            "source_lang": "en",
            "target_lang": "kn",
            "scheduler": scheduler,
        }
        kwargs.update(overrides)
        controller = PipelineController(view, translator, **kwargs)
        controller.startup()
        return controller

    return factory
