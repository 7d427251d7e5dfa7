"""Host speech capability contracts.

The live pipeline never talks to a microphone or speaker directly. It is
handed objects that behave like the browser's SpeechRecognition and
speechSynthesis: attribute-configured, callback-driven, and free to deliver
events whenever the host decides.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


# --- Recognition ---


@dataclass(frozen=True)
class RecognitionAlternative:
    transcript: str
    confidence: float | None = None


@dataclass(frozen=True)
class RecognitionResult:
    """One indexed result; only the first alternative is used."""

    alternatives: tuple[RecognitionAlternative, ...] = ()
    is_final: bool = False

    @property
    def transcript(self) -> str:
        return self.alternatives[0].transcript if self.alternatives else ""


@dataclass(frozen=True)
class RecognitionResultEvent:
    """A batch of results; entries before `result_index` were already delivered."""

    results: tuple[RecognitionResult, ...] = ()
    result_index: int = 0


@dataclass(frozen=True)
class RecognitionErrorEvent:
    error: str  # engine error code, e.g. "not-allowed", "no-speech", "network"
    message: str = ""


class RecognitionEngine(Protocol):
    """Continuous streaming recognizer."""

    lang: str
    continuous: bool
    interim_results: bool
    max_alternatives: int

    on_result: Callable[[RecognitionResultEvent], None] | None
    on_error: Callable[[RecognitionErrorEvent], None] | None
    on_end: Callable[[], None] | None

    def start(self) -> None:
        """Begin capturing. May raise if the engine is already running or refused."""
        ...

    def stop(self) -> None:
        ...


# --- Synthesis ---


@dataclass(frozen=True)
class SynthesisVoice:
    name: str
    lang: str
    default: bool = False


@dataclass
class Utterance:
    """Text to speak, optionally bound to a voice and language tag."""

    text: str
    lang: str | None = None
    voice: Any = None
    on_end: Callable[[], None] | None = field(default=None, repr=False, compare=False)


class SynthesisEngine(Protocol):
    """Process-wide speech output. Only one utterance is audible at a time."""

    on_voices_changed: Callable[[], None] | None

    def get_voices(self) -> list[SynthesisVoice]:
        """Voices known right now. May be empty until the host finishes loading."""
        ...

    def speak(self, utterance: Utterance) -> None:
        ...

    def cancel(self) -> None:
        ...
