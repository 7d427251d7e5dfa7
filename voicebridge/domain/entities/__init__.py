"""Domain entities - pure Python dataclasses for the live translation pipeline."""

from voicebridge.domain.entities.transcript import TranscriptState
from voicebridge.domain.entities.translation import (
    TranslationErrorKind,
    TranslationFailure,
    TranslationRequest,
    TranslationResult,
    TranslationSuccess,
)
from voicebridge.domain.entities.voice import (
    LanguagePreference,
    VoiceEntry,
    VoiceMatch,
    VoiceSelection,
)

__all__ = [
    "TranscriptState",
    "TranslationErrorKind",
    "TranslationFailure",
    "TranslationRequest",
    "TranslationResult",
    "TranslationSuccess",
    "LanguagePreference",
    "VoiceEntry",
    "VoiceMatch",
    "VoiceSelection",
]
