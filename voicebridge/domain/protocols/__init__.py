"""Domain protocols - abstract interfaces for infrastructure implementations."""

from voicebridge.domain.protocols.capabilities import (
    RecognitionAlternative,
    RecognitionEngine,
    RecognitionErrorEvent,
    RecognitionResult,
    RecognitionResultEvent,
    SynthesisEngine,
    SynthesisVoice,
    Utterance,
)
from voicebridge.domain.protocols.providers import ProviderTranslation, TranslationProvider
from voicebridge.domain.protocols.view import PipelineView

__all__ = [
    # Capabilities
    "RecognitionAlternative",
    "RecognitionEngine",
    "RecognitionErrorEvent",
    "RecognitionResult",
    "RecognitionResultEvent",
    "SynthesisEngine",
    "SynthesisVoice",
    "Utterance",
    # Providers
    "ProviderTranslation",
    "TranslationProvider",
    # Presentation
    "PipelineView",
]
