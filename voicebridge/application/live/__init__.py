"""Live pipeline: recognition, debouncing, translation and speech output."""

from voicebridge.application.live.controller import PipelineController, PipelineState
from voicebridge.application.live.debounce import CancellableTimer, Debouncer, Scheduler
from voicebridge.application.live.events import EventChannel
from voicebridge.application.live.recognition import (
    RecognitionErrorKind,
    RecognitionFailure,
    RecognitionSession,
    RecognitionStatus,
)
from voicebridge.application.live.translation_client import TranslationClient
from voicebridge.application.live.voices import VoiceCatalog, resolve_voice

__all__ = [
    "CancellableTimer",
    "Debouncer",
    "EventChannel",
    "PipelineController",
    "PipelineState",
    "RecognitionErrorKind",
    "RecognitionFailure",
    "RecognitionSession",
    "RecognitionStatus",
    "Scheduler",
    "TranslationClient",
    "VoiceCatalog",
    "resolve_voice",
]
