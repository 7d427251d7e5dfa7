"""Synthesis voice entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class VoiceMatch(str, Enum):
    """Which resolution rule picked the voice."""

    EXACT = "exact"
    PREFIX = "prefix"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class VoiceEntry:
    """A voice the synthesis engine offers.

    `handle` is the engine's own voice object, passed back untouched when
    speaking.
    """

    language_tag: str
    handle: Any = None


@dataclass(frozen=True)
class LanguagePreference:
    requested_code: str  # ISO-639-1, e.g. "kn"
    resolved_tag: str  # IETF, e.g. "kn-IN"


@dataclass(frozen=True)
class VoiceSelection:
    """Outcome of resolving a language code against the voice catalog."""

    preference: LanguagePreference
    voice: VoiceEntry | None = None
    match: VoiceMatch = VoiceMatch.NONE

    @property
    def language_tag(self) -> str:
        """Tag to put on the utterance: the voice's own, else the requested one."""
        if self.voice is not None:
            return self.voice.language_tag
        return self.preference.resolved_tag
