"""Synthesis voice catalog and language-to-voice resolution."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from voicebridge.domain.entities.voice import (
    LanguagePreference,
    VoiceEntry,
    VoiceMatch,
    VoiceSelection,
)
from voicebridge.domain.languages import synthesis_tag
from voicebridge.domain.protocols.capabilities import SynthesisEngine
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FALLBACK_LANGUAGES: tuple[str, ...] = ("hi", "en")


def resolve_voice(
    voices: Sequence[VoiceEntry],
    code: str,
    fallback_languages: Iterable[str] = DEFAULT_FALLBACK_LANGUAGES,
) -> VoiceSelection:
    """Pick the best voice for an ISO-639-1 code.

    First match wins:
    1. exact (case-insensitive) match on the mapped IETF tag
    2. tag starting with the bare code
    3. tag starting with each fallback prefix, in order
    4. nothing: the selection keeps the mapped tag and carries no voice
    """
    requested = code.strip().lower()
    tag = synthesis_tag(requested)
    preference = LanguagePreference(requested_code=requested, resolved_tag=tag)

    wanted = tag.lower()
    for voice in voices:
        if voice.language_tag.lower() == wanted:
            return VoiceSelection(preference, voice, VoiceMatch.EXACT)

    if requested:
        for voice in voices:
            if voice.language_tag.lower().startswith(requested):
                return VoiceSelection(preference, voice, VoiceMatch.PREFIX)

    for prefix in fallback_languages:
        for voice in voices:
            if voice.language_tag.lower().startswith(prefix):
                return VoiceSelection(preference, voice, VoiceMatch.FALLBACK)

    return VoiceSelection(preference)


class VoiceCatalog:
    """Read-once cache of the synthesis engine's voices.

    Hosts often report no voices on the first query and fill the list in
    later, announcing it through `on_voices_changed`. `load()` waits for that
    notification once; concurrent callers share the same wait.
    """

    def __init__(
        self,
        engine: SynthesisEngine | None,
        fallback_languages: Iterable[str] = DEFAULT_FALLBACK_LANGUAGES,
    ) -> None:
        self._engine = engine
        self._fallback = tuple(lang.lower() for lang in fallback_languages)
        self._voices: list[VoiceEntry] = []
        self._pending: asyncio.Future[list[VoiceEntry]] | None = None

    @property
    def supported(self) -> bool:
        return self._engine is not None

    @property
    def voices(self) -> list[VoiceEntry]:
        return list(self._voices)

    @property
    def fallback_languages(self) -> tuple[str, ...]:
        return self._fallback

    def _query(self) -> list[VoiceEntry]:
        assert self._engine is not None
        return [VoiceEntry(language_tag=v.lang, handle=v) for v in self._engine.get_voices()]

    async def load(self) -> list[VoiceEntry]:
        if self._voices or self._engine is None:
            return list(self._voices)

        if self._pending is None:
            entries = self._query()
            if entries:
                self._voices = entries
                logger.info("Voices loaded", extra={"voice_count": len(entries)})
                return list(entries)
            self._pending = self._wait_for_voices()
            logger.debug("No voices yet, waiting for voices-changed")

        # Shielded so a cancelled caller does not cancel the shared wait
        entries = await asyncio.shield(self._pending)
        return list(entries)

    def _wait_for_voices(self) -> asyncio.Future[list[VoiceEntry]]:
        engine = self._engine
        assert engine is not None
        future: asyncio.Future[list[VoiceEntry]] = asyncio.get_running_loop().create_future()
        previous = engine.on_voices_changed

        def on_voices_changed() -> None:
            engine.on_voices_changed = previous
            self._pending = None
            if future.done():
                return
            entries = self._query()
            self._voices = entries
            logger.info(
                "Voices loaded after voices-changed",
                extra={"voice_count": len(entries)},
            )
            future.set_result(entries)
            if previous is not None:
                previous()

        engine.on_voices_changed = on_voices_changed
        return future

    async def reload(self) -> list[VoiceEntry]:
        """Drop the cache and query the engine again."""
        self._voices = []
        return await self.load()

    def resolve(self, code: str) -> VoiceSelection:
        """Resolve against the cached list without loading."""
        return resolve_voice(self._voices, code, self._fallback)

    async def select(self, code: str) -> VoiceSelection:
        await self.load()
        selection = self.resolve(code)
        logger.debug(
            "Voice selected",
            extra={
                "requested_code": selection.preference.requested_code,
                "language_tag": selection.language_tag,
                "match": selection.match.value,
            },
        )
        return selection
