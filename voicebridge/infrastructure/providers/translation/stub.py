"""Stub translation provider for testing and offline development."""

from voicebridge.config import Settings
from voicebridge.domain.protocols.providers import ProviderTranslation
from voicebridge.infrastructure.providers.registry import register_translation_provider


@register_translation_provider
class StubTranslationProvider:
    """Echoes the input tagged with the target language, e.g. "[kn] hello"."""

    name = "stub"

    def __init__(self, settings: Settings | None = None):
        self.settings = settings

    @property
    def provider_name(self) -> str:
        return self.name

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> ProviderTranslation:
        return ProviderTranslation(
            translated_text=f"[{target_lang}] {text}",
            provider=self.name,
            match=1.0,
        )

    async def close(self) -> None:
        return None
