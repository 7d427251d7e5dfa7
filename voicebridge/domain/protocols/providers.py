"""Provider protocols - abstract interfaces for external services."""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class ProviderTranslation:
    """Text returned by an upstream translation provider."""

    translated_text: str
    provider: str
    match: float | None = None  # provider's own quality score, when it reports one


class TranslationProvider(Protocol):
    """Abstract interface for upstream translation providers (MyMemory, stub)."""

    @property
    def provider_name(self) -> str:
        """Get the provider name for logging/metrics."""
        ...

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> ProviderTranslation:
        """Translate text.

        Raises:
            ProviderError: Non-success response from the provider
            ProviderInvalidResponseError: Success response without usable text
            TransportError: The provider could not be reached
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
