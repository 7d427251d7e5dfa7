"""Factory for translation provider instances.

Providers self-register at import time, so this factory only needs to import
the translation package and look the configured name up.
"""

from voicebridge.config import Settings, get_settings
from voicebridge.domain.protocols.providers import TranslationProvider
from voicebridge.infrastructure.providers import translation  # noqa: F401  (registers providers)
from voicebridge.infrastructure.providers.registry import get_translation_provider_class
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_translation_provider(
    provider: str | None = None,
    settings: Settings | None = None,
) -> TranslationProvider:
    """Instantiate a translation provider.

    Args:
        provider: Provider name (e.g., 'mymemory', 'stub').
            If None, uses settings.translation_provider.
        settings: Settings to configure the provider with

    Raises:
        ProviderNotFoundError: If provider is not registered
    """
    settings = settings or get_settings()
    name = (provider or settings.translation_provider or "").lower().strip() or "mymemory"
    provider_class = get_translation_provider_class(name)

    if name == "stub":
        logger.warning(
            "Using stub translation provider",
            extra={"provider": name, "reason": "explicit_request"},
        )
    else:
        logger.info("Translation provider initialized", extra={"provider": name})

    return provider_class(settings)
