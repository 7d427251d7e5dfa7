"""Translation provider implementations. Importing this package registers them."""

from voicebridge.infrastructure.providers.translation.mymemory import MyMemoryProvider
from voicebridge.infrastructure.providers.translation.stub import StubTranslationProvider

__all__ = ["MyMemoryProvider", "StubTranslationProvider"]
