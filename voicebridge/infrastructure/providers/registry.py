"""Provider registry for self-registration of translation providers.

Providers register themselves at import time, so the factory never needs a
hard-coded list of what exists.

Usage:
    # In provider module (e.g., voicebridge/infrastructure/providers/translation/mymemory.py):
    from voicebridge.infrastructure.providers.registry import register_translation_provider

    @register_translation_provider
    class MyMemoryProvider:
        name = "mymemory"
        ...
"""

from typing import Any, TypeVar

from voicebridge.domain.errors import DuplicateProviderError, ProviderNotFoundError

T = TypeVar("T")

# Populated by the decorator at import time
_translation_registry: dict[str, type[Any]] = {}


def _provider_name(provider_class: type[Any]) -> str:
    name = getattr(provider_class, "name", None)
    if not isinstance(name, str) or not name:
        raise ValueError(
            f"Provider {provider_class.__name__} is missing a string 'name' class attribute"
        )
    return name


def register_translation_provider(provider_class: type[T]) -> type[T]:
    """Register a translation provider class under its `name`.

    Raises:
        DuplicateProviderError: If a provider with this name is already registered.
    """
    name = _provider_name(provider_class)
    if name in _translation_registry:
        raise DuplicateProviderError(
            message=f"Translation provider '{name}' is already registered",
            details={"provider": name},
        )
    _translation_registry[name] = provider_class
    return provider_class


def get_translation_provider_class(name: str) -> type[Any]:
    """Look up a registered provider class.

    Raises:
        ProviderNotFoundError: If no provider has this name.
    """
    if name not in _translation_registry:
        registered = ", ".join(sorted(_translation_registry)) or "(none)"
        raise ProviderNotFoundError(
            message=f"Unknown translation provider: '{name}'. Registered providers: {registered}",
            details={"provider": name},
        )
    return _translation_registry[name]


def get_registered_translation_providers() -> dict[str, type[Any]]:
    """Get a copy of the registered translation providers."""
    return _translation_registry.copy()


def is_translation_provider_registered(name: str) -> bool:
    return name in _translation_registry
