"""Fixtures for tests that drive the full ASGI app."""

import pytest
from fastapi.testclient import TestClient

from voicebridge.application.services.translation_service import TranslationService
from voicebridge.domain.protocols.providers import ProviderTranslation
from voicebridge.main import create_app


class ScriptedProvider:
    """Provider that answers with a fixed translation or raises a fixed error."""

    name = "scripted"

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.calls: list[tuple[str, str, str]] = []

    @property
    def provider_name(self) -> str:
        return self.name

    async def translate(self, text: str, source_lang: str, target_lang: str) -> ProviderTranslation:
        self.calls.append((text, source_lang, target_lang))
        if self.error is not None:
            raise self.error
        return ProviderTranslation(translated_text="ನಮಸ್ಕಾರ", provider=self.name)

    async def close(self) -> None:
        return None


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def app(settings, provider):
    app = create_app(settings)
    app.state.translation_service = TranslationService(provider)
    return app


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
