"""MyMemory translation provider (https://mymemory.translated.net)."""

import httpx

from voicebridge.config import Settings
from voicebridge.domain.errors import (
    ProviderError,
    ProviderInvalidResponseError,
    ProviderTimeoutError,
    TransportError,
)
from voicebridge.domain.protocols.providers import ProviderTranslation, TranslationProvider
from voicebridge.infrastructure.providers.registry import register_translation_provider
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)


@register_translation_provider
class MyMemoryProvider:
    """Public MyMemory REST API: GET /get?q=...&langpair=src|tgt."""

    name = "mymemory"

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.base_url = settings.mymemory_base_url.rstrip("/")
        self.timeout = settings.provider_timeout_seconds
        self._client = client

    @property
    def provider_name(self) -> str:
        return self.name

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> ProviderTranslation:
        params = {"q": text, "langpair": f"{source_lang}|{target_lang}"}

        logger.debug(
            "Calling MyMemory API",
            extra={"langpair": params["langpair"], "text_length": len(text)},
        )

        try:
            response = await self.client.get("/get", params=params)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                message="MyMemory request timed out",
                provider=self.name,
                details={"error": str(e) or type(e).__name__},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                message=str(e) or "MyMemory unreachable",
                provider=self.name,
                details={"error": str(e) or type(e).__name__},
            ) from e

        if not response.is_success:
            raise ProviderError(
                provider=self.name,
                operation="translate",
                details={"status_code": response.status_code, "body": response.text},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderInvalidResponseError(
                provider=self.name,
                operation="translate",
                details={"body": response.text[:500]},
            ) from e

        response_data = data.get("responseData") if isinstance(data, dict) else None
        translated = (
            response_data.get("translatedText") if isinstance(response_data, dict) else None
        )
        if not translated or not isinstance(translated, str):
            raise ProviderInvalidResponseError(
                provider=self.name,
                operation="translate",
                details={"response_status": data.get("responseStatus") if isinstance(data, dict) else None},
            )

        match = response_data.get("match")
        return ProviderTranslation(
            translated_text=translated,
            provider=self.name,
            match=float(match) if isinstance(match, (int, float)) else None,
        )


# Protocol compliance
_: type[TranslationProvider] = MyMemoryProvider  # type: ignore
