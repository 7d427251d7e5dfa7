"""HTTP client for the translation endpoint.

Every outcome comes back as a value: callers branch on `result.ok` instead
of catching exceptions, and a result is never mutated after creation.
"""

from __future__ import annotations

from typing import Any

import httpx

from voicebridge.domain.entities.translation import (
    TranslationErrorKind,
    TranslationFailure,
    TranslationRequest,
    TranslationResult,
    TranslationSuccess,
)
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

TRANSLATE_PATH = "/translate"


def _error_detail(response: httpx.Response, data: Any) -> str:
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class TranslationClient:
    """Calls POST /translate. No retries."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        path: str = TRANSLATE_PATH,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._path = path

    async def translate(self, text: str, source_lang: str, target_lang: str) -> TranslationResult:
        query = (text or "").strip()
        if not query:
            return TranslationFailure(TranslationErrorKind.EMPTY_INPUT)

        request = TranslationRequest(text=query, source_lang=source_lang, target_lang=target_lang)
        try:
            response = await self._client.post(self._path, json=request.to_payload())
        except httpx.HTTPError as e:
            detail = str(e) or type(e).__name__
            logger.warning(
                "Translation request failed",
                extra={"error": detail, "source_lang": source_lang, "target_lang": target_lang},
            )
            return TranslationFailure(TranslationErrorKind.TRANSPORT_ERROR, detail)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            detail = _error_detail(response, data)
            logger.warning(
                "Translation endpoint returned error",
                extra={
                    "status_code": response.status_code,
                    "error": detail,
                    "details": data.get("details") if isinstance(data, dict) else None,
                },
            )
            return TranslationFailure(TranslationErrorKind.PROVIDER_ERROR, detail)

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            logger.warning(
                "Malformed translation response",
                extra={"status_code": response.status_code},
            )
            return TranslationFailure(TranslationErrorKind.PROVIDER_ERROR, "Malformed response")

        return TranslationSuccess(translated)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
