"""Translation service - the server side of POST /translate."""

import time

from voicebridge.domain.errors import (
    AppError,
    EmptyInputError,
    ProviderError,
    ProviderInvalidResponseError,
    TransportError,
    ValidationError,
)
from voicebridge.domain.protocols.providers import ProviderTranslation, TranslationProvider
from voicebridge.infrastructure.telemetry import create_span, get_logger
from voicebridge.infrastructure.telemetry.metrics import record_translation_request

logger = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "Missing 'q' or 'target' in request body"


def _outcome(error: Exception | None) -> str:
    if error is None:
        return "success"
    if isinstance(error, ProviderInvalidResponseError):
        return "invalid_response"
    if isinstance(error, ProviderError):
        return "provider_error"
    if isinstance(error, TransportError):
        return "transport_error"
    return "error"


class TranslationService:
    """Validates translate requests and forwards them to one provider.

    No retries and no caching; each request is one upstream call.
    """

    def __init__(self, provider: TranslationProvider):
        self.provider = provider

    async def translate(
        self,
        text: str | None,
        source_lang: str | None,
        target_lang: str | None,
    ) -> ProviderTranslation:
        """Translate `text` from `source_lang` (default "en") to `target_lang`.

        Raises:
            EmptyInputError: `text` is whitespace-only
            ValidationError: `text` or `target_lang` missing or blank
            ProviderError: Provider answered with an error or unusable payload
            TransportError: Provider unreachable
        """
        if text and not text.strip():
            raise EmptyInputError(
                message=MISSING_FIELDS_MESSAGE,
                details={"has_q": True, "has_target": bool(target_lang)},
            )
        if not text or not target_lang or not target_lang.strip():
            raise ValidationError(
                message=MISSING_FIELDS_MESSAGE,
                details={"has_q": bool(text), "has_target": bool(target_lang)},
            )

        source = (source_lang or "").strip() or "en"
        target = target_lang.strip()
        provider_name = self.provider.provider_name

        logger.info(
            "Calling translation provider",
            extra={
                "provider": provider_name,
                "langpair": f"{source}|{target}",
                "text_length": len(text),
            },
        )

        started = time.perf_counter()
        error: Exception | None = None
        try:
            with create_span(
                "translation.provider",
                attributes={
                    "translation.provider": provider_name,
                    "translation.source": source,
                    "translation.target": target,
                },
            ):
                result = await self.provider.translate(text, source, target)
        except AppError as e:
            error = e
            logger.warning(
                "Translation provider failed",
                extra={"provider": provider_name, "error": e.to_dict()},
            )
            raise
        finally:
            duration = time.perf_counter() - started
            record_translation_request(provider_name, _outcome(error), duration)

        logger.debug(
            "Translation provider succeeded",
            extra={"provider": provider_name, "latency_ms": int(duration * 1000)},
        )
        return result

    async def close(self) -> None:
        await self.provider.close()
