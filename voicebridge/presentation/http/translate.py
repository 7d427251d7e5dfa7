"""Translation proxy endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from voicebridge.application.services.translation_service import TranslationService
from voicebridge.presentation.http.dependencies import get_translation_service

router = APIRouter()


class TranslateRequest(BaseModel):
    """Request body. Blank `q`/`target` are reported as 400 by the service."""

    q: str | None = None
    source: str | None = "en"
    target: str | None = None


class TranslateResponse(BaseModel):
    translatedText: str


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    body: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
) -> TranslateResponse:
    """Translate `q` from `source` (default "en") into `target`.

    Errors:
    - 400 `{error}`: `q` or `target` missing
    - 502 `{error, details}`: provider error or unusable provider payload
    - 500 `{error, details}`: provider unreachable or unexpected failure
    """
    result = await service.translate(body.q, body.source, body.target)
    return TranslateResponse(translatedText=result.translated_text)
