"""Common HTTP dependencies."""

from fastapi import Request

from voicebridge.application.services.translation_service import TranslationService


def get_translation_service(request: Request) -> TranslationService:
    """Translation service created by the app lifespan."""
    return request.app.state.translation_service
