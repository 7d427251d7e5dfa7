"""HTTP presentation layer - REST API routes."""

from fastapi import APIRouter

from voicebridge.presentation.http.health import router as health_router
from voicebridge.presentation.http.metrics import router as metrics_router
from voicebridge.presentation.http.translate import router as translate_router

# Main API router
api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(metrics_router, tags=["Metrics"])
api_router.include_router(translate_router, tags=["Translate"])

__all__ = ["api_router"]
