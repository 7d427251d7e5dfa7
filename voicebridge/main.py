"""FastAPI application factory."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from voicebridge.application.services.translation_service import TranslationService
from voicebridge.config import Settings, get_settings
from voicebridge.infrastructure.middleware import (
    RequestContextMiddleware,
    error_handler_middleware,
)
from voicebridge.infrastructure.providers.factory import create_translation_provider
from voicebridge.infrastructure.telemetry import configure_logging, get_logger
from voicebridge.infrastructure.telemetry.metrics import set_service_info
from voicebridge.infrastructure.telemetry.tracing import (
    configure_tracing,
    instrument_fastapi,
    instrument_httpx,
    shutdown_tracing,
)
from voicebridge.presentation.http import api_router
from voicebridge.presentation.ws import live_websocket_endpoint

logger = get_logger(__name__)

STATIC_DIR = Path(__file__).parent / "presentation" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings

    logger.info(
        "Starting voicebridge",
        extra={
            "version": settings.version,
            "environment": settings.environment,
        },
    )
    settings.log_config_summary()

    # Tests may install their own service before startup
    if getattr(app.state, "translation_service", None) is None:
        provider = create_translation_provider(settings=settings)
        app.state.translation_service = TranslationService(provider)

    yield

    logger.info("Shutting down voicebridge")
    await app.state.translation_service.close()
    if settings.otel_enabled:
        shutdown_tracing()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    configure_logging(
        level=settings.log_level,
        format_type=settings.log_format,
    )

    if settings.otel_enabled:
        configure_tracing(
            service_name=settings.otel_service_name,
            service_version=settings.version,
            environment=settings.environment,
            otlp_endpoint=settings.otlp_endpoint or None,
        )
        instrument_httpx()

    set_service_info(
        version=settings.version,
        environment=settings.environment,
    )

    app = FastAPI(
        title="VoiceBridge API",
        description="Live speech translation: recognize, translate, speak",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )
    app.state.settings = settings
    app.state.translation_service = None

    if settings.otel_enabled:
        instrument_fastapi(app)

    # Add middleware (order matters - last added is first executed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    error_handler_middleware(app)

    app.include_router(api_router)
    app.add_api_websocket_route("/ws/live", live_websocket_endpoint)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # SPA fallback, registered last so it never shadows an API route
    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str) -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "voicebridge.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
