"""Global error handlers.

Error bodies keep the flat `{error, details}` shape the browser client reads:
`error` is the human message, `details` the context, `code` the machine code.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from voicebridge.application.services.translation_service import MISSING_FIELDS_MESSAGE
from voicebridge.domain.errors import AppError, ProviderError, ValidationError
from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)


def error_handler_middleware(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handle all application errors."""
        status_code = _get_status_code(exc)

        log_level = "warning" if status_code < 500 else "error"
        getattr(logger, log_level)(
            f"Application error: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_details": exc.details,
                "retryable": exc.retryable,
                "path": request.url.path,
            },
        )

        content = {"error": exc.message, "code": exc.code}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed or non-object JSON bodies."""
        logger.warning(
            "Request validation failed",
            extra={"path": request.url.path, "error_count": len(exc.errors())},
        )
        return JSONResponse(
            status_code=400,
            content={"error": MISSING_FIELDS_MESSAGE, "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            f"Unhandled exception: {str(exc)}",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )

        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "details": str(exc), "code": "INTERNAL_ERROR"},
        )


def _get_status_code(error: AppError) -> int:
    """Map error type to HTTP status code."""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, ProviderError):
        return 502
    return 500
