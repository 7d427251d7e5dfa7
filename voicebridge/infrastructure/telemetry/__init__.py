"""Telemetry infrastructure (logging, tracing, metrics)."""

from voicebridge.infrastructure.telemetry.logging import (
    ContextLogger,
    clear_request_context,
    correlation_ids,
    configure_logging,
    get_logger,
    request_id_var,
    session_id_var,
    set_request_context,
    turn_id_var,
)
from voicebridge.infrastructure.telemetry.metrics import (
    record_http_request,
    record_recognition_restart,
    record_translation_request,
    record_utterance,
    set_service_info,
)
from voicebridge.infrastructure.telemetry.tracing import (
    configure_tracing,
    create_span,
    get_tracer,
    instrument_fastapi,
    instrument_httpx,
    shutdown_tracing,
)

__all__ = [
    # Logging
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "set_request_context",
    "clear_request_context",
    "correlation_ids",
    "request_id_var",
    "session_id_var",
    "turn_id_var",
    # Tracing
    "configure_tracing",
    "get_tracer",
    "create_span",
    "instrument_fastapi",
    "instrument_httpx",
    "shutdown_tracing",
    # Metrics
    "set_service_info",
    "record_http_request",
    "record_translation_request",
    "record_recognition_restart",
    "record_utterance",
]
