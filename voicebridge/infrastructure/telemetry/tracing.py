"""OpenTelemetry tracing.

Tracing is opt-in (`otel_enabled`). When it is off no provider is installed
and `create_span` hands out the API's no-op spans.
"""

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode

from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

TRACER_NAME = "voicebridge"

_tracer_provider: TracerProvider | None = None


def configure_tracing(
    service_name: str = "voicebridge",
    service_version: str = "0.1.0",
    environment: str = "development",
    otlp_endpoint: str | None = None,
) -> TracerProvider:
    """Install a TracerProvider, exporting over OTLP/gRPC when an endpoint is given."""
    global _tracer_provider

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": service_version,
                "deployment.environment": environment,
            }
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    else:
        logger.warning("Tracing enabled without an OTLP endpoint; spans are not exported")

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    logger.info(
        "Tracing configured",
        extra={"service": service_name, "otlp_endpoint": otlp_endpoint or None},
    )
    return provider


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    return trace.get_tracer(name)


def instrument_fastapi(app: Any) -> None:
    """Server spans for every HTTP request and WebSocket connection."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_httpx() -> None:
    """Client spans for upstream provider calls and the live pipeline's /translate calls."""
    instrumentor = HTTPXClientInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument()


@contextmanager
def create_span(
    name: str,
    attributes: dict[str, Any] | None = None,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
) -> Generator[Span, None, None]:
    """Run the block inside a span; an escaping exception marks it as failed.

    Errors that carry a `code` (the AppError family) also set `error.code`.
    """
    attrs = {key: value for key, value in (attributes or {}).items() if value is not None}
    with get_tracer().start_as_current_span(
        name,
        kind=kind,
        attributes=attrs,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            code = getattr(e, "code", None)
            if isinstance(code, str):
                span.set_attribute("error.code", code)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider."""
    global _tracer_provider
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
