"""Tests for span helpers."""

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from voicebridge.domain.errors import ProviderError
from voicebridge.infrastructure.telemetry import tracing


@pytest.fixture
def exporter(monkeypatch):
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing, "get_tracer", lambda name=tracing.TRACER_NAME: provider.get_tracer(name))
    return exporter


def test_span_attributes_skip_none(exporter):
    with tracing.create_span("translation.provider", attributes={"provider": "stub", "source": None}):
        pass

    (span,) = exporter.get_finished_spans()
    assert span.name == "translation.provider"
    assert dict(span.attributes) == {"provider": "stub"}


def test_failed_block_marks_span(exporter):
    with pytest.raises(ProviderError):
        with tracing.create_span("translation.provider"):
            raise ProviderError(provider="stub")

    (span,) = exporter.get_finished_spans()
    assert span.status.status_code == StatusCode.ERROR
    assert span.attributes["error.code"] == "PROVIDER_ERROR"


def test_noop_without_provider():
    with tracing.create_span("noop", attributes={"a": 1}) as span:
        assert span is not None
