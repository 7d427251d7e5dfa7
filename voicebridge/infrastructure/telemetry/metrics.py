"""Prometheus metrics configuration."""

from prometheus_client import Counter, Gauge, Histogram, Info

# Service info
SERVICE_INFO = Info("voicebridge", "voicebridge service information")

# Request metrics
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Translation provider metrics
TRANSLATION_REQUESTS_TOTAL = Counter(
    "translation_requests_total",
    "Total upstream translation requests",
    ["provider", "status"],
)

TRANSLATION_DURATION_SECONDS = Histogram(
    "translation_request_duration_seconds",
    "Upstream translation latency in seconds",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Live pipeline metrics
LIVE_SESSIONS_ACTIVE = Gauge(
    "live_sessions_active",
    "Number of connected live pipeline sessions",
)

RECOGNITION_RESTARTS_TOTAL = Counter(
    "recognition_restarts_total",
    "Recognition auto-restart attempts",
    ["outcome"],  # outcome: success/failure
)

UTTERANCES_SPOKEN_TOTAL = Counter(
    "utterances_spoken_total",
    "Utterances handed to the synthesis engine",
    ["match"],  # which voice resolution rule fired
)


def set_service_info(version: str, environment: str) -> None:
    """Set service information.

    Args:
        version: Service version
        environment: Deployment environment
    """
    SERVICE_INFO.info({
        "version": version,
        "environment": environment,
    })


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record an HTTP request.

    Args:
        method: HTTP method
        endpoint: Request endpoint
        status_code: Response status code
        duration_seconds: Request duration in seconds
    """
    HTTP_REQUESTS_TOTAL.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method,
        endpoint=endpoint,
    ).observe(duration_seconds)


def record_translation_request(
    provider: str,
    status: str,
    duration_seconds: float,
) -> None:
    """Record an upstream translation call.

    Args:
        provider: Provider name
        status: success, provider_error, invalid_response or transport_error
        duration_seconds: Call duration in seconds
    """
    TRANSLATION_REQUESTS_TOTAL.labels(provider=provider, status=status).inc()
    TRANSLATION_DURATION_SECONDS.labels(provider=provider).observe(duration_seconds)


def record_recognition_restart(success: bool) -> None:
    RECOGNITION_RESTARTS_TOTAL.labels(outcome="success" if success else "failure").inc()


def record_utterance(match: str) -> None:
    UTTERANCES_SPOKEN_TOTAL.labels(match=match).inc()
