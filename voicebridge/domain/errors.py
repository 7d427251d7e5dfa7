"""Typed error hierarchy for voicebridge.

All application errors inherit from AppError and provide:
- code: Machine-readable error code
- message: Human-readable description
- details: Additional context as dict
- retryable: Whether the operation can be retried
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error with full context."""

    code: str = "APP_ERROR"
    message: str = "An unexpected error occurred"
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
        }


# --- Validation Errors ---


@dataclass
class ValidationError(AppError):
    """Input validation failed."""

    code: str = "VALIDATION_ERROR"
    message: str = "Validation failed"
    retryable: bool = False


@dataclass
class EmptyInputError(ValidationError):
    """Text to translate or speak is empty or whitespace-only."""

    code: str = "EMPTY_INPUT"
    message: str = "Input text is empty"


# --- Capability Errors ---


@dataclass
class CapabilityError(AppError):
    """A host speech capability failed or is missing."""

    code: str = "CAPABILITY_ERROR"
    capability: str = ""  # recognition / synthesis


@dataclass
class UnsupportedCapabilityError(CapabilityError):
    """The host offers no recognition or synthesis engine."""

    code: str = "UNSUPPORTED_CAPABILITY"
    message: str = "Capability not supported on this host"


@dataclass
class PermissionDeniedError(CapabilityError):
    """The user or host refused microphone access."""

    code: str = "PERMISSION_DENIED"
    message: str = "Microphone permission denied"


@dataclass
class RecognitionStartError(CapabilityError):
    """The recognition engine refused to start."""

    code: str = "RECOGNITION_START_FAILED"
    message: str = "Could not start listening"
    capability: str = "recognition"
    retryable: bool = True


@dataclass
class RestartFailureError(CapabilityError):
    """Auto-restart after an engine-initiated end failed."""

    code: str = "RESTART_FAILURE"
    message: str = "Error restarting recognition"
    capability: str = "recognition"


# --- Provider Errors ---


@dataclass
class ProviderError(AppError):
    """External translation provider failed."""

    code: str = "PROVIDER_ERROR"
    message: str = "Translation provider error"
    provider: str = ""
    operation: str = ""


@dataclass
class ProviderInvalidResponseError(ProviderError):
    """Provider answered 2xx with a payload we cannot use."""

    code: str = "PROVIDER_INVALID_RESPONSE"
    message: str = "Invalid response from translation provider"


@dataclass
class TransportError(AppError):
    """The network call itself failed (connect, read, DNS)."""

    code: str = "TRANSPORT_ERROR"
    message: str = "Translation provider unreachable"
    provider: str = ""
    retryable: bool = True


@dataclass
class ProviderTimeoutError(TransportError):
    """Provider call timed out."""

    code: str = "PROVIDER_TIMEOUT"
    message: str = "Translation provider timed out"


# --- Registry Errors ---


@dataclass
class ProviderNotFoundError(AppError):
    """Requested translation provider is not registered."""

    code: str = "PROVIDER_NOT_FOUND"
    message: str = "Unknown translation provider"


@dataclass
class DuplicateProviderError(AppError):
    """A provider with this name is already registered."""

    code: str = "DUPLICATE_PROVIDER"
    message: str = "Translation provider already registered"
