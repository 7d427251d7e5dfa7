"""Managed continuous recognition session.

Wraps a host RecognitionEngine so the controller only sees three kinds of
events on the channel: partial text, final text and errors. The engine is
free to end a segment whenever it likes (end of utterance, silence timeout);
while the user still wants to listen the session restarts it once per end
event and reports a failure instead of looping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voicebridge.application.live.events import (
    RECOGNITION_ENDED,
    RECOGNITION_ERROR,
    RECOGNITION_FINAL,
    RECOGNITION_PARTIAL,
    RECOGNITION_STATUS,
    EventChannel,
)
from voicebridge.domain.errors import (
    AppError,
    CapabilityError,
    PermissionDeniedError,
    RecognitionStartError,
    RestartFailureError,
    UnsupportedCapabilityError,
)
from voicebridge.domain.protocols.capabilities import (
    RecognitionEngine,
    RecognitionErrorEvent,
    RecognitionResultEvent,
)
from voicebridge.infrastructure.telemetry.logging import get_logger
from voicebridge.infrastructure.telemetry.metrics import record_recognition_restart

logger = get_logger(__name__)


class RecognitionStatus(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    RESTARTING = "restarting"
    STOPPED = "stopped"
    ERRORED = "errored"


_ACTIVE_STATUSES = frozenset(
    {RecognitionStatus.STARTING, RecognitionStatus.LISTENING, RecognitionStatus.RESTARTING}
)


class RecognitionErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    NO_SPEECH_DETECTED = "no_speech_detected"
    NETWORK_UNAVAILABLE = "network_unavailable"
    START_FAILURE = "start_failure"
    RESTART_FAILURE = "restart_failure"
    AUDIO_UNAVAILABLE = "audio_unavailable"
    LANGUAGE_UNSUPPORTED = "language_unsupported"
    UNKNOWN = "unknown"


# Engine error codes (Web Speech API naming)
_ERROR_CODES: dict[str, RecognitionErrorKind] = {
    "not-allowed": RecognitionErrorKind.PERMISSION_DENIED,
    "service-not-allowed": RecognitionErrorKind.PERMISSION_DENIED,
    "no-speech": RecognitionErrorKind.NO_SPEECH_DETECTED,
    "network": RecognitionErrorKind.NETWORK_UNAVAILABLE,
    "audio-capture": RecognitionErrorKind.AUDIO_UNAVAILABLE,
    "language-not-supported": RecognitionErrorKind.LANGUAGE_UNSUPPORTED,
}

# Reported by a remote host whose engine threw from start()
START_FAILED_CODE = "start-failed"

# Kinds that recur on every restart; the engine must not be restarted automatically
_FATAL_KINDS = frozenset(
    {
        RecognitionErrorKind.PERMISSION_DENIED,
        RecognitionErrorKind.START_FAILURE,
        RecognitionErrorKind.RESTART_FAILURE,
        RecognitionErrorKind.AUDIO_UNAVAILABLE,
        RecognitionErrorKind.LANGUAGE_UNSUPPORTED,
    }
)


@dataclass(frozen=True)
class RecognitionFailure:
    kind: RecognitionErrorKind
    detail: str = ""

    @property
    def fatal(self) -> bool:
        return self.kind in _FATAL_KINDS

    def describe(self) -> str:
        """Status-line text for the user."""
        if self.kind is RecognitionErrorKind.RESTART_FAILURE:
            return f"Error restarting recognition: {self.detail or 'unknown'}"
        if self.kind is RecognitionErrorKind.START_FAILURE:
            return f"Could not start listening: {self.detail or 'unknown'}"
        return f"Speech recognition error: {self.detail or self.kind.value}"

    def to_error(self) -> AppError:
        details = {"kind": self.kind.value, "detail": self.detail}
        if self.kind is RecognitionErrorKind.PERMISSION_DENIED:
            return PermissionDeniedError(capability="recognition", details=details)
        if self.kind is RecognitionErrorKind.RESTART_FAILURE:
            return RestartFailureError(details=details)
        if self.kind is RecognitionErrorKind.START_FAILURE:
            return RecognitionStartError(message=self.describe(), details=details)
        return CapabilityError(
            code="RECOGNITION_ERROR",
            message=self.describe(),
            capability="recognition",
            details=details,
            retryable=True,
        )


def classify_error(event: RecognitionErrorEvent, restarting: bool = False) -> RecognitionFailure:
    """Map an engine error code onto the recognition error taxonomy.

    A remote host cannot raise from `start()`; it reports `start-failed`
    instead. That is a restart failure when the session had just restarted
    the engine, and a start failure otherwise.
    """
    code = (event.error or "").strip()
    if code.lower() == START_FAILED_CODE:
        kind = (
            RecognitionErrorKind.RESTART_FAILURE if restarting else RecognitionErrorKind.START_FAILURE
        )
        return RecognitionFailure(kind=kind, detail=event.message or code)
    kind = _ERROR_CODES.get(code.lower(), RecognitionErrorKind.UNKNOWN)
    return RecognitionFailure(kind=kind, detail=code or event.message)


class RecognitionSession:
    """Continuous recognition with auto-restart.

    Status transitions:
        start():  Idle/Stopped/Errored -> Starting -> Listening (or Errored)
        engine end while Listening:  Listening -> Restarting -> Listening (or Errored)
        stop():   any -> Stopped
    """

    def __init__(
        self,
        engine: RecognitionEngine | None,
        channel: EventChannel,
        max_alternatives: int = 1,
    ) -> None:
        self._engine = engine
        self._channel = channel
        self._max_alternatives = max_alternatives
        self._status = RecognitionStatus.IDLE
        self._language_tag: str | None = None
        self._restart_count = 0
        # Whether the engine was last started by an auto-restart
        self._restarted = False

    @property
    def supported(self) -> bool:
        return self._engine is not None

    @property
    def status(self) -> RecognitionStatus:
        return self._status

    @property
    def active(self) -> bool:
        return self._status in _ACTIVE_STATUSES

    @property
    def language_tag(self) -> str | None:
        return self._language_tag

    @property
    def restart_count(self) -> int:
        return self._restart_count

    def start(self, language_tag: str) -> None:
        """Configure the engine for `language_tag` and begin listening.

        Raises:
            UnsupportedCapabilityError: The host has no recognition engine
            RecognitionStartError: The engine refused to start
        """
        if self._engine is None:
            raise UnsupportedCapabilityError(
                message="SpeechRecognition not supported on this host",
                capability="recognition",
            )
        if self.active:
            logger.debug("Recognition already running", extra={"status": self._status.value})
            return

        engine = self._engine
        self._language_tag = language_tag
        self._restart_count = 0
        self._restarted = False
        self._set_status(RecognitionStatus.STARTING)

        engine.lang = language_tag
        engine.continuous = True
        engine.interim_results = True
        engine.max_alternatives = self._max_alternatives
        engine.on_result = self._handle_result
        engine.on_error = self._handle_error
        engine.on_end = self._handle_end

        try:
            engine.start()
        except Exception as e:
            self._set_status(RecognitionStatus.ERRORED)
            logger.warning(
                "Recognition engine refused to start",
                extra={"language_tag": language_tag, "error": str(e)},
            )
            raise RecognitionStartError(
                message=f"Could not start listening: {e}",
                details={"language_tag": language_tag},
            ) from e

        self._set_status(RecognitionStatus.LISTENING)
        logger.info("Recognition started", extra={"language_tag": language_tag})

    def stop(self) -> None:
        """Stop listening and suppress any further auto-restart."""
        was_active = self.active
        self._set_status(RecognitionStatus.STOPPED)
        if self._engine is None or not was_active:
            return
        try:
            self._engine.stop()
        except Exception:
            logger.warning("Recognition engine stop failed", exc_info=True)
        logger.info("Recognition stopped", extra={"restarts": self._restart_count})

    def _set_status(self, status: RecognitionStatus) -> None:
        if status is self._status:
            return
        previous = self._status
        self._status = status
        self._channel.emit(
            RECOGNITION_STATUS,
            {"status": status, "previous": previous},
        )

    def _handle_result(self, event: RecognitionResultEvent) -> None:
        if not self.active:
            logger.debug("Result after stop ignored", extra={"status": self._status.value})
            return

        interim = ""
        final = ""
        for result in event.results[event.result_index:]:
            if result.is_final:
                final += result.transcript
            else:
                interim += result.transcript

        self._channel.emit(RECOGNITION_PARTIAL, {"text": interim})
        if final.strip():
            self._channel.emit(RECOGNITION_FINAL, {"text": final, "interim": interim})

    def _handle_error(self, event: RecognitionErrorEvent) -> None:
        if self._status is RecognitionStatus.STOPPED:
            logger.debug("Error after stop ignored", extra={"error_code": event.error})
            return

        failure = classify_error(event, restarting=self._restarted)
        logger.warning(
            "Recognition error",
            extra={"error_code": event.error, "kind": failure.kind.value, "fatal": failure.fatal},
        )
        if failure.fatal:
            self._set_status(RecognitionStatus.ERRORED)
        self._channel.emit(RECOGNITION_ERROR, {"failure": failure})

    def _handle_end(self) -> None:
        if self._status is not RecognitionStatus.LISTENING:
            self._channel.emit(RECOGNITION_ENDED, {"status": self._status})
            return

        # The engine ended on its own while the user still wants to listen.
        self._set_status(RecognitionStatus.RESTARTING)
        try:
            self._engine.start()  # type: ignore[union-attr]
        except Exception as e:
            record_recognition_restart(success=False)
            self._set_status(RecognitionStatus.ERRORED)
            failure = RecognitionFailure(RecognitionErrorKind.RESTART_FAILURE, detail=str(e))
            logger.error(
                "Recognition restart failed",
                extra={"error": str(e), "restarts": self._restart_count},
            )
            self._channel.emit(RECOGNITION_ERROR, {"failure": failure})
            return

        record_recognition_restart(success=True)
        self._restart_count += 1
        self._restarted = True
        self._set_status(RecognitionStatus.LISTENING)
        logger.debug("Recognition restarted", extra={"restarts": self._restart_count})
