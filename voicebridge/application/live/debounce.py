"""Quiet-period debouncing for final transcripts."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_SECONDS = 0.2


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Monotonic clock plus delayed callbacks. A running asyncio loop is one."""

    def time(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


def _running_loop() -> Scheduler:
    return asyncio.get_running_loop()


class CancellableTimer:
    """One-shot timer that can be cancelled before it fires.

    Fires at most once. `cancel()` after firing is a no-op.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        scheduler: Scheduler,
    ) -> None:
        self._delay = delay
        self._callback = callback
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None
        self._deadline: float | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def start(self) -> None:
        if self._handle is not None:
            raise RuntimeError("Timer already started")
        self._deadline = self._scheduler.time() + self._delay
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        if self._handle is None:
            return
        self._handle = None
        self._callback()


class Debouncer:
    """Coalesce bursts of triggers into one settlement per quiet window.

    Strict debounce: every `trigger` restarts the window and replaces the
    pending text, so `on_settled` only ever sees the newest text.
    """

    def __init__(
        self,
        on_settled: Callable[[str], None],
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        scheduler: Scheduler | None = None,
    ) -> None:
        if window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        self._on_settled = on_settled
        self._window = window_seconds
        self._scheduler = scheduler
        self._timer: CancellableTimer | None = None
        self._pending_text: str | None = None
        self._triggered_at: float | None = None

    @property
    def window_seconds(self) -> float:
        return self._window

    @property
    def pending(self) -> bool:
        return self._timer is not None and self._timer.active

    @property
    def pending_text(self) -> str | None:
        return self._pending_text

    @property
    def triggered_at(self) -> float | None:
        """Scheduler time of the most recent trigger in the open window."""
        return self._triggered_at

    @property
    def deadline(self) -> float | None:
        return self._timer.deadline if self.pending and self._timer else None

    def trigger(self, text: str) -> None:
        scheduler = self._scheduler or _running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._pending_text = text
        self._triggered_at = scheduler.time()
        self._timer = CancellableTimer(self._window, self._settle, scheduler)
        self._timer.start()

    def cancel(self) -> None:
        """Drop the pending window without emitting."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending_text = None
        self._triggered_at = None

    def _settle(self) -> None:
        text = self._pending_text
        self._timer = None
        self._pending_text = None
        self._triggered_at = None
        if text is None:
            return
        logger.debug("Debounce window settled", extra={"text_length": len(text)})
        self._on_settled(text)
