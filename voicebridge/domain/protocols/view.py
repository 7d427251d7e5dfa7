"""Presentation contract the live pipeline writes to."""

from typing import Protocol


class PipelineView(Protocol):
    """Everything the user sees: two text panes, a status line, two controls."""

    def set_status(self, text: str, is_error: bool = False) -> None:
        ...

    def set_source_text(self, text: str) -> None:
        ...

    def set_translated_text(self, text: str) -> None:
        ...

    def set_listening(self, listening: bool) -> None:
        """Flip the listen control between start and stop."""
        ...

    def set_controls(self, *, listen_available: bool, speak_available: bool) -> None:
        """Hide controls whose capability the host lacks."""
        ...
