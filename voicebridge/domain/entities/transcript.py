"""Transcript state for one listening turn."""

from dataclasses import dataclass


@dataclass
class TranscriptState:
    """Accumulated recognition text for the current turn.

    `final` only grows within a turn; `interim` is display-only text that the
    engine may still revise and is never sent to translation on its own.
    """

    interim: str = ""
    final: str = ""

    @property
    def text(self) -> str:
        """Full text as shown to the user: committed text plus the live tail."""
        return self.final + self.interim

    def update_interim(self, text: str) -> None:
        self.interim = text

    def append_final(self, text: str) -> None:
        """Commit a finalized segment. The interim tail it replaces is dropped."""
        self.final += text
        self.interim = ""

    def reset(self) -> None:
        """Start a new turn."""
        self.interim = ""
        self.final = ""
