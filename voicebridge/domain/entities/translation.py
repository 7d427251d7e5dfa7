"""Translation request and result value objects."""

from dataclasses import dataclass
from enum import Enum


class TranslationErrorKind(str, Enum):
    """Why a translation did not produce text."""

    EMPTY_INPUT = "empty_input"
    PROVIDER_ERROR = "provider_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class TranslationRequest:
    """One call to the translation endpoint."""

    text: str
    source_lang: str
    target_lang: str

    def to_payload(self) -> dict[str, str]:
        """Wire body for POST /translate."""
        return {"q": self.text, "source": self.source_lang, "target": self.target_lang}


@dataclass(frozen=True)
class TranslationSuccess:
    translated_text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class TranslationFailure:
    error_kind: TranslationErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Status-line text for the user."""
        if self.error_kind is TranslationErrorKind.EMPTY_INPUT:
            return "Please enter text or use live speech."
        if self.error_kind is TranslationErrorKind.TRANSPORT_ERROR:
            return f"Network/server error: {self.detail or 'unknown'}"
        return f"Translation error: {self.detail or 'unknown'}"


TranslationResult = TranslationSuccess | TranslationFailure
