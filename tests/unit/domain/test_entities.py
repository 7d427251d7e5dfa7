"""Tests for domain entities."""

import dataclasses

import pytest

from voicebridge.domain.entities import (
    LanguagePreference,
    TranscriptState,
    TranslationErrorKind,
    TranslationFailure,
    TranslationRequest,
    TranslationSuccess,
    VoiceEntry,
    VoiceMatch,
    VoiceSelection,
)


class TestTranscriptState:
    """Test TranscriptState entity."""

    def test_text_is_final_plus_interim(self):
        state = TranscriptState(final="hello ", interim="wor")

        assert state.text == "hello wor"

    def test_append_final_accumulates_and_clears_interim(self):
        state = TranscriptState()
        state.update_interim("hel")
        state.append_final("hello ")
        state.update_interim("wo")
        state.append_final("world")

        assert state.final == "hello world"
        assert state.interim == ""

    def test_reset(self):
        state = TranscriptState(final="a", interim="b")
        state.reset()

        assert state.text == ""


class TestTranslation:
    """Test translation value objects."""

    def test_request_payload(self):
        request = TranslationRequest(text="hello", source_lang="en", target_lang="kn")

        assert request.to_payload() == {"q": "hello", "source": "en", "target": "kn"}

    def test_results_are_immutable(self):
        success = TranslationSuccess("ನಮಸ್ಕಾರ")
        failure = TranslationFailure(TranslationErrorKind.PROVIDER_ERROR, "bad")

        with pytest.raises(dataclasses.FrozenInstanceError):
            success.translated_text = "other"  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            failure.detail = "other"  # type: ignore[misc]

    def test_ok_flags(self):
        assert TranslationSuccess("x").ok is True
        assert TranslationFailure(TranslationErrorKind.EMPTY_INPUT).ok is False

    @pytest.mark.parametrize(
        "kind,detail,expected",
        [
            (TranslationErrorKind.EMPTY_INPUT, "", "Please enter text or use live speech."),
            (TranslationErrorKind.PROVIDER_ERROR, "Translation provider error",
             "Translation error: Translation provider error"),
            (TranslationErrorKind.TRANSPORT_ERROR, "connection refused",
             "Network/server error: connection refused"),
        ],
    )
    def test_failure_describe(self, kind, detail, expected):
        assert TranslationFailure(kind, detail).describe() == expected


class TestVoiceSelection:
    """Test VoiceSelection entity."""

    def test_language_tag_prefers_voice(self):
        preference = LanguagePreference(requested_code="kn", resolved_tag="kn-IN")
        selection = VoiceSelection(preference, VoiceEntry("hi-IN"), VoiceMatch.FALLBACK)

        assert selection.language_tag == "hi-IN"

    def test_language_tag_without_voice_uses_resolved_tag(self):
        preference = LanguagePreference(requested_code="kn", resolved_tag="kn-IN")
        selection = VoiceSelection(preference)

        assert selection.voice is None
        assert selection.match is VoiceMatch.NONE
        assert selection.language_tag == "kn-IN"
