"""Language code helpers shared by recognition, translation and synthesis."""

AUTO = "auto"

# Preferred synthesis locale per supported language
LANGUAGE_REGIONS: dict[str, str] = {
    "kn": "kn-IN",
    "te": "te-IN",
    "ta": "ta-IN",
    "ml": "ml-IN",
    "hi": "hi-IN",
    "en": "en-US",
}

DEFAULT_SYNTHESIS_TAG = "en-US"


def synthesis_tag(code: str) -> str:
    """IETF tag to look for when speaking `code`; unmapped codes use en-US."""
    return LANGUAGE_REGIONS.get(code.lower(), DEFAULT_SYNTHESIS_TAG)


def recognition_tag(source_lang: str, region: str = "IN", fallback: str = "en") -> str:
    """Tag handed to the recognition engine for the selected source language.

    >>> recognition_tag("kn")
    'kn-IN'
    >>> recognition_tag("auto")
    'en-IN'
    """
    lang = fallback if source_lang == AUTO else source_lang
    return f"{lang}-{region}"


def translation_source(source_lang: str, fallback: str = "en") -> str:
    """Source code sent to the translation endpoint; `auto` is not detected."""
    return fallback if source_lang == AUTO or not source_lang else source_lang
