"""Languages offered for translation, by ISO 639-1 code."""

SUPPORTED_LANGUAGES = {
    'es': 'Spanish',
    'fr': 'French',
    'de': 'German',
    'ja': 'Japanese',
    'zh': 'Chinese',
    'pt': 'Portuguese',
    'it': 'Italian',
    'ru': 'Russian',
    'ar': 'Arabic',
    'hi': 'Hindi',
}

AUTO_DETECT = "auto"


def is_supported(code: str) -> bool:
    return code in SUPPORTED_LANGUAGES


def language_name(code: str) -> str:
    """English name for a language code, or the code itself if unknown."""
    return SUPPORTED_LANGUAGES.get(code, code)
