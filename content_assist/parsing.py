"""Response parsing for chat completions."""

import json
import re
from typing import Any

from .errors import ErrorKind, ProviderError
from .logging import get_logger
from .models import AltTextResult, Confidence, SummaryResult, TranslationResult


logger = get_logger("parsing")

# Filler the model sometimes emits despite the prompt
ALT_TEXT_PREFIX_PATTERN = re.compile(r'^(image of|picture of|photo of)\s+', re.IGNORECASE)


def extract_completion(response: dict[str, Any]) -> str:
    """Get choices[0].message.content from a completion envelope.

    Args:
        response: Decoded API response

    Returns:
        Completion text, or "" if the envelope has none
    """
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Completion envelope has no choices[0].message.content")
        return ""

    return content if isinstance(content, str) else ""


def strip_alt_text_prefix(alt_text: str) -> str:
    return ALT_TEXT_PREFIX_PATTERN.sub('', alt_text, count=1)


def parse_alt_text(response: dict[str, Any]) -> AltTextResult:
    alt_text = strip_alt_text_prefix(extract_completion(response).strip())
    return AltTextResult(alt_text=alt_text, confidence=Confidence.HIGH)


def count_words(text: str) -> int:
    return len(text.split())


def parse_summary(response: dict[str, Any]) -> SummaryResult:
    summary = extract_completion(response).strip()
    return SummaryResult(summary=summary, word_count=count_words(summary))


def parse_translation(response: dict[str, Any]) -> TranslationResult:
    """Decode the JSON object embedded in a translation completion.

    Args:
        response: Decoded API response

    Returns:
        Translated fields; missing keys become empty strings

    Raises:
        ProviderError: INVALID_TRANSLATION if the completion is not a JSON object
    """
    raw = extract_completion(response)

    try:
        translation = json.loads(raw)
    except ValueError:
        translation = None

    if not isinstance(translation, dict):
        raise ProviderError(ErrorKind.INVALID_TRANSLATION, "Failed to parse translation response.")

    def text(key: str) -> str:
        value = translation.get(key)
        return "" if value is None else str(value)

    return TranslationResult(
        title=text("title"),
        content=text("content"),
        excerpt=text("excerpt"),
    )
