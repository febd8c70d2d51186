"""content-assist - AI alt text, summaries and translations for site content.

A small client for the OpenAI chat completions API with a closed error
taxonomy and a per-item, per-language translation cache.
"""

__version__ = "0.1.0"
__author__ = "content-assist"

from .ai import AssistClient
from .cache import TranslationCache
from .credentials import CredentialStore
from .errors import ErrorKind, ProviderError
from .models import (
    AltTextResult,
    CachedTranslation,
    SummaryResult,
    TranslationFields,
    TranslationOutcome,
    TranslationResult,
)

__all__ = [
    "__version__",
    "AssistClient",
    "TranslationCache",
    "CredentialStore",
    "ErrorKind",
    "ProviderError",
    "AltTextResult",
    "CachedTranslation",
    "SummaryResult",
    "TranslationFields",
    "TranslationOutcome",
    "TranslationResult",
]
