"""Data models for content-assist.

Contains data classes for feature results, cached translations, and the
client and site configuration.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class Confidence(str, Enum):
    """Confidence level reported with generated alt text."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class AltTextResult:
    """Generated alt text for an image.

    Attributes:
        alt_text: Screen-reader description (under ~125 characters)
        confidence: How reliable the description is
    """
    alt_text: str
    confidence: Confidence = Confidence.HIGH

    def to_dict(self) -> dict[str, Any]:
        return {"alt_text": self.alt_text, "confidence": self.confidence.value}


@dataclass
class SummaryResult:
    """Generated summary of a piece of content.

    Attributes:
        summary: Summary text
        word_count: Number of whitespace-separated words in the summary
    """
    summary: str
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TranslationFields:
    """Post fields submitted for translation. Empty fields are skipped."""
    title: str = ""
    content: str = ""
    excerpt: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TranslationFields":
        return cls(
            title=data.get("title") or "",
            content=data.get("content") or "",
            excerpt=data.get("excerpt") or "",
        )


@dataclass
class TranslationResult:
    """Translated post fields."""
    title: str = ""
    content: str = ""
    excerpt: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CachedTranslation:
    """A translation as stored in the translation cache.

    Attributes:
        title: Translated title
        content: Translated content
        excerpt: Translated excerpt
        translated_at: UNIX timestamp of the provider call
    """
    title: str
    content: str
    excerpt: str
    translated_at: int

    @classmethod
    def from_result(cls, result: TranslationResult, translated_at: int) -> "CachedTranslation":
        return cls(
            title=result.title,
            content=result.content,
            excerpt=result.excerpt,
            translated_at=translated_at,
        )

    def to_result(self) -> TranslationResult:
        return TranslationResult(title=self.title, content=self.content, excerpt=self.excerpt)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TranslationOutcome:
    """Result of a cache-aware translation.

    Attributes:
        translation: The translation, fresh or cached
        cached: True when served from the cache without a provider call
    """
    translation: CachedTranslation
    cached: bool

    def to_dict(self) -> dict[str, Any]:
        return {"translation": self.translation.to_dict(), "cached": self.cached}


@dataclass
class ClientConfig:
    """Provider client configuration.

    Attributes:
        base_url: API base URL
        timeout: Request timeout in seconds
        alt_text_model: Vision model used for alt text
        summary_model: Model used for summaries
        translation_model: Model used for translations
    """
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 30.0
    alt_text_model: str = "gpt-4o-mini"
    summary_model: str = "gpt-4.1-nano"
    translation_model: str = "gpt-4.1-nano"


@dataclass
class SiteConfig:
    """Where the site's files live, for turning private image URLs into paths.

    Attributes:
        home_url: Public base URL of the site
        root_dir: Directory served at home_url
        uploads_url: Base URL of the uploads directory
        uploads_dir: Directory served at uploads_url
    """
    home_url: str = "http://localhost"
    root_dir: str = "."
    uploads_url: Optional[str] = None
    uploads_dir: Optional[str] = None


@dataclass
class FeatureInfo:
    """Descriptive metadata for a registered feature."""
    id: str
    label: str
    description: str
    handlers: list[str] = field(default_factory=list)
