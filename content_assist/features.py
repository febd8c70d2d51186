"""Feature registration.

Each feature describes itself, registers its handlers with a registry,
and executes a request given as a plain dict (the shape a form post or
JSON body arrives in). Callers look handlers up by name.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .ai import AssistClient
from .builder import DEFAULT_SUMMARY_WORDS
from .errors import missing_field
from .languages import AUTO_DETECT
from .logging import get_logger
from .models import FeatureInfo, TranslationFields
from .storage import MetaStore


logger = get_logger("features")

ALT_TEXT_META_KEY = "_wp_attachment_image_alt"

Handler = Callable[[dict[str, Any]], dict[str, Any]]


class Feature(Protocol):
    """Capability set shared by all features."""

    def describe(self) -> FeatureInfo: ...

    def register(self, registry: "FeatureRegistry") -> None: ...

    def execute(self, data: dict[str, Any]) -> dict[str, Any]: ...


@dataclass
class FeatureRegistry:
    """Named handlers contributed by registered features."""

    _features: dict[str, Feature] = field(default_factory=dict)
    _handlers: dict[str, Handler] = field(default_factory=dict)

    def register(self, feature: Feature) -> None:
        info = feature.describe()
        self._features[info.id] = feature
        feature.register(self)
        logger.debug("Registered feature %s", info.id)

    def add_handler(self, name: str, handler: Handler) -> None:
        self._handlers[name] = handler

    def has_handler(self, name: str) -> bool:
        return name in self._handlers

    def execute(self, name: str, data: dict[str, Any]) -> dict[str, Any]:
        """Run a registered handler.

        Args:
            name: Handler name, e.g. 'ai/translate-content'
            data: Request fields

        Returns:
            JSON-ready result dict

        Raises:
            KeyError: If no handler is registered under name
        """
        if name not in self._handlers:
            raise KeyError(f"No handler registered for {name}")
        return self._handlers[name](data)

    def features(self) -> list[FeatureInfo]:
        return [feature.describe() for feature in self._features.values()]


def _positive_int(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


class AltTextFeature:
    """Generate alt text and optionally store it on the attachment."""

    HANDLER = "ai/generate-alt-text"

    def __init__(self, client: AssistClient, meta: MetaStore):
        self.client = client
        self.meta = meta

    def describe(self) -> FeatureInfo:
        return FeatureInfo(
            id="alt-text-generator",
            label="Alt Text Generator",
            description="Automatically generate descriptive alt text for images using AI.",
            handlers=[self.HANDLER],
        )

    def register(self, registry: FeatureRegistry) -> None:
        registry.add_handler(self.HANDLER, self.execute)

    def execute(self, data: dict[str, Any]) -> dict[str, Any]:
        image_url = data.get("image_url") or ""
        if not image_url:
            raise missing_field("image_url")

        result = self.client.generate_alt_text(image_url, data.get("context") or "")

        attachment_id = _positive_int(data.get("attachment_id"))
        if attachment_id:
            self.meta.update_meta(attachment_id, ALT_TEXT_META_KEY, result.alt_text)

        return result.to_dict()


class SummaryFeature:
    """Summarize post content."""

    HANDLER = "ai/summarize-content"

    def __init__(self, client: AssistClient):
        self.client = client

    def describe(self) -> FeatureInfo:
        return FeatureInfo(
            id="content-summarizer",
            label="Content Summarizer",
            description="Generate concise summaries of post content using AI.",
            handlers=[self.HANDLER],
        )

    def register(self, registry: FeatureRegistry) -> None:
        registry.add_handler(self.HANDLER, self.execute)

    def execute(self, data: dict[str, Any]) -> dict[str, Any]:
        content = data.get("content") or ""
        if not content:
            raise missing_field("content")

        max_length = _positive_int(data.get("max_length")) or DEFAULT_SUMMARY_WORDS
        return self.client.summarize(content, max_length).to_dict()


class TranslationFeature:
    """Translate post fields, through the cache when a content ID is given."""

    HANDLER = "ai/translate-content"

    def __init__(self, client: AssistClient):
        self.client = client

    def describe(self) -> FeatureInfo:
        return FeatureInfo(
            id="content-translator",
            label="Content Translator",
            description="Translate posts into multiple languages with context awareness.",
            handlers=[self.HANDLER],
        )

    def register(self, registry: FeatureRegistry) -> None:
        registry.add_handler(self.HANDLER, self.execute)

    def execute(self, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("content"):
            raise missing_field("content")

        fields = TranslationFields.from_dict(data)
        target_lang = data.get("target_lang") or ""
        source_lang = data.get("source_lang") or AUTO_DETECT

        content_id = data.get("content_id")
        if content_id:
            outcome = self.client.translate_cached(content_id, fields, target_lang, source_lang)
            return outcome.to_dict()

        return self.client.translate(fields, target_lang, source_lang).to_dict()


def build_registry(client: AssistClient, meta: MetaStore) -> FeatureRegistry:
    """Create a registry with all three features registered."""
    registry = FeatureRegistry()
    registry.register(AltTextFeature(client, meta))
    registry.register(SummaryFeature(client))
    registry.register(TranslationFeature(client))
    return registry
