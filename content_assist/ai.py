"""AI feature operations for content-assist.

Each operation checks for an API key, builds one request, sends it once
and parses the reply. Translations can be served from, and written to,
the translation cache.
"""

from typing import Any

from .builder import (
    DEFAULT_SUMMARY_WORDS,
    build_alt_text_payload,
    build_summary_payload,
    build_translation_payload,
    validate_target_language,
)
from .cache import TranslationCache
from .credentials import CredentialStore
from .errors import no_api_key
from .languages import AUTO_DETECT
from .logging import get_logger
from .models import (
    AltTextResult,
    ClientConfig,
    SiteConfig,
    SummaryResult,
    TranslationFields,
    TranslationOutcome,
    TranslationResult,
)
from .parsing import parse_alt_text, parse_summary, parse_translation
from .transport import Transport


logger = get_logger("ai")

CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"
MODELS_ENDPOINT = "/models"


class AssistClient:
    """Alt text, summary and translation operations against the provider."""

    def __init__(
        self,
        credentials: CredentialStore,
        cache: TranslationCache,
        *,
        config: ClientConfig | None = None,
        site: SiteConfig | None = None,
        transport: Transport | None = None,
    ):
        """Initialize the client.

        Args:
            credentials: API key store
            cache: Translation cache
            config: Provider settings (defaults apply if omitted)
            site: Site layout for inlining private images
            transport: Transport to send with; built from config if omitted
        """
        self.credentials = credentials
        self.cache = cache
        self.config = config or ClientConfig()
        self.site = site or SiteConfig()
        self.transport = transport or Transport(
            credentials,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )

    def close(self) -> None:
        self.transport.close()

    def _require_api_key(self) -> None:
        if not self.credentials.has():
            raise no_api_key(
                "OpenAI API key is not configured. Run 'content-assist set-key' to configure it."
            )

    def _complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self.transport.send(CHAT_COMPLETIONS_ENDPOINT, payload)

    def test_connection(self) -> bool:
        """Check that the API key is accepted by listing models.

        Returns:
            True on success

        Raises:
            ProviderError: On a missing key or any request failure
        """
        if not self.credentials.has():
            raise no_api_key("No API key configured.")

        self.transport.send(MODELS_ENDPOINT, method="GET")
        return True

    def generate_alt_text(self, image_url: str, context: str = "") -> AltTextResult:
        """Generate alt text for an image.

        Args:
            image_url: Public URL, or a private one that maps to a site file
            context: Optional hint about the image

        Returns:
            AltTextResult with the description and confidence
        """
        self._require_api_key()

        payload = build_alt_text_payload(
            image_url,
            context,
            site=self.site,
            model=self.config.alt_text_model,
        )
        result = parse_alt_text(self._complete(payload))
        logger.info("Generated alt text for %s", image_url)
        return result

    def summarize(self, content: str, max_words: int = DEFAULT_SUMMARY_WORDS) -> SummaryResult:
        """Summarize content.

        Args:
            content: Text or HTML to summarize
            max_words: Approximate summary length (10-200)

        Returns:
            SummaryResult with the summary and its word count
        """
        self._require_api_key()

        payload = build_summary_payload(content, max_words, model=self.config.summary_model)
        result = parse_summary(self._complete(payload))
        logger.info("Generated %d-word summary", result.word_count)
        return result

    def translate(
        self,
        fields: TranslationFields,
        target_lang: str,
        source_lang: str = AUTO_DETECT,
    ) -> TranslationResult:
        """Translate post fields without touching the cache.

        Args:
            fields: Title, content and excerpt
            target_lang: Target language code
            source_lang: Source language code or "auto"

        Returns:
            Translated fields
        """
        self._require_api_key()

        payload = build_translation_payload(
            fields,
            target_lang,
            source_lang,
            model=self.config.translation_model,
        )
        result = parse_translation(self._complete(payload))
        logger.info("Translated content to %s", target_lang)
        return result

    def translate_cached(
        self,
        content_id: int | str,
        fields: TranslationFields,
        target_lang: str,
        source_lang: str = AUTO_DETECT,
    ) -> TranslationOutcome:
        """Translate a content item, serving a cached translation when present.

        A cache hit makes no provider call. A miss makes exactly one and
        caches the result.

        Args:
            content_id: Content item ID (cache key with target_lang)
            fields: Title, content and excerpt of the item
            target_lang: Target language code
            source_lang: Source language code or "auto"

        Returns:
            TranslationOutcome with the translation and the cached flag
        """
        validate_target_language(target_lang)

        cached = self.cache.get(content_id, target_lang)
        if cached is not None:
            logger.info("Serving cached %s translation of %s", target_lang, content_id)
            return TranslationOutcome(translation=cached, cached=True)

        result = self.translate(fields, target_lang, source_lang)
        entry = self.cache.put(content_id, target_lang, result)
        return TranslationOutcome(translation=entry, cached=False)
