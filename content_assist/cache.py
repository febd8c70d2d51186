"""Translation cache.

Keeps the latest translation of each content item per target language in
the item's metadata. Entries never expire; a new translation overwrites
the old one.
"""

import time
from typing import Any

from .logging import get_logger
from .models import CachedTranslation, TranslationResult
from .storage import MetaStore


logger = get_logger("cache")

CACHE_KEY_PREFIX = "_ai_translations_"


def cache_key(lang: str) -> str:
    return f"{CACHE_KEY_PREFIX}{lang}"


def _entry_from_meta(data: Any) -> CachedTranslation | None:
    if not isinstance(data, dict) or not data:
        return None

    try:
        return CachedTranslation(
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            excerpt=str(data.get("excerpt") or ""),
            translated_at=int(data.get("translated_at") or 0),
        )
    except (TypeError, ValueError):
        return None


class TranslationCache:
    """Per-(content item, language) translation store."""

    def __init__(self, meta: MetaStore):
        self.meta = meta

    def get(self, content_id: int | str, lang: str) -> CachedTranslation | None:
        """Get the cached translation for a content item.

        Args:
            content_id: Content item ID
            lang: Target language code

        Returns:
            Cached translation if present and well formed, None otherwise
        """
        entry = _entry_from_meta(self.meta.get_meta(content_id, cache_key(lang)))
        if entry is None:
            logger.debug("Cache miss for %s/%s", content_id, lang)
        return entry

    def put(
        self,
        content_id: int | str,
        lang: str,
        result: TranslationResult,
        translated_at: int | None = None,
    ) -> CachedTranslation:
        """Store a translation, replacing any previous one for the same key.

        Args:
            content_id: Content item ID
            lang: Target language code
            result: Translated fields
            translated_at: UNIX timestamp (defaults to now)

        Returns:
            The stored entry
        """
        if translated_at is None:
            translated_at = int(time.time())

        entry = CachedTranslation.from_result(result, translated_at)
        self.meta.update_meta(content_id, cache_key(lang), entry.to_dict())
        logger.debug("Cached translation for %s/%s", content_id, lang)
        return entry

    def languages(self, content_id: int | str) -> list[str]:
        """List language codes with a cached translation for a content item."""
        return sorted(
            key[len(CACHE_KEY_PREFIX):]
            for key, value in self.meta.all_meta(content_id).items()
            if key.startswith(CACHE_KEY_PREFIX) and _entry_from_meta(value) is not None
        )
