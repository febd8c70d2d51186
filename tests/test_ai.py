"""Tests for ai.py module.

Tests the alt text, summary and translation operations end to end against
a mock HTTP transport, including cache-aware translation.
"""

import json

import httpx
import pytest
from unittest.mock import MagicMock, patch

from content_assist.ai import AssistClient
from content_assist.cache import TranslationCache
from content_assist.credentials import CredentialStore
from content_assist.errors import ErrorKind, ProviderError
from content_assist.models import ClientConfig, TranslationFields, TranslationResult
from content_assist.storage import MemoryMetaStore, MemoryOptionStore
from content_assist.transport import Transport


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeOpenAI:
    """MockTransport handler serving canned completions."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        reply = self.replies.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=completion(reply))

    def bodies(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def credentials():
    """Credential store with a key set."""
    store = CredentialStore(MemoryOptionStore())
    store.set("sk-test")
    return store


@pytest.fixture
def cache():
    """Empty translation cache."""
    return TranslationCache(MemoryMetaStore())


def make_client(credentials, cache, handler, config=None):
    config = config or ClientConfig(base_url="https://api.test/v1")
    transport = Transport(
        credentials,
        base_url=config.base_url,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    return AssistClient(credentials, cache, config=config, transport=transport)


class TestGenerateAltText:
    """Tests for AssistClient.generate_alt_text."""

    def test_returns_cleaned_alt_text(self, credentials, cache):
        """Should send one vision request and strip filler prefixes."""
        handler = FakeOpenAI("Image of a red bicycle.")
        client = make_client(credentials, cache, handler)

        result = client.generate_alt_text("https://example.com/bike.jpg", "Bike shop")

        assert result.alt_text == "a red bicycle."
        assert result.to_dict() == {"alt_text": "a red bicycle.", "confidence": "high"}
        assert len(handler.requests) == 1
        assert handler.requests[0].url.path == "/v1/chat/completions"

    def test_uses_configured_model(self, credentials, cache):
        """Should use the alt text model from config."""
        handler = FakeOpenAI("A cat")
        config = ClientConfig(base_url="https://api.test/v1", alt_text_model="vision-x")
        client = make_client(credentials, cache, handler, config)

        client.generate_alt_text("https://example.com/cat.jpg")

        assert handler.bodies()[0]["model"] == "vision-x"

    def test_no_api_key(self, cache):
        """Should fail with NO_API_KEY before building the request."""
        handler = FakeOpenAI()
        client = make_client(CredentialStore(MemoryOptionStore()), cache, handler)

        with pytest.raises(ProviderError) as exc_info:
            client.generate_alt_text("http://192.168.1.5/missing.png")

        assert exc_info.value.kind is ErrorKind.NO_API_KEY
        assert handler.requests == []


class TestSummarize:
    """Tests for AssistClient.summarize."""

    def test_returns_summary_and_word_count(self, credentials, cache):
        """Should send cleaned content and count words in the reply."""
        handler = FakeOpenAI("  A short summary of the post.  ")
        client = make_client(credentials, cache, handler)

        result = client.summarize("<p>Long   post</p>", max_words=20)

        assert result.summary == "A short summary of the post."
        assert result.word_count == 6
        body = handler.bodies()[0]
        assert "Content:\nLong post" in body["messages"][0]["content"]
        assert body["max_tokens"] == 40

    def test_empty_content_makes_no_call(self, credentials, cache):
        """Should fail with EMPTY_CONTENT without calling the API."""
        handler = FakeOpenAI()
        client = make_client(credentials, cache, handler)

        with pytest.raises(ProviderError) as exc_info:
            client.summarize("<p>   </p>")

        assert exc_info.value.kind is ErrorKind.EMPTY_CONTENT
        assert handler.requests == []

    def test_api_error_propagates(self, credentials, cache):
        """Should surface provider errors unchanged."""
        handler = FakeOpenAI(httpx.Response(429, json={"error": {"message": "rate limited"}}))
        client = make_client(credentials, cache, handler)

        with pytest.raises(ProviderError) as exc_info:
            client.summarize("Some content")

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.status == 429
        assert exc_info.value.message == "rate limited"


class TestTranslate:
    """Tests for AssistClient.translate and translate_cached."""

    @pytest.fixture
    def fields(self):
        return TranslationFields(title="Hello", content="<p>World</p>", excerpt="Short")

    @pytest.fixture
    def reply(self):
        return json.dumps({"title": "Hola", "content": "<p>Mundo</p>", "excerpt": "Breve"})

    def test_translate(self, credentials, cache, fields, reply):
        """Should return the parsed translation without caching it."""
        handler = FakeOpenAI(reply)
        client = make_client(credentials, cache, handler)

        result = client.translate(fields, "es")

        assert result.title == "Hola"
        assert result.content == "<p>Mundo</p>"
        assert cache.get(1, "es") is None

    def test_cache_miss_then_hit(self, credentials, cache, fields, reply):
        """Should call the API once, then serve the cached translation."""
        handler = FakeOpenAI(reply)
        client = make_client(credentials, cache, handler)

        first = client.translate_cached(42, fields, "es")

        assert first.cached is False
        assert first.translation.title == "Hola"
        assert len(handler.requests) == 1
        assert cache.get(42, "es") == first.translation

        second = client.translate_cached(42, fields, "es")

        assert second.cached is True
        assert second.translation == first.translation
        assert len(handler.requests) == 1

    def test_different_language_misses(self, credentials, cache, fields, reply):
        """Should translate again for another language."""
        french = json.dumps({"title": "Bonjour", "content": "", "excerpt": ""})
        handler = FakeOpenAI(reply, french)
        client = make_client(credentials, cache, handler)

        client.translate_cached(42, fields, "es")
        outcome = client.translate_cached(42, fields, "fr")

        assert outcome.cached is False
        assert outcome.translation.title == "Bonjour"
        assert len(handler.requests) == 2

    def test_failure_leaves_cache_empty(self, credentials, cache, fields):
        """Should not cache anything when the reply can't be parsed."""
        handler = FakeOpenAI("not json")
        client = make_client(credentials, cache, handler)

        with pytest.raises(ProviderError) as exc_info:
            client.translate_cached(42, fields, "es")

        assert exc_info.value.kind is ErrorKind.INVALID_TRANSLATION
        assert cache.get(42, "es") is None

    def test_cache_hit_without_api_key(self, cache, fields):
        """Should serve cached translations even without a key."""
        cache.put(42, "es", TranslationResult(title="Hola"), translated_at=10)
        handler = FakeOpenAI()
        client = make_client(CredentialStore(MemoryOptionStore()), cache, handler)

        outcome = client.translate_cached(42, fields, "es")

        assert outcome.cached is True
        assert outcome.translation.title == "Hola"

    def test_unsupported_language_checked_before_cache(self, credentials, fields):
        """Should reject bad languages without reading the cache."""
        cache = MagicMock()
        client = make_client(credentials, cache, FakeOpenAI())

        with pytest.raises(ProviderError) as exc_info:
            client.translate_cached(42, fields, "xx")

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_LANGUAGE
        cache.get.assert_not_called()


class TestTestConnection:
    """Tests for AssistClient.test_connection."""

    def test_probes_models_endpoint(self, credentials, cache):
        """Should GET /models."""
        handler = FakeOpenAI(httpx.Response(200, json={"data": []}))
        client = make_client(credentials, cache, handler)

        assert client.test_connection() is True
        assert handler.requests[0].method == "GET"
        assert handler.requests[0].url.path == "/v1/models"

    def test_no_api_key(self, cache):
        """Should fail with NO_API_KEY."""
        client = make_client(CredentialStore(MemoryOptionStore()), cache, FakeOpenAI())

        with pytest.raises(ProviderError) as exc_info:
            client.test_connection()

        assert exc_info.value.kind is ErrorKind.NO_API_KEY

    @patch('content_assist.ai.Transport')
    def test_builds_transport_from_config(self, mock_transport, credentials, cache):
        """Should create a transport with the configured URL and timeout."""
        config = ClientConfig(base_url="https://proxy.test/v1", timeout=12.5)

        AssistClient(credentials, cache, config=config)

        mock_transport.assert_called_once_with(
            credentials,
            base_url="https://proxy.test/v1",
            timeout=12.5,
        )
