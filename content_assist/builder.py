"""Request payloads for the chat completions endpoint.

One pure function per feature turns typed input into the JSON body the
provider expects. Private image URLs the provider cannot fetch are
inlined as base64 data URIs read from the site's files.
"""

import base64
import io
import ipaddress
import re
from pathlib import Path
from typing import Any
from urllib.parse import SplitResult, unquote, urlsplit

from bs4 import BeautifulSoup
from PIL import Image, UnidentifiedImageError

from .errors import ErrorKind, ProviderError
from .languages import AUTO_DETECT, is_supported, language_name
from .logging import get_logger
from .models import ClientConfig, SiteConfig, TranslationFields


logger = get_logger("builder")


ALT_TEXT_PROMPT = (
    "Generate a concise, descriptive alt text for this image suitable for screen readers. "
    "Focus on the main subject and important details. Keep it under 125 characters. "
    'Do not include phrases like "image of" or "picture of". '
)

SUMMARY_PROMPT = (
    "Summarize the following content in approximately {max_words} words. "
    "Create a clear, concise summary that captures the main points. "
    "Return only the summary, nothing else.\n\nContent:\n{content}"
)

TRANSLATION_PROMPT = (
    "Translate the following content{source} to {target}. "
    "Maintain all HTML formatting, links, and structure. "
    "Provide natural, contextually appropriate translations.\n\n"
    "Return the translation as a JSON object with these keys: title, content, excerpt\n\n"
)

ALT_TEXT_MAX_TOKENS = 100
MIN_SUMMARY_WORDS = 10
MAX_SUMMARY_WORDS = 200
DEFAULT_SUMMARY_WORDS = 50

PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)

EXTENSION_MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
}


def is_private_host(host: str) -> bool:
    """Check whether a host is unreachable from the public internet.

    Covers localhost names, loopback addresses and the RFC 1918 ranges.
    Hostnames are not resolved.

    Args:
        host: Hostname or IP literal from a URL

    Returns:
        True if the provider would not be able to fetch from this host
    """
    host = host.lower().rstrip('.')

    if host == 'localhost' or host.endswith('.localhost'):
        return True

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False

    if address.is_loopback:
        return True

    return any(address in network for network in PRIVATE_NETWORKS)


def _path_below(parts: SplitResult, base_url: str) -> str | None:
    """Return the URL path below base_url, or None if the URL isn't under it.

    Scheme and host (with port) must match exactly and the path must sit
    at or below the base path on a segment boundary.
    """
    base = urlsplit(base_url)
    if parts.scheme.lower() != base.scheme.lower() or parts.netloc.lower() != base.netloc.lower():
        return None

    base_path = base.path.rstrip('/')
    if parts.path == base_path or parts.path.startswith(base_path + '/'):
        return parts.path[len(base_path):]
    return None


def resolve_local_path(image_url: str, site: SiteConfig) -> Path:
    """Map a site URL to the file it is served from.

    Uploads URLs map into the uploads directory, other site URLs and
    URLs on other private hosts map under the site root. The result must
    stay inside the directory it was mapped into.

    Args:
        image_url: URL of an image on this site
        site: Site URL/directory layout

    Returns:
        Resolved path to the file (not checked for existence)

    Raises:
        ProviderError: FILE_NOT_FOUND if the path escapes its directory
    """
    parts = urlsplit(image_url)

    relative = None
    if site.uploads_url and site.uploads_dir:
        relative = _path_below(parts, site.uploads_url)
        base = Path(site.uploads_dir)
    if relative is None:
        relative = _path_below(parts, site.home_url)
        base = Path(site.root_dir)
    if relative is None:
        relative = parts.path

    base = base.resolve()
    path = (base / unquote(relative).lstrip('/')).resolve()

    if not path.is_relative_to(base):
        logger.warning("Refusing %s: resolves outside %s", image_url, base)
        raise ProviderError(ErrorKind.FILE_NOT_FOUND, f"Image file not found: {image_url}")

    return path


def detect_mime_type(path: Path, data: bytes) -> str:
    """Determine the MIME type of image bytes.

    Args:
        path: File the bytes came from
        data: Image content

    Returns:
        MIME type from the decoded format, then the extension, else image/jpeg
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
    except (UnidentifiedImageError, OSError):
        image_format = None

    if image_format and image_format in Image.MIME:
        return Image.MIME[image_format]

    return EXTENSION_MIME_TYPES.get(path.suffix.lower(), 'image/jpeg')


def encode_local_image(path: Path) -> str:
    """Read an image file into a base64 data URI.

    Args:
        path: Image file

    Returns:
        data:<mime>;base64,<content>

    Raises:
        ProviderError: FILE_NOT_FOUND or FILE_READ_ERROR
    """
    if not path.is_file():
        raise ProviderError(ErrorKind.FILE_NOT_FOUND, f"Image file not found: {path}")

    try:
        image_data = path.read_bytes()
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        raise ProviderError(ErrorKind.FILE_READ_ERROR, "Failed to read image file.") from e

    mime_type = detect_mime_type(path, image_data)
    encoded = base64.b64encode(image_data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def process_image_url(image_url: str, site: SiteConfig) -> str:
    """Return a URL the provider can load.

    Public URLs pass through unchanged; private ones become data URIs.

    Args:
        image_url: Image URL
        site: Site URL/directory layout

    Returns:
        The original URL or a data URI
    """
    host = urlsplit(image_url).hostname or ''

    if not is_private_host(host):
        return image_url

    path = resolve_local_path(image_url, site)
    logger.debug("Inlining private image %s from %s", image_url, path)
    return encode_local_image(path)


def build_alt_text_payload(
    image_url: str,
    context: str = "",
    *,
    site: SiteConfig | None = None,
    model: str = ClientConfig.alt_text_model,
) -> dict[str, Any]:
    """Build the vision request for alt text.

    Args:
        image_url: Image to describe
        context: Optional hint, e.g. the attachment title
        site: Site layout for private URLs
        model: Vision model name

    Returns:
        Chat completions request body
    """
    processed_url = process_image_url(image_url, site or SiteConfig())

    prompt = ALT_TEXT_PROMPT
    if context:
        prompt += f"Context: {context} "
    prompt += "Return only the alt text, nothing else."

    return {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": processed_url}},
                ],
            }
        ],
        "max_tokens": ALT_TEXT_MAX_TOKENS,
    }


def clean_content(content: str) -> str:
    """Strip markup and collapse whitespace.

    Args:
        content: HTML or plain text

    Returns:
        Plain text on a single line
    """
    soup = BeautifulSoup(content, 'lxml')
    for tag in soup(['script', 'style']):
        tag.decompose()

    text = soup.get_text(' ')
    return re.sub(r'\s+', ' ', text).strip()


def clamp_max_words(max_words: int) -> int:
    return max(MIN_SUMMARY_WORDS, min(MAX_SUMMARY_WORDS, int(max_words)))


def build_summary_payload(
    content: str,
    max_words: int = DEFAULT_SUMMARY_WORDS,
    *,
    model: str = ClientConfig.summary_model,
) -> dict[str, Any]:
    """Build the summary request.

    Args:
        content: Content to summarize, markup allowed
        max_words: Target summary length, clamped to 10-200
        model: Model name

    Returns:
        Chat completions request body

    Raises:
        ProviderError: EMPTY_CONTENT if nothing is left after cleaning
    """
    clean = clean_content(content)
    if not clean:
        raise ProviderError(ErrorKind.EMPTY_CONTENT, "No content to summarize.")

    max_words = clamp_max_words(max_words)

    return {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": SUMMARY_PROMPT.format(max_words=max_words, content=clean),
            }
        ],
        # ~1.3 tokens per word, doubled for headroom
        "max_tokens": max_words * 2,
        "temperature": 0.7,
    }


def validate_target_language(target_lang: str) -> None:
    """Raise MISSING_TARGET_LANGUAGE or UNSUPPORTED_LANGUAGE if invalid."""
    if not target_lang:
        raise ProviderError(ErrorKind.MISSING_TARGET_LANGUAGE, "Target language is required.")
    if not is_supported(target_lang):
        raise ProviderError(
            ErrorKind.UNSUPPORTED_LANGUAGE,
            f"Unsupported target language: {target_lang}",
        )


def build_translation_payload(
    fields: TranslationFields,
    target_lang: str,
    source_lang: str = AUTO_DETECT,
    *,
    model: str = ClientConfig.translation_model,
) -> dict[str, Any]:
    """Build the translation request.

    Args:
        fields: Title, content and excerpt; empty ones are left out
        target_lang: ISO 639-1 code from the supported table
        source_lang: Source code, or "auto" to let the model detect it
        model: Model name

    Returns:
        Chat completions request body asking for a JSON object reply
    """
    validate_target_language(target_lang)

    source = "" if not source_lang or source_lang == AUTO_DETECT else f" from {language_name(source_lang)}"
    prompt = TRANSLATION_PROMPT.format(source=source, target=language_name(target_lang))

    if fields.title:
        prompt += f"Title:\n{fields.title}\n\n"
    if fields.content:
        prompt += f"Content:\n{fields.content}\n\n"
    if fields.excerpt:
        prompt += f"Excerpt:\n{fields.excerpt}\n\n"

    return {
        "model": model,
        "messages": [
            {"role": "user", "content": prompt},
        ],
        "temperature": 0.3,
        "response_format": {"type": "json_object"},
    }
