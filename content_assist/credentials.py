"""API key storage.

The key lives in the option store under a single option name. An empty
string counts as no key.
"""

import re

from .storage import OptionStore


API_KEY_OPTION = "openai_api_key"

_TAG_PATTERN = re.compile(r'<[^>]*>')
_CONTROL_PATTERN = re.compile(r'[\x00-\x1f\x7f]')


def sanitize_text_field(value: str) -> str:
    """Clean a single-line text setting.

    Strips markup and control characters (line breaks, tabs), collapses
    runs of whitespace and trims.

    Args:
        value: Raw input

    Returns:
        Sanitized string
    """
    result = _TAG_PATTERN.sub('', value)
    result = _CONTROL_PATTERN.sub(' ', result)
    result = re.sub(r'\s+', ' ', result)
    return result.strip()


def mask_key(api_key: str) -> str:
    """Render a key for display without revealing it.

    Args:
        api_key: The key

    Returns:
        Prefix and last four characters, e.g. "sk-...abcd"
    """
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:3]}...{api_key[-4:]}"


class CredentialStore:
    """Get/set/has access to the provider API key."""

    def __init__(self, options: OptionStore, option_name: str = API_KEY_OPTION):
        self.options = options
        self.option_name = option_name

    def get(self) -> str | None:
        api_key = self.options.get_option(self.option_name, "")
        return api_key if api_key else None

    def set(self, api_key: str) -> bool:
        return self.options.update_option(self.option_name, sanitize_text_field(api_key))

    def has(self) -> bool:
        return self.get() is not None

    def clear(self) -> bool:
        return self.options.delete_option(self.option_name)
