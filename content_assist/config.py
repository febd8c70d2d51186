"""Configuration management for content-assist.

Handles loading settings.json, validating provider settings, and locating
the data files that back the option and meta stores.
"""

import json
from pathlib import Path
from typing import Any

from .models import ClientConfig, SiteConfig


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


def get_config_dir() -> Path:
    """Get or create the config directory.

    Returns:
        Path to config directory (~/.config/content-assist/)
    """
    config_dir = Path.home() / ".config" / "content-assist"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Get or create the data directory for the option and meta stores.

    Returns:
        Path to data directory (~/.local/share/content-assist/)
    """
    data_dir = Path.home() / ".local" / "share" / "content-assist"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_options_path() -> Path:
    return get_data_dir() / "options.json"


def get_meta_path() -> Path:
    return get_data_dir() / "post_meta.json"


def load_settings(settings_path: Path | None = None) -> dict[str, Any]:
    """Load settings.json.

    Searches in the following order:
    1. Explicit path if provided
    2. ~/.config/content-assist/settings.json
    3. ./settings.json (current directory)

    Every setting has a default, so a missing file yields an empty dict.

    Args:
        settings_path: Optional explicit path to settings.json

    Returns:
        Dictionary of settings

    Raises:
        ConfigError: If an explicit path is missing or the JSON is invalid
    """
    if settings_path is not None:
        if not settings_path.exists():
            raise ConfigError(f"Settings file not found at {settings_path}.")
        found_path = settings_path
    else:
        config_path = get_config_dir() / "settings.json"
        local_path = Path("settings.json")

        if config_path.exists():
            found_path = config_path
        elif local_path.exists():
            found_path = local_path
        else:
            return {}

    try:
        with open(found_path, encoding="utf-8") as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {found_path}: {e}")

    if not isinstance(settings, dict):
        raise ConfigError(f"Expected a JSON object in {found_path}")

    return settings


def _section(data: dict[str, Any], name: str, label: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{label} must be a JSON object")
    return value


def get_client_config(settings: dict[str, Any]) -> ClientConfig:
    """Extract provider configuration from settings.

    Args:
        settings: Dictionary loaded from settings.json

    Returns:
        ClientConfig with defaults for anything unset

    Raises:
        ConfigError: If a section is not an object or the timeout is not
            a positive number
    """
    openai = _section(settings, "openai", "openai")
    models = _section(openai, "models", "openai.models")
    defaults = ClientConfig()

    try:
        timeout = float(openai.get("timeout", defaults.timeout))
    except (TypeError, ValueError):
        raise ConfigError("openai.timeout must be a number")

    if timeout <= 0:
        raise ConfigError("openai.timeout must be positive")

    return ClientConfig(
        base_url=openai.get("base_url", defaults.base_url),
        timeout=timeout,
        alt_text_model=models.get("alt_text", defaults.alt_text_model),
        summary_model=models.get("summary", defaults.summary_model),
        translation_model=models.get("translation", defaults.translation_model),
    )


def get_site_config(settings: dict[str, Any]) -> SiteConfig:
    """Extract the site URL/directory layout from settings.

    Args:
        settings: Dictionary loaded from settings.json

    Returns:
        SiteConfig used to resolve private image URLs to files

    Raises:
        ConfigError: If the site section is not an object
    """
    site = _section(settings, "site", "site")
    defaults = SiteConfig()
    return SiteConfig(
        home_url=site.get("home_url", defaults.home_url),
        root_dir=site.get("root_dir", defaults.root_dir),
        uploads_url=site.get("uploads_url"),
        uploads_dir=site.get("uploads_dir"),
    )
