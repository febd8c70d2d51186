"""Key/value storage for content-assist.

The core never owns persistent state. It reads and writes through two
small ports: an option store for site-wide settings (the API key) and a
meta store for per-content-item values (cached translations, alt text).
JSON-file and in-memory implementations are provided.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .logging import get_logger


logger = get_logger("storage")


class OptionStore(Protocol):
    """Site-wide settings, in the manner of get_option/update_option."""

    def get_option(self, name: str, default: Any = None) -> Any: ...

    def update_option(self, name: str, value: Any) -> bool: ...

    def delete_option(self, name: str) -> bool: ...


class MetaStore(Protocol):
    """Per-content-item metadata, keyed by (content_id, key)."""

    def get_meta(self, content_id: int | str, key: str, default: Any = None) -> Any: ...

    def update_meta(self, content_id: int | str, key: str, value: Any) -> bool: ...

    def delete_meta(self, content_id: int | str, key: str) -> bool: ...

    def all_meta(self, content_id: int | str) -> dict[str, Any]: ...


def load_json(path: Path) -> dict[str, Any]:
    """Load a JSON object from disk.

    A file that isn't a JSON object is moved aside to ``<name>.corrupt``
    so the next write can't destroy what it held.

    Args:
        path: File to read

    Returns:
        Parsed object, or an empty dict if the file is missing or unusable
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        _set_aside(path, str(e))
        return {}
    except IOError as e:
        logger.error("Cannot read store %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        _set_aside(path, f"expected a JSON object, got {type(data).__name__}")
        return {}

    return data


def _set_aside(path: Path, reason: str) -> None:
    backup = path.with_name(path.name + ".corrupt")
    try:
        os.replace(path, backup)
    except OSError as e:
        logger.error("Corrupt store %s (%s) could not be moved aside: %s", path, reason, e)
        return
    logger.error("Corrupt store %s (%s), moved to %s", path, reason, backup)


def save_json(path: Path, data: dict[str, Any]) -> None:
    """Write a JSON object to disk, creating parent directories.

    The object is written to a temporary file in the same directory and
    renamed over the target, so readers never see a partial file.

    Args:
        path: File to write
        data: Object to serialize
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class MemoryOptionStore:
    """Dict-backed option store."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._options: dict[str, Any] = dict(initial or {})

    def _load(self) -> dict[str, Any]:
        return self._options

    def _save(self, options: dict[str, Any]) -> None:
        self._options = options

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._load().get(name, default)

    def update_option(self, name: str, value: Any) -> bool:
        options = self._load()
        if name in options and options[name] == value:
            return False
        options[name] = value
        self._save(options)
        return True

    def delete_option(self, name: str) -> bool:
        options = self._load()
        if name not in options:
            return False
        del options[name]
        self._save(options)
        return True


class JsonOptionStore(MemoryOptionStore):
    """Option store persisted as a single JSON object file."""

    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> dict[str, Any]:
        return load_json(self.path)

    def _save(self, options: dict[str, Any]) -> None:
        save_json(self.path, options)


class MemoryMetaStore:
    """Dict-backed meta store."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None):
        self._meta: dict[str, dict[str, Any]] = {
            str(k): dict(v) for k, v in (initial or {}).items()
        }

    def _load(self) -> dict[str, dict[str, Any]]:
        return self._meta

    def _save(self, meta: dict[str, dict[str, Any]]) -> None:
        self._meta = meta

    @staticmethod
    def _item(meta: dict[str, Any], content_id: int | str) -> dict[str, Any]:
        # Entries that aren't objects read as empty and are replaced on write
        item = meta.get(str(content_id))
        return item if isinstance(item, dict) else {}

    def get_meta(self, content_id: int | str, key: str, default: Any = None) -> Any:
        return self._item(self._load(), content_id).get(key, default)

    def update_meta(self, content_id: int | str, key: str, value: Any) -> bool:
        meta = self._load()
        item = self._item(meta, content_id)
        if key in item and item[key] == value:
            return False
        item[key] = value
        meta[str(content_id)] = item
        self._save(meta)
        return True

    def delete_meta(self, content_id: int | str, key: str) -> bool:
        meta = self._load()
        item = self._item(meta, content_id)
        if key not in item:
            return False
        del item[key]
        if not item:
            del meta[str(content_id)]
        self._save(meta)
        return True

    def all_meta(self, content_id: int | str) -> dict[str, Any]:
        return dict(self._item(self._load(), content_id))


class JsonMetaStore(MemoryMetaStore):
    """Meta store persisted as one JSON file mapping content IDs to meta dicts."""

    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> dict[str, dict[str, Any]]:
        return load_json(self.path)

    def _save(self, meta: dict[str, dict[str, Any]]) -> None:
        save_json(self.path, meta)
