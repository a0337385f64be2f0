"""Durable key/value stores backing the star cache and saved settings."""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from starcounter.config import settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal get/set/delete map the cache and settings are persisted in."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStore:
    """Process-local store. Values are copied in and out."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(MemoryStore):
    """Store persisted as a single JSON document.

    Every write rewrites the whole file through a temporary file and
    ``os.replace`` so a crash never leaves a half-written document behind.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path).expanduser()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable store file {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: top level is not an object")
            return
        self._data = data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._flush()

    def delete(self, key: str) -> None:
        if key not in self._data:
            return
        super().delete(key)
        self._flush()


# Global store instance
_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Get the global store instance."""
    global _store
    if _store is None:
        if settings.store_path:
            logger.info(f"Using JSON file store at {settings.store_path}")
            _store = JsonFileStore(settings.store_path)
        else:
            _store = MemoryStore()
    return _store
