"""Key-value stores backing client-side history and gamification state."""

import json
import logging
import os
import tempfile
from typing import Dict, Optional

from ...domain.ports.storage import KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryStore(KeyValueStore):
    """Non-durable store, used for tests and throwaway sessions."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Durable store keeping every key in one JSON object on disk.

    A missing or corrupt file reads as empty. Writes replace the file
    atomically.
    """

    def __init__(self, path: str):
        """Initialize the store.

        Args:
            path: Location of the JSON file
        """
        self._path = os.path.expanduser(path)

    @property
    def path(self) -> str:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                items = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"⚠️ Corrupt state file {self._path} - treating as empty")
            return {}
        if not isinstance(items, dict):
            logger.warning(f"⚠️ Unexpected state file layout in {self._path} - treating as empty")
            return {}
        return items

    def _write(self, items: Dict[str, str]) -> None:
        directory = os.path.dirname(self._path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f)
            os.replace(tmp_path, self._path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
