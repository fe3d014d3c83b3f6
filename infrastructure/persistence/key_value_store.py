"""Key/value storage for persisted application state.

Values are plain strings; callers serialize their own data. Every write
replaces the stored document as a whole.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract string key/value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get value from the store.

        Args:
            key: Storage key

        Returns:
            Stored string or None if not present
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one.

        Args:
            key: Storage key
            value: String to store
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Missing keys are ignored.

        Args:
            key: Storage key to delete
        """


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dict-backed store.

    Useful for testing or when nothing should touch the disk.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._store: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._store[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)


class JSONFileKeyValueStore(KeyValueStore):
    """Store backed by a single JSON object file.

    The file is read once on construction. Writes go to a temporary file
    that is then renamed over the original, so a crash leaves either the
    old or the new document on disk.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize store.

        Args:
            path: Location of the JSON file (parent directories are created)
        """
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._store: Dict[str, str] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._store)
            updated[key] = value
            self._write(updated)
            self._store = updated

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._store:
                return
            updated = dict(self._store)
            del updated[key]
            self._write(updated)
            self._store = updated

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.exception("Could not read storage file %s, starting empty", self._path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object, starting empty", self._path)
            return {}

        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write(self, data: Dict[str, str]) -> None:
        """Write the whole document; memory is only updated after this succeeds."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
