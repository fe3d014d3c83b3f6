"""API key persistence.

The key is stored base64-encoded. This only keeps the literal key out of
the storage file; anyone who can read the file can decode it.
"""

import base64
import binascii
import logging
from typing import Optional

from config.constants import API_KEY_STORAGE_KEY
from infrastructure.persistence.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


def encode_key(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_key(encoded: str) -> str:
    """Decode a stored key, returning the input unchanged if it is not base64."""
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        logger.warning("Stored API key is not valid base64, using it as stored")
        return encoded


class CredentialStore:
    """Save, read and clear the single text-generation API key."""

    def __init__(self, store: KeyValueStore, storage_key: str = API_KEY_STORAGE_KEY) -> None:
        self._store = store
        self._storage_key = storage_key

    def save(self, raw: str) -> None:
        """Store a key. Empty input is ignored."""
        if not raw:
            return
        self._store.set(self._storage_key, encode_key(raw))
        logger.debug("API key saved")

    def get(self) -> Optional[str]:
        """Return the decoded key, or None when nothing is stored."""
        stored = self._store.get(self._storage_key)
        if not stored:
            return None
        return decode_key(stored)

    def remove(self) -> None:
        self._store.remove(self._storage_key)
        logger.debug("API key removed")

    def has_credential(self) -> bool:
        return self.get() is not None
