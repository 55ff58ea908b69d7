"""Storage adapter: the only code that talks to a backing key-value store."""

import logging
from typing import Optional

from nexushub.storage.errors import QuotaExceededError, StorageFullError
from nexushub.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class StorageAdapter:
    """Thin wrapper over a KeyValueStore that turns out-of-space failures into StorageFullError."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def read(self, key: str) -> Optional[str]:
        """Return the stored string, or None for an absent key."""
        return self.store.get_item(key)

    def write(self, key: str, value: str) -> None:
        """Store value under key.

        Raises:
            StorageFullError: the store is out of space; the previous value is untouched.
        """
        try:
            self.store.set_item(key, value)
        except QuotaExceededError as e:
            logger.warning(f"Storage quota exceeded writing {key}: {e}")
            raise StorageFullError() from e

    def remove(self, key: str) -> None:
        self.store.remove_item(key)
