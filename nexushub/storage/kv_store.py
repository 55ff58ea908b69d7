"""Backing key-value stores for the local persistence layer.

A store holds string values under string keys and enforces a size quota the
way browser storage does: the sum of key and value lengths, in characters,
may not exceed the quota. A write that would cross it raises
QuotaExceededError before anything is mutated, so the previous value of the
key survives.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional
from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from nexushub.database.database import SessionLocal
from nexushub.database.models import KeyValueDB
from nexushub.models.constants import DEFAULT_STORAGE_QUOTA_CHARS
from nexushub.storage.errors import QuotaExceededError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Synchronous string key-value store with a character quota."""

    def __init__(self, quota_chars: int = DEFAULT_STORAGE_QUOTA_CHARS):
        self.quota_chars = quota_chars

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, raising QuotaExceededError if it does not fit."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""

    @abstractmethod
    def usage(self) -> int:
        """Characters currently used (keys plus values)."""

    def _check_quota(self, key: str, value: str, used_by_others: int) -> None:
        required = used_by_others + len(key) + len(value)
        if required > self.quota_chars:
            raise QuotaExceededError(
                f"Writing {key!r} needs {required} characters, quota is {self.quota_chars}"
            )


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Used by tests and throwaway sessions."""

    def __init__(self, quota_chars: int = DEFAULT_STORAGE_QUOTA_CHARS):
        super().__init__(quota_chars)
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        used_by_others = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
        self._check_quota(key, value, used_by_others)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def usage(self) -> int:
        return sum(len(k) + len(v) for k, v in self._items.items())


class SqlKeyValueStore(KeyValueStore):
    """Durable store keeping one row per key in the `kv_entries` table."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        quota_chars: int = DEFAULT_STORAGE_QUOTA_CHARS,
    ):
        super().__init__(quota_chars)
        self.session_factory = session_factory

    def _used_chars(self, db: Session, exclude_key: Optional[str] = None) -> int:
        query = db.query(
            func.coalesce(func.sum(func.length(KeyValueDB.key) + func.length(KeyValueDB.value)), 0)
        )
        if exclude_key is not None:
            query = query.filter(KeyValueDB.key != exclude_key)
        return int(query.scalar() or 0)

    def get_item(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            row = db.get(KeyValueDB, key)
            return row.value if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            try:
                self._check_quota(key, value, self._used_chars(db, exclude_key=key))
                row = db.get(KeyValueDB, key)
                if row:
                    row.value = value
                else:
                    db.add(KeyValueDB(key=key, value=value))
                db.commit()
                logger.debug(f"Stored {len(value)} characters under {key}")
            except QuotaExceededError:
                db.rollback()
                raise
            except OperationalError as e:
                db.rollback()
                # SQLite reports SQLITE_FULL as "database or disk is full"
                if "full" in str(e.orig).lower():
                    raise QuotaExceededError(f"Database is full while writing {key!r}") from e
                logger.error(f"Failed to store {key}: {type(e).__name__}: {str(e)}")
                raise
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to store {key}: {type(e).__name__}: {str(e)}")
                raise

    def remove_item(self, key: str) -> None:
        with self.session_factory() as db:
            try:
                db.query(KeyValueDB).filter(KeyValueDB.key == key).delete(synchronize_session=False)
                db.commit()
                logger.debug(f"Removed {key}")
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to remove {key}: {type(e).__name__}: {str(e)}")
                raise

    def usage(self) -> int:
        with self.session_factory() as db:
            return self._used_chars(db)
