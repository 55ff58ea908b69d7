"""Active-user session record.

Logging out removes only this record; the user's collections stay in place.
"""

import json
import logging
from typing import Optional
from pydantic import ValidationError

from nexushub.models.constants import SESSION_KEY
from nexushub.models.user import User
from nexushub.storage.adapter import StorageAdapter

logger = logging.getLogger(__name__)


class SessionStore:
    """Persists the signed-in user under a single storage key."""

    def __init__(self, adapter: StorageAdapter, key: str = SESSION_KEY):
        self.adapter = adapter
        self.key = key

    def save(self, user: User) -> None:
        self.adapter.write(self.key, user.model_dump_json())

    def load(self) -> Optional[User]:
        """Return the saved user, or None if there is no (readable) session."""
        raw = self.adapter.read(self.key)
        if raw is None:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session record: {type(e).__name__}")
            return None

    def clear(self) -> None:
        self.adapter.remove(self.key)
