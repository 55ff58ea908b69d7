"""Local persistence backend.

Emulates a per-user multi-collection database on top of a single
key-value store: each (collection, user) pair is one serialized list.
"""

import logging
from typing import List, Optional

from nexushub.auth.local_auth import LocalAuthenticator
from nexushub.auth.session import SessionStore
from nexushub.engine.retention import prune_chat_history
from nexushub.models.chat import ChatMessage
from nexushub.models.constants import (
    CHATS_COLLECTION,
    DEFAULT_STORAGE_LATENCY_MS,
    EVENTS_COLLECTION,
    LINKS_COLLECTION,
    PASSWORDS_COLLECTION,
    USERS_COLLECTION,
)
from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem
from nexushub.models.user import User, UserRecord
from nexushub.storage.adapter import StorageAdapter
from nexushub.storage.base import PersistenceBackend
from nexushub.storage.codec import CollectionCodec
from nexushub.storage.collection import Collection
from nexushub.storage.errors import StorageFullError
from nexushub.storage.kv_store import KeyValueStore, SqlKeyValueStore

logger = logging.getLogger(__name__)


class LocalBackend(PersistenceBackend):
    """Persistence facade over a local KeyValueStore."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        latency_ms: float = DEFAULT_STORAGE_LATENCY_MS,
        remember_session: bool = True,
    ):
        """Initialize the backend.

        Args:
            store: Backing key-value store. Defaults to the SQL-backed store.
            latency_ms: Simulated latency awaited by every call.
            remember_session: Persist the signed-in user on register/login.
                Disable when one backend serves many users (e.g. the HTTP API).
        """
        self.adapter = StorageAdapter(store if store is not None else SqlKeyValueStore())
        self.codec = CollectionCodec(self.adapter)
        self.latency_ms = latency_ms
        self.remember_session = remember_session

        self.links: Collection[LinkItem] = Collection(LINKS_COLLECTION, LinkItem, self.codec, latency_ms)
        self.passwords: Collection[PasswordItem] = Collection(PASSWORDS_COLLECTION, PasswordItem, self.codec, latency_ms)
        self.events: Collection[CalendarEvent] = Collection(EVENTS_COLLECTION, CalendarEvent, self.codec, latency_ms)
        self.chats: Collection[ChatMessage] = Collection(CHATS_COLLECTION, ChatMessage, self.codec, latency_ms)
        self.users: Collection[UserRecord] = Collection(USERS_COLLECTION, UserRecord, self.codec, latency_ms)

        self.auth = LocalAuthenticator(self.users)
        self.session = SessionStore(self.adapter)

    # --- Authentication ---

    async def register(self, email: str, password: str, name: str) -> User:
        user = await self.auth.register(email, password, name)
        self._remember(user)
        return user

    async def login(self, email: str, password: str) -> User:
        user = await self.auth.login(email, password)
        self._remember(user)
        return user

    def _remember(self, user: User) -> None:
        """Save the session record. The account stays valid if this write fails."""
        if not self.remember_session:
            return
        try:
            self.session.save(user)
        except StorageFullError as e:
            logger.warning(f"Could not save session for user {user.id}: {e.message}")

    async def logout(self) -> None:
        """Forget the signed-in user. Stored collections are kept."""
        self.session.clear()

    def current_user(self) -> Optional[User]:
        return self.session.load()

    # --- Links ---

    async def get_links(self, user_id: str) -> List[LinkItem]:
        return await self.links.get_all(user_id)

    async def add_link(self, link: LinkItem) -> LinkItem:
        return await self.links.add(link.user_id, link)

    async def delete_link(self, link_id: str, user_id: str) -> None:
        await self.links.delete(user_id, link_id)

    # --- Passwords ---

    async def get_passwords(self, user_id: str) -> List[PasswordItem]:
        return await self.passwords.get_all(user_id)

    async def add_password(self, entry: PasswordItem) -> PasswordItem:
        return await self.passwords.add(entry.user_id, entry)

    async def delete_password(self, entry_id: str, user_id: str) -> None:
        await self.passwords.delete(user_id, entry_id)

    # --- Events ---

    async def get_events(self, user_id: str) -> List[CalendarEvent]:
        return await self.events.get_all(user_id)

    async def add_event(self, event: CalendarEvent) -> CalendarEvent:
        return await self.events.add(event.user_id, event)

    async def update_event(self, event: CalendarEvent) -> None:
        await self.events.update(event.user_id, event)

    async def delete_event(self, event_id: str, user_id: str) -> None:
        await self.events.delete(user_id, event_id)

    # --- Chats ---

    async def get_chats(self, user_id: str) -> List[ChatMessage]:
        """Return the transcript in chronological order (oldest first)."""
        messages = await self.chats.get_all(user_id)
        # Stored newest-first; reverse so equal timestamps keep insertion order
        return sorted(reversed(messages), key=lambda message: message.timestamp)

    async def add_chat(self, message: ChatMessage, user_id: str) -> ChatMessage:
        return await self.chats.add(user_id, message)

    async def cleanup_storage(self, user_id: str, force_all: bool = False) -> int:
        """Prune the user's chat history.

        Args:
            user_id: Owner of the chat collection
            force_all: Wipe the whole history instead of applying the retention policy

        Returns:
            Number of messages removed. When force_all is set the return value is
            only a nonzero signal that the history was cleared.
        """
        await self.chats.simulate_latency()
        messages = self.chats.load(user_id)

        if force_all:
            self.chats.save(user_id, [])
            logger.info(f"Cleared chat history for user {user_id} ({len(messages)} messages)")
            return max(len(messages), 1)

        kept = prune_chat_history(messages)
        removed = len(messages) - len(kept)
        if removed == 0:
            return 0

        self.chats.save(user_id, kept)
        logger.debug(f"Removed {removed} chat messages for user {user_id}")
        return removed
