"""Persistence facade contract shared by the local and remote backends."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, Field

from nexushub.models.chat import ChatMessage
from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem
from nexushub.models.user import User

logger = logging.getLogger(__name__)


class UserData(BaseModel):
    """Everything shown after sign-in."""

    links: List[LinkItem] = Field(default_factory=list)
    passwords: List[PasswordItem] = Field(default_factory=list)
    events: List[CalendarEvent] = Field(default_factory=list)
    removed_chats: int = Field(0, description="Chat messages pruned by the automatic cleanup")


class PersistenceBackend(ABC):
    """Async data-access surface. Callers can swap local and remote backends freely."""

    # --- Authentication ---

    @abstractmethod
    async def register(self, email: str, password: str, name: str) -> User:
        ...

    @abstractmethod
    async def login(self, email: str, password: str) -> User:
        ...

    @abstractmethod
    async def logout(self) -> None:
        ...

    # --- Links ---

    @abstractmethod
    async def get_links(self, user_id: str) -> List[LinkItem]:
        ...

    @abstractmethod
    async def add_link(self, link: LinkItem) -> LinkItem:
        ...

    @abstractmethod
    async def delete_link(self, link_id: str, user_id: str) -> None:
        ...

    # --- Passwords ---

    @abstractmethod
    async def get_passwords(self, user_id: str) -> List[PasswordItem]:
        ...

    @abstractmethod
    async def add_password(self, entry: PasswordItem) -> PasswordItem:
        ...

    @abstractmethod
    async def delete_password(self, entry_id: str, user_id: str) -> None:
        ...

    # --- Events ---

    @abstractmethod
    async def get_events(self, user_id: str) -> List[CalendarEvent]:
        ...

    @abstractmethod
    async def add_event(self, event: CalendarEvent) -> CalendarEvent:
        ...

    @abstractmethod
    async def update_event(self, event: CalendarEvent) -> None:
        ...

    @abstractmethod
    async def delete_event(self, event_id: str, user_id: str) -> None:
        ...

    # --- Chats ---

    @abstractmethod
    async def get_chats(self, user_id: str) -> List[ChatMessage]:
        ...

    @abstractmethod
    async def add_chat(self, message: ChatMessage, user_id: str) -> ChatMessage:
        ...

    @abstractmethod
    async def cleanup_storage(self, user_id: str, force_all: bool = False) -> int:
        ...

    # --- Composite operations ---

    async def load_user_data(self, user_id: str) -> UserData:
        """Load links, passwords and events together, then prune the chat history."""
        links, passwords, events = await asyncio.gather(
            self.get_links(user_id),
            self.get_passwords(user_id),
            self.get_events(user_id),
        )
        removed = await self.cleanup_storage(user_id)
        if removed:
            logger.info(f"Pruned {removed} chat messages for user {user_id}")
        return UserData(links=links, passwords=passwords, events=events, removed_chats=removed)

    async def toggle_event(self, user_id: str, event_id: str) -> Optional[CalendarEvent]:
        """Flip an event's completed flag. Returns the updated event, or None if unknown."""
        events = await self.get_events(user_id)
        for event in events:
            if event.id == event_id:
                updated = event.model_copy(update={"completed": not event.completed})
                await self.update_event(updated)
                return updated
        return None
