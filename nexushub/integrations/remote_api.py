"""REST API backend for nexushub.

Implements the same facade as the local backend against a remote server.
The server assigns record ids (document databases report them as `_id`);
they are remapped to `id` on the way in, and client-side ids are stripped
before records are created.
"""

import asyncio
import os
import logging
from typing import Any, List, Optional, Type, TypeVar
import requests
from pydantic import BaseModel
from dotenv import load_dotenv

from nexushub.models.chat import ChatMessage
from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem
from nexushub.models.user import User
from nexushub.storage.base import PersistenceBackend
from nexushub.storage.errors import RemoteApiError

load_dotenv()

logger = logging.getLogger(__name__)

NEXUS_API_URL = os.getenv("NEXUS_API_URL", "http://localhost:8000/api")
REQUEST_TIMEOUT_SEC = 10

T = TypeVar("T", bound=BaseModel)


def from_wire(model: Type[T], item: dict) -> T:
    """Validate a server document, mapping `_id` onto `id`."""
    data = dict(item)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    return model.model_validate(data)


def to_wire(record: BaseModel) -> dict:
    """Serialize a record for creation/update; the server owns the id."""
    return record.model_dump(mode="json", by_alias=True, exclude={"id"})


class RemoteBackend(PersistenceBackend):
    """Persistence facade over the nexushub REST API (bearer-token auth)."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize the remote backend.

        Args:
            base_url: API root, e.g. "http://localhost:8000/api". Defaults to NEXUS_API_URL.
            token: Existing bearer token, if the caller already has a session.
        """
        self.base_url = (base_url or NEXUS_API_URL).rstrip("/")
        self.token = token

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method, url, headers=self._headers(), json=payload, timeout=REQUEST_TIMEOUT_SEC
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {type(e).__name__}")
            raise RemoteApiError(f"Could not reach the API: {type(e).__name__}") from e

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = None
            if isinstance(body, dict):
                message = body.get("message") or body.get("detail")
            if response.status_code == 401:
                # Session is no longer valid
                self.token = None
            logger.warning(f"{method} {path} returned {response.status_code}")
            raise RemoteApiError(str(message or f"Request failed: {response.reason}"), response.status_code)

        if not response.content:
            return None
        return response.json()

    async def _call(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        return await asyncio.to_thread(self._request, method, path, payload)

    async def _authenticate(self, path: str, payload: dict) -> User:
        data = await self._call("POST", path, payload)
        self.token = data["token"]
        return from_wire(User, data["user"])

    # --- Authentication ---

    async def register(self, email: str, password: str, name: str) -> User:
        return await self._authenticate("/auth/register", {"email": email, "password": password, "name": name})

    async def login(self, email: str, password: str) -> User:
        return await self._authenticate("/auth/login", {"email": email, "password": password})

    async def logout(self) -> None:
        self.token = None

    # --- Links ---

    async def get_links(self, user_id: str) -> List[LinkItem]:
        data = await self._call("GET", "/links")
        return [from_wire(LinkItem, item) for item in data]

    async def add_link(self, link: LinkItem) -> LinkItem:
        data = await self._call("POST", "/links", to_wire(link))
        return from_wire(LinkItem, data)

    async def delete_link(self, link_id: str, user_id: str) -> None:
        await self._call("DELETE", f"/links/{link_id}")

    # --- Passwords ---

    async def get_passwords(self, user_id: str) -> List[PasswordItem]:
        data = await self._call("GET", "/passwords")
        return [from_wire(PasswordItem, item) for item in data]

    async def add_password(self, entry: PasswordItem) -> PasswordItem:
        data = await self._call("POST", "/passwords", to_wire(entry))
        return from_wire(PasswordItem, data)

    async def delete_password(self, entry_id: str, user_id: str) -> None:
        await self._call("DELETE", f"/passwords/{entry_id}")

    # --- Events ---

    async def get_events(self, user_id: str) -> List[CalendarEvent]:
        data = await self._call("GET", "/events")
        return [from_wire(CalendarEvent, item) for item in data]

    async def add_event(self, event: CalendarEvent) -> CalendarEvent:
        data = await self._call("POST", "/events", to_wire(event))
        return from_wire(CalendarEvent, data)

    async def update_event(self, event: CalendarEvent) -> None:
        await self._call("PUT", f"/events/{event.id}", to_wire(event))

    async def delete_event(self, event_id: str, user_id: str) -> None:
        await self._call("DELETE", f"/events/{event_id}")

    # --- Chats ---
    # The REST API keeps no chat history; transcripts live only in the caller.

    async def get_chats(self, user_id: str) -> List[ChatMessage]:
        return []

    async def add_chat(self, message: ChatMessage, user_id: str) -> ChatMessage:
        return message

    async def cleanup_storage(self, user_id: str, force_all: bool = False) -> int:
        return 0
