"""Generic collection operations.

Every domain repository (links, passwords, events, chats, users) is a
Collection: four async primitives over the list stored under one
(collection, user) key. New records go to the head of the list, so list
order is most-recent-first.
"""

import asyncio
import logging
from typing import Generic, List, Optional, Type, TypeVar
from pydantic import BaseModel

from nexushub.models.constants import DEFAULT_STORAGE_LATENCY_MS
from nexushub.storage.codec import CollectionCodec, collection_key
from nexushub.storage.ids import new_record_id

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Collection(Generic[T]):
    """Add/get/update/delete over one named collection.

    Each call first waits for the simulated latency so callers behave the
    same whether the data is local or remote.
    """

    def __init__(
        self,
        name: str,
        model: Type[T],
        codec: CollectionCodec,
        latency_ms: float = DEFAULT_STORAGE_LATENCY_MS,
    ):
        self.name = name
        self.model = model
        self.codec = codec
        self.latency_ms = latency_ms

    def key(self, user_id: Optional[str]) -> str:
        return collection_key(self.name, user_id)

    async def simulate_latency(self) -> None:
        await asyncio.sleep(self.latency_ms / 1000 if self.latency_ms > 0 else 0)

    def load(self, user_id: Optional[str]) -> List[T]:
        """Read the collection without the simulated latency."""
        return self.codec.load(self.key(user_id), self.model)

    def save(self, user_id: Optional[str], records: List[T]) -> None:
        """Write the collection without the simulated latency."""
        self.codec.save(self.key(user_id), self.name, records)

    async def add(self, user_id: Optional[str], record: T) -> T:
        """Insert record at the head with a freshly generated id and return the stored copy."""
        await self.simulate_latency()
        stored = record.model_copy(update={"id": new_record_id()})
        records = self.load(user_id)
        records.insert(0, stored)
        self.save(user_id, records)
        logger.debug(f"Added {self.name} record {stored.id}")
        return stored

    async def get_all(self, user_id: Optional[str]) -> List[T]:
        """Return every record in stored (most-recent-first) order."""
        await self.simulate_latency()
        return self.load(user_id)

    async def update(self, user_id: Optional[str], record: T) -> None:
        """Replace the first record with the same id, keeping its position.

        Unknown ids are dropped silently and nothing is written.
        """
        await self.simulate_latency()
        records = self.load(user_id)
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                self.save(user_id, records)
                logger.debug(f"Updated {self.name} record {record.id}")
                return
        logger.debug(f"Ignoring update of unknown {self.name} record {record.id}")

    async def delete(self, user_id: Optional[str], record_id: str) -> None:
        """Remove every record with the given id. Unknown ids are a no-op."""
        await self.simulate_latency()
        records = self.load(user_id)
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            logger.debug(f"Ignoring delete of unknown {self.name} record {record_id}")
            return
        self.save(user_id, remaining)
        logger.debug(f"Deleted {self.name} record {record_id}")
