"""Collection codec: one serialized blob per (collection, user) key.

Blobs are versioned JSON envelopes:

    {"version": 1, "collection": "links", "items": [{...}, {...}]}

Records are written with their camelCase field aliases. A bare JSON list is
accepted as an unversioned (version 0) blob. Anything that cannot be read
loads as an empty collection rather than failing.
"""

import json
import logging
from typing import List, Optional, Sequence, Type, TypeVar
from pydantic import BaseModel, ValidationError

from nexushub.models.constants import KEY_NAMESPACE, SERIALIZATION_VERSION
from nexushub.storage.adapter import StorageAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def collection_key(collection: str, user_id: Optional[str] = None) -> str:
    """Build the storage key for a collection.

    Args:
        collection: Collection name (e.g. "links")
        user_id: Owning user. None only for un-scoped collections such as the users directory.

    Returns:
        "nexus:<collection>:<user_id>", or "nexus:<collection>" when un-scoped
    """
    if not collection or ":" in collection:
        raise ValueError(f"Invalid collection name: {collection!r}")
    if user_id is None:
        return f"{KEY_NAMESPACE}:{collection}"
    if not user_id:
        raise ValueError(f"A user id is required to address collection {collection!r}")
    return f"{KEY_NAMESPACE}:{collection}:{user_id}"


class CollectionCodec:
    """Serializes lists of pydantic records to and from the storage adapter."""

    def __init__(self, adapter: StorageAdapter):
        self.adapter = adapter

    def load(self, key: str, model: Type[T]) -> List[T]:
        """Deserialize the collection stored under key.

        Returns an empty list when the key is absent or the blob is unreadable.
        Records that fail validation are skipped.
        """
        raw = self.adapter.read(key)
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Discarding unreadable blob under {key}: {type(e).__name__}")
            return []

        items = self._extract_items(key, payload)
        records: List[T] = []
        for item in items:
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {model.__name__} record under {key}: {e.error_count()} errors")
        return records

    def save(self, key: str, collection: str, records: Sequence[BaseModel]) -> None:
        """Serialize records and write them under key.

        Raises:
            StorageFullError: propagated unchanged from the adapter.
        """
        payload = {
            "version": SERIALIZATION_VERSION,
            "collection": collection,
            "items": [record.model_dump(mode="json", by_alias=True) for record in records],
        }
        self.adapter.write(key, json.dumps(payload, separators=(",", ":")))

    def _extract_items(self, key: str, payload) -> list:
        # Version 0: the bare list written before envelopes existed
        if isinstance(payload, list):
            return payload

        if not isinstance(payload, dict):
            logger.warning(f"Discarding blob under {key}: unexpected {type(payload).__name__} payload")
            return []

        version = payload.get("version")
        if version != SERIALIZATION_VERSION:
            logger.warning(f"Discarding blob under {key}: unsupported version {version!r}")
            return []

        items = payload.get("items")
        if not isinstance(items, list):
            logger.warning(f"Discarding blob under {key}: items is not a list")
            return []
        return items
