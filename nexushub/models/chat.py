"""ChatMessage data model for nexushub."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from nexushub.models.timestamps import now_ms


class ChatRole(str, Enum):
    """Author of a chat message."""
    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """Assistant transcript entry.

    Messages carry no owner field; they are stored under a per-user
    collection key instead.
    """

    id: Optional[str] = Field(None, description="Record identifier (assigned on insert)")
    role: ChatRole = Field(..., description="Message author")
    text: str = Field(..., description="Message text")
    timestamp: int = Field(default_factory=now_ms, description="Message time (epoch millis)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True
