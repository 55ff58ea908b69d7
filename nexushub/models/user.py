"""User data models for nexushub."""

from typing import Optional
from pydantic import BaseModel, Field

from nexushub.models.timestamps import now_ms


class User(BaseModel):
    """Public user model. Never carries a password."""

    id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User display name")


class UserRecord(BaseModel):
    """User directory entry as stored (includes the plaintext password)."""

    id: Optional[str] = Field(None, description="Unique user identifier (assigned on insert)")
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Account password (plaintext)")
    name: Optional[str] = Field(None, description="User display name")
    created_at: int = Field(default_factory=now_ms, alias="createdAt", description="Registration time (epoch millis)")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    def to_public(self) -> User:
        """Strip the password before the record leaves the auth boundary."""
        return User(id=self.id, email=self.email, name=self.name)
