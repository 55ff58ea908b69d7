"""PasswordItem data model for nexushub.

Passwords are kept in plaintext. This is a local simulation of a vault,
not a secure credential store.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from nexushub.models.link import Category
from nexushub.models.timestamps import now_ms


class PasswordStrength(str, Enum):
    """Password strength enumeration."""
    WEAK = "Weak"
    MEDIUM = "Medium"
    STRONG = "Strong"


class PasswordItem(BaseModel):
    """Password vault entry."""

    id: Optional[str] = Field(None, description="Record identifier (assigned on insert)")
    user_id: str = Field("", alias="userId", description="User ID who owns this entry")
    site: str = Field(..., description="Site or service name")
    username: str = Field(..., description="Account username")
    password: str = Field(..., description="Account password (plaintext)")
    category: Category = Field(Category.PERSONAL, description="Entry category")
    strength: PasswordStrength = Field(PasswordStrength.MEDIUM, description="Password strength rating")
    last_updated: int = Field(default_factory=now_ms, alias="lastUpdated", description="Last update time (epoch millis)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True
        populate_by_name = True
