"""LinkItem data model for nexushub."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from nexushub.models.timestamps import now_ms


class Category(str, Enum):
    """Category enumeration shared by links and password entries."""
    WORK = "Work"
    PERSONAL = "Personal"
    ENTERTAINMENT = "Entertainment"
    FINANCE = "Finance"
    EDUCATION = "Education"
    SOCIAL = "Social"
    OTHER = "Other"


class LinkItem(BaseModel):
    """Saved bookmark."""

    id: Optional[str] = Field(None, description="Record identifier (assigned on insert)")
    user_id: str = Field("", alias="userId", description="User ID who owns this link")
    url: str = Field(..., description="Bookmarked URL")
    title: str = Field(..., description="Display title")
    category: Category = Field(Category.OTHER, description="Link category")
    tags: List[str] = Field(default_factory=list, description="Ordered list of short tags")
    clicks: int = Field(0, ge=0, description="Number of times the link was opened")
    created_at: int = Field(default_factory=now_ms, alias="createdAt", description="Creation time (epoch millis)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True
        populate_by_name = True
