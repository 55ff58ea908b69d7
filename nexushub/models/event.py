"""CalendarEvent data model for nexushub."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Calendar event type enumeration."""
    MEETING = "Meeting"
    BIRTHDAY = "Birthday"
    DEADLINE = "Deadline"
    REMINDER = "Reminder"


class CalendarEvent(BaseModel):
    """Calendar entry or task."""

    id: Optional[str] = Field(None, description="Record identifier (assigned on insert)")
    user_id: str = Field("", alias="userId", description="User ID who owns this event")
    title: str = Field(..., description="Event title")
    date: str = Field(..., description="Event date (ISO-8601 string)")
    type: EventType = Field(EventType.REMINDER, description="Event type")
    completed: bool = Field(False, description="Whether the event/task is done")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True
        populate_by_name = True
