"""Data models for nexushub."""

from nexushub.models.link import LinkItem, Category
from nexushub.models.password import PasswordItem, PasswordStrength
from nexushub.models.event import CalendarEvent, EventType
from nexushub.models.chat import ChatMessage, ChatRole
from nexushub.models.user import User, UserRecord

__all__ = [
    "LinkItem",
    "Category",
    "PasswordItem",
    "PasswordStrength",
    "CalendarEvent",
    "EventType",
    "ChatMessage",
    "ChatRole",
    "User",
    "UserRecord",
]
