"""Request/response models for the nexushub HTTP API."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from nexushub.engine.search import SearchResult
from nexushub.integrations.openai_client import ParsedEvent
from nexushub.models.chat import ChatMessage
from nexushub.models.event import CalendarEvent
from nexushub.models.user import User


class RegisterRequest(BaseModel):
    """Request model for account registration."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Display name (required)")


class LoginRequest(BaseModel):
    """Request model for login."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Response model for authentication."""
    user: User
    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str


class AnalyzeLinkRequest(BaseModel):
    url: str = Field(..., min_length=1)
    title: Optional[str] = None


class ParseEventRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Natural-language event, e.g. 'Lunch with Sam tomorrow at 1pm'")


class ParseEventResponse(BaseModel):
    event: Optional[ParsedEvent] = Field(None, description="Null when the text could not be understood")


class AssistantChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class AssistantChatResponse(BaseModel):
    """Both sides of one exchange. saved is False if the transcript could not be stored."""
    message: ChatMessage
    reply: ChatMessage
    saved: bool = True


class CleanupResponse(BaseModel):
    removed: int


class SearchResponse(BaseModel):
    results: List[SearchResult]
    count: int


class TipResponse(BaseModel):
    tip: str


class GeneratedPasswordResponse(BaseModel):
    password: str
    strength: str


class DashboardResponse(BaseModel):
    """Summary figures for the dashboard view."""
    upcoming_events: List[CalendarEvent]
    weak_passwords: int
    links_by_category: Dict[str, int]
    total_links: int
    total_passwords: int
    open_events: int
