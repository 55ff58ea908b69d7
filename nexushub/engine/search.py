"""Global search across a user's links, password entries and events."""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field

from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem


class SearchResultType(str, Enum):
    """Kind of record a search hit points at."""
    LINK = "link"
    PASSWORD = "password"
    EVENT = "event"


class SearchResult(BaseModel):
    """A single search hit. Password hits never include the password."""

    type: SearchResultType
    id: str
    title: str = Field(..., description="Link title, password site, or event title")
    detail: str = Field("", description="URL, username, or event date")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True


def global_search(
    query: str,
    links: List[LinkItem],
    passwords: List[PasswordItem],
    events: List[CalendarEvent],
) -> List[SearchResult]:
    """Case-insensitive substring search.

    Links match on title or any tag, password entries on site or username,
    events on title. Results are grouped links, then passwords, then events,
    each group in its input order. A blank query returns nothing.
    """
    q = query.strip().lower()
    if not q:
        return []

    results: List[SearchResult] = []
    for link in links:
        if q in link.title.lower() or any(q in tag.lower() for tag in link.tags):
            results.append(SearchResult(type=SearchResultType.LINK, id=link.id or "", title=link.title, detail=link.url))
    for entry in passwords:
        if q in entry.site.lower() or q in entry.username.lower():
            results.append(
                SearchResult(type=SearchResultType.PASSWORD, id=entry.id or "", title=entry.site, detail=entry.username)
            )
    for event in events:
        if q in event.title.lower():
            results.append(SearchResult(type=SearchResultType.EVENT, id=event.id or "", title=event.title, detail=event.date))
    return results
