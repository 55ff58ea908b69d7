"""Context assembly for the assistant and the dashboard."""

from datetime import datetime, timezone
from typing import List, Optional

from nexushub.models.constants import UPCOMING_EVENTS_LIMIT
from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem


def parse_event_date(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 event date into an aware datetime (UTC if no offset)."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_assistant_context(
    links: List[LinkItem],
    passwords: List[PasswordItem],
    events: List[CalendarEvent],
) -> str:
    """Summarize the user's data for the assistant prompt.

    Only the sites of password entries are listed, never usernames or passwords.
    """
    link_lines = "; ".join(f"{l.title} ({l.url}) - Tags: {','.join(l.tags)}" for l in links)
    sites = ", ".join(p.site for p in passwords)
    open_events = "; ".join(f"{e.title} on {e.date}" for e in events if not e.completed)
    return (
        f"Links: {link_lines}\n"
        f"Passwords Stored For: {sites}\n"
        f"Upcoming Events: {open_events}"
    )


def upcoming_events(
    events: List[CalendarEvent],
    now: Optional[datetime] = None,
    limit: int = UPCOMING_EVENTS_LIMIT,
) -> List[CalendarEvent]:
    """Incomplete events dated after now, soonest first. Unparseable dates are skipped."""
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    dated = []
    for event in events:
        if event.completed:
            continue
        when = parse_event_date(event.date)
        if when is not None and when > reference:
            dated.append((when, event))
    dated.sort(key=lambda pair: pair[0])
    return [event for _, event in dated[:limit]]
