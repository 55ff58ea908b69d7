"""Domain rules for nexushub: chat retention, password strength, search and context."""

from nexushub.engine.retention import prune_chat_history, RETENTION_WINDOW_MS
from nexushub.engine.strength import check_strength, generate_password
from nexushub.engine.search import global_search, SearchResult, SearchResultType
from nexushub.engine.context import build_assistant_context, upcoming_events

__all__ = [
    "prune_chat_history",
    "RETENTION_WINDOW_MS",
    "check_strength",
    "generate_password",
    "global_search",
    "SearchResult",
    "SearchResultType",
    "build_assistant_context",
    "upcoming_events",
]
