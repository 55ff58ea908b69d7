"""Chat history retention policy.

Chat messages accumulate with every assistant exchange while the storage
quota is small, so each user's chat collection is pruned in two stages:

1. Age: messages older than the retention window are dropped.
2. Count: of the survivors, only the first CHAT_MAX_MESSAGES are kept.

The age stage must run first, otherwise stale messages could survive inside
the count window after a long period of inactivity. The count stage relies
on the stored order (newest at the head) and does not re-sort by timestamp.
"""

from typing import List, Optional

from nexushub.models.chat import ChatMessage
from nexushub.models.constants import CHAT_MAX_MESSAGES, CHAT_RETENTION_HOURS
from nexushub.models.timestamps import now_ms

RETENTION_WINDOW_MS = CHAT_RETENTION_HOURS * 60 * 60 * 1000


def prune_chat_history(
    messages: List[ChatMessage],
    now: Optional[int] = None,
    retention_window_ms: int = RETENTION_WINDOW_MS,
    max_messages: int = CHAT_MAX_MESSAGES,
) -> List[ChatMessage]:
    """Apply the age filter and then the count cap to a head-ordered chat list.

    Args:
        messages: Chat messages, most recently added first
        now: Reference time in epoch millis (defaults to the current time)
        retention_window_ms: Maximum message age
        max_messages: Maximum number of messages kept

    Returns:
        New list with the surviving messages in their original order
    """
    reference = now_ms() if now is None else now
    cutoff = reference - retention_window_ms
    fresh = [message for message in messages if message.timestamp >= cutoff]
    return fresh[:max_messages]
