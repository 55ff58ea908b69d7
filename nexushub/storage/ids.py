"""Record identifier generation.

Ids are epoch-millisecond strings, bumped forward when two records are
created within the same millisecond so they stay unique and monotonic
within a process.
"""

import threading

from nexushub.models.timestamps import now_ms

_lock = threading.Lock()
_last_id = 0


def new_record_id() -> str:
    """Return a fresh, strictly increasing record id."""
    global _last_id
    with _lock:
        candidate = now_ms()
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)
