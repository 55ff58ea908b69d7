"""Epoch-millisecond timestamp helpers shared by the data models."""

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def datetime_to_ms(value: datetime) -> int:
    """Convert a datetime (naive values are treated as UTC) to epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)
