"""
Time-related utilities for the application.

Asset timestamps are generated in UTC and serialized as ISO-8601 strings
with timezone information, so they sort lexicographically in DynamoDB and
break display-order ties deterministically.
"""

import time
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


def epoch_seconds() -> int:
    """Return the current Unix time in whole seconds (lock lease arithmetic)."""
    return int(time.time())
