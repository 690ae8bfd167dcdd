"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Timezone-aware timestamps for documents
- Token expiry conversions
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Current time in UTC, truncated to milliseconds (BSON datetime precision).
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def from_timestamp(ts: Optional[int]) -> Optional[datetime]:
    """
    Converts a JWT numeric date claim to an aware datetime.
    """
    if ts is None:
        return None
    return datetime.fromtimestamp(int(ts), tz=timezone.utc)
