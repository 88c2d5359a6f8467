"""UTC-everywhere time handling for invoice timestamps."""

from datetime import datetime, timezone
from typing import Callable

# Anything that returns "now". Injected into the derivation engine so tests can pin time.
Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """
    Current time in UTC.

    Default clock for invoice creation timestamps.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)

