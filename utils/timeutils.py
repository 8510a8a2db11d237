"""Timezone helpers shared by the filters and the bucketing functions."""
from datetime import datetime, timezone
from typing import Optional

import pytz

from config.settings import settings


def local_timezone(tz: Optional[pytz.BaseTzInfo] = None) -> pytz.BaseTzInfo:
    """Return ``tz`` or the configured local timezone."""
    return tz if tz is not None else settings.get_timezone()


def to_local(dt: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """Convert ``dt`` to an aware datetime in the local timezone.

    Naive datetimes are interpreted as local wall-clock time.
    """
    tz = local_timezone(tz)
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def to_utc(dt: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """Convert ``dt`` to UTC, treating naive values as local time."""
    return to_local(dt, tz).astimezone(timezone.utc)


def local_now(tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now(local_timezone(tz))
