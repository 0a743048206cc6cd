"""Time helpers shared by the engine.

Timestamps are stored timezone-aware in UTC. Naive datetimes coming from
callers are interpreted as UTC.
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(tz: Optional[Union[str, tzinfo]]) -> tzinfo:
    """Turn an IANA name (or an existing tzinfo) into a tzinfo. None means UTC.

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If the name is unknown
    """
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz
