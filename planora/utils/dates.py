from datetime import datetime, timedelta, UTC
from math import ceil
from typing import Optional
from zoneinfo import ZoneInfo

from planora.config import TIMEZONE

DAY = timedelta(days=1)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC.

    SQLite hands back naive values; every datetime we store is UTC, so a
    naive value is taken to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_zone(name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(name or TIMEZONE)


def start_of_day(now: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Midnight of `now`'s calendar day in `tz`, returned in UTC."""
    tz = tz or local_zone()
    local = to_utc(now).astimezone(tz)
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(UTC)


def days_until(target: datetime, now: datetime) -> int:
    """Whole days until `target`, rounded up."""
    delta = to_utc(target) - to_utc(now)
    return ceil(delta / DAY)


def plural_days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def format_date(value: datetime, tz: Optional[ZoneInfo] = None) -> str:
    return to_utc(value).astimezone(tz or local_zone()).strftime("%b %d, %Y")


def format_time(value: datetime, tz: Optional[ZoneInfo] = None) -> str:
    return to_utc(value).astimezone(tz or local_zone()).strftime("%H:%M")
