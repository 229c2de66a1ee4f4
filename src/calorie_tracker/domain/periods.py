"""Calendar period bucketing in a caller-supplied timezone."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_logger = logging.getLogger(__name__)

DECEMBER = 12
MAX_OFFSET_HOURS = 23
MAX_OFFSET_MINUTES = 59

_OFFSET_PATTERN = re.compile(r"^(?P<sign>[+-])(?P<hours>\d{2}):?(?P<minutes>\d{2})?$")


class Granularity(Enum):
    """Calendar unit used to partition timestamps."""

    DAY = "day"
    MONTH = "month"


@dataclass(frozen=True)
class Period:
    """Absolute [start, end) window for one calendar day or month."""

    key: str
    start: datetime
    end: datetime


def resolve_timezone(name: str | tzinfo | None) -> tzinfo:
    """Return a tzinfo for an IANA name or UTC offset, falling back to UTC."""
    if isinstance(name, tzinfo):
        return name
    if name is None or not name.strip():
        return UTC
    cleaned = name.strip()
    if cleaned.upper() in {"Z", "UTC"}:
        return UTC
    match = _OFFSET_PATTERN.match(cleaned)
    if match:
        hours = int(match["hours"])
        minutes = int(match["minutes"] or 0)
        if hours > MAX_OFFSET_HOURS or minutes > MAX_OFFSET_MINUTES:
            _logger.warning("Invalid UTC offset %r, using UTC", cleaned)
            return UTC
        offset = timedelta(hours=hours, minutes=minutes)
        return timezone(-offset if match["sign"] == "-" else offset)
    try:
        return ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        _logger.warning("Unknown timezone %r, using UTC", cleaned)
        return UTC


def as_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC and normalize aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


def bucket_of(
    timestamp: datetime, tz: str | tzinfo | None, granularity: Granularity
) -> Period:
    """Return the calendar period containing ``timestamp`` in ``tz``."""
    zone = resolve_timezone(tz)
    local_day = as_utc(timestamp).astimezone(zone).date()
    if granularity is Granularity.DAY:
        first = local_day
        following = first + timedelta(days=1)
        key = first.isoformat()
    else:
        first = local_day.replace(day=1)
        if first.month == DECEMBER:
            following = first.replace(year=first.year + 1, month=1)
        else:
            following = first.replace(month=first.month + 1)
        key = f"{first.year:04d}-{first.month:02d}"
    return Period(
        key=key,
        start=_local_midnight(first, zone),
        end=_local_midnight(following, zone),
    )


def period_first_day(key: str) -> date:
    """Return the first calendar day named by a bucket key."""
    if len(key) == len("YYYY-MM"):
        return date.fromisoformat(f"{key}-01")
    return date.fromisoformat(key)


def _local_midnight(day: date, zone: tzinfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=zone).astimezone(UTC)
