"""UTC helpers shared by the store and the report builder."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC range covering one calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def parse_date(date_str: str) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string, ``None`` if malformed."""
    if not _DATE_RE.match(date_str):
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        return None


def hours_between(start: datetime, end: datetime | None) -> float:
    """Elapsed hours of a visit; open visits count as zero."""
    if end is None:
        return 0.0
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600
