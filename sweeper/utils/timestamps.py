"""Timezone-aware timestamp helpers shared by models and stores."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_from_now(days: int, now: datetime) -> datetime:
    """Return the start of the UTC day that is ``days`` days after ``now``."""
    target = ensure_utc(now).date() + timedelta(days=days)
    return datetime.combine(target, time.min, tzinfo=timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def from_iso(value: Optional[object]) -> Optional[datetime]:
    """Parse an ISO 8601 string (PyYAML may already hand back a datetime)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))
