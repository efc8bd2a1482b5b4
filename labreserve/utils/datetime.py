# labreserve/utils/datetime.py
from __future__ import annotations

from datetime import UTC, date, datetime


def as_utc_naive(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is not None:
        # DB columns are naive UTC
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def as_utc_aware(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utcnow() -> datetime:
    """Current instant in the storage frame (naive UTC)."""
    return datetime.now(UTC).replace(tzinfo=None)


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)
