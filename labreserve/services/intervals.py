"""Time interval value type and the two interval predicates used by the app.

Two predicates exist on purpose and must not be merged without a product
decision:

- ``overlaps``: booking rule, half-open ``[start, end)``. Intervals that only
  touch (one ends exactly when the other starts) do not overlap.
- ``contains_inclusive``: display rule for slot grids and "in use" badges,
  closed ``[start, end]``. A slot starting exactly at a reservation's end is
  shown as occupied.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from labreserve.core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    @classmethod
    def validated(cls, start: datetime, end: datetime) -> TimeInterval:
        """Build an interval, rejecting empty or inverted ones."""
        if end <= start:
            raise ValidationError("End time must be after start time")
        return cls(start=start, end=end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: TimeInterval) -> bool:
        return overlaps(self, other)

    def contains_inclusive(self, instant: datetime) -> bool:
        return contains_inclusive(self, instant)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    return a.start < b.end and b.start < a.end


def contains_inclusive(interval: TimeInterval, instant: datetime) -> bool:
    return interval.start <= instant <= interval.end


__all__ = ["TimeInterval", "overlaps", "contains_inclusive"]
