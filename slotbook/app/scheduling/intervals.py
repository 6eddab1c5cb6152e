from __future__ import annotations

import re
from dataclasses import dataclass

from slotbook.app.scheduling.errors import InvalidInterval, ValidationError

MINUTES_PER_DAY = 1440

_CLOCK_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_clock(value: str) -> int:
    """Parse an ``HH:MM`` wall-clock string into minutes of day."""
    match = _CLOCK_RE.match(value.strip())
    if match is None:
        raise InvalidInterval(f"Invalid time {value!r}, expected HH:MM", field="time")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True, order=True)
class TimeInterval:
    """Half-open ``[start, end)`` span of minutes within one day (00:00 to 23:59)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise InvalidInterval(f"Start minute {self.start} is outside the day", field="start_time")
        if not 0 <= self.end < MINUTES_PER_DAY:
            raise InvalidInterval(f"End minute {self.end} is outside the day", field="end_time")
        if self.end <= self.start:
            raise InvalidInterval("End time must be after start time", field="end_time")

    @classmethod
    def from_clock(cls, start: str, end: str) -> TimeInterval:
        return cls(parse_clock(start), parse_clock(end))

    @property
    def duration(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{format_clock(self.start)}-{format_clock(self.end)}"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # back-to-back spans share only a boundary and do not overlap
    return a.start < b.end and b.start < a.end


def duration_minutes(interval: TimeInterval) -> int:
    return interval.end - interval.start


def validate_duration(interval: TimeInterval, minimum: int, maximum: int) -> None:
    """Raise ``ValidationError`` unless ``minimum <= duration <= maximum``."""
    duration = duration_minutes(interval)
    if duration < minimum:
        raise ValidationError(f"Minimum duration is {minimum} minutes", field="duration")
    if duration > maximum:
        raise ValidationError(f"Maximum duration is {maximum} minutes", field="duration")
