from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from slotbook.app.scheduling.conflicts import Candidate, find_conflict
from slotbook.app.scheduling.errors import ValidationError
from slotbook.app.scheduling.intervals import TimeInterval, format_clock
from slotbook.app.scheduling.models import Reservation


@dataclass(frozen=True)
class WorkingWindow:
    """Weekdays (Monday is 0) and the daily ``[start, end)`` span a resource can be booked."""

    days_of_week: frozenset[int]
    start: int
    end: int

    def __post_init__(self) -> None:
        # reuse interval bounds checking for the daily span
        TimeInterval(self.start, self.end)
        if not self.days_of_week <= frozenset(range(7)):
            raise ValidationError("Working days must be weekday numbers 0-6", field="days_of_week")

    @property
    def span(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

    def works_on(self, day: date) -> bool:
        return day.weekday() in self.days_of_week

    def contains(self, interval: TimeInterval) -> bool:
        return self.start <= interval.start and interval.end <= self.end

    def __str__(self) -> str:
        return f"{format_clock(self.start)}-{format_clock(self.end)}"


@dataclass(frozen=True)
class SlotEntry:
    interval: TimeInterval
    available: bool
    reservation: Reservation | None = None


def generate_slots(window: WorkingWindow, granularity_minutes: int) -> list[TimeInterval]:
    """Cut ``window`` into back-to-back slots of ``granularity_minutes``.

    A trailing remainder shorter than one slot is dropped.
    """
    if granularity_minutes <= 0:
        raise ValidationError("Slot granularity must be positive", field="granularity")
    slots = []
    cursor = window.start
    while cursor + granularity_minutes <= window.end:
        slots.append(TimeInterval(cursor, cursor + granularity_minutes))
        cursor += granularity_minutes
    return slots


def availability(
    resource_id: str,
    day: date,
    window: WorkingWindow,
    granularity_minutes: int,
    reservations: Iterable[Reservation],
) -> list[SlotEntry]:
    """Mark every catalog slot of ``day`` as free or occupied.

    A reservation longer than one slot occupies each slot it overlaps. A day
    outside the window's weekdays has no slots at all.
    """
    if not window.works_on(day):
        return []
    booked = [r for r in reservations if r.resource_id == resource_id and r.date == day]
    entries = []
    for slot in generate_slots(window, granularity_minutes):
        blocking = find_conflict(Candidate(resource_id, day, slot), booked)
        entries.append(SlotEntry(interval=slot, available=blocking is None, reservation=blocking))
    return entries
