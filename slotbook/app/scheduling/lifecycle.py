from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum

from slotbook.app.scheduling.errors import (
    CancellationWindowError,
    InvalidInterval,
    InvalidStateTransition,
    ValidationError,
)
from slotbook.app.scheduling.intervals import TimeInterval


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset(
    {ReservationStatus.CANCELLED, ReservationStatus.COMPLETED, ReservationStatus.NO_SHOW}
)

_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
    ),
}


def derive_duration(start_minutes: int, end_minutes: int) -> int:
    """Duration of a start/end pair; recomputed every time either bound changes."""
    duration = end_minutes - start_minutes
    if duration <= 0:
        raise InvalidInterval("End time must be after start time", field="end_time")
    return duration


def check_mutable(status: ReservationStatus, action: str = "updated") -> None:
    if status in TERMINAL_STATUSES:
        raise InvalidStateTransition(status.value, action)


def check_transition(current: ReservationStatus, requested: ReservationStatus) -> None:
    """Raise ``InvalidStateTransition`` unless ``current -> requested`` is an edge of the lifecycle."""
    if requested not in _TRANSITIONS.get(current, frozenset()):
        raise InvalidStateTransition(current.value, requested.value)


def starts_at(day: date, interval: TimeInterval, now: datetime) -> datetime:
    # wall-clock start, in whatever zone the clock reports (naive stays naive)
    hours, minutes = divmod(interval.start, 60)
    return datetime.combine(day, time(hours, minutes), tzinfo=now.tzinfo)


def check_in_future(day: date, interval: TimeInterval, now: datetime) -> None:
    if starts_at(day, interval, now) <= now:
        raise ValidationError("Reservation must start in the future", field="date")


def check_cancellation_window(
    day: date, interval: TimeInterval, now: datetime, lead_minutes: int
) -> None:
    if lead_minutes <= 0:
        return
    if starts_at(day, interval, now) - now < timedelta(minutes=lead_minutes):
        raise CancellationWindowError(lead_minutes)
