from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from slotbook.app.scheduling.intervals import TimeInterval
from slotbook.app.scheduling.lifecycle import ACTIVE_STATUSES, ReservationStatus

DETAIL_FIELDS = (
    "title",
    "description",
    "notes",
    "location",
    "meeting_type",
    "meeting_link",
    "priority",
)


@dataclass(frozen=True)
class Reservation:
    """A booked interval on one resource and day.

    Instances are immutable; every write replaces the stored record with a
    new one so readers never see a half-applied change.
    """

    id: str
    resource_id: str
    requester: str
    date: date
    interval: TimeInterval
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime
    title: str | None = None
    description: str | None = None
    notes: str | None = None
    location: str | None = None
    meeting_type: str = "in-person"
    meeting_link: str | None = None
    priority: str = "medium"
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None

    @property
    def duration_minutes(self) -> int:
        return self.interval.duration

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def sort_key(self) -> tuple[date, int, int]:
        return (self.date, self.interval.start, self.interval.end)


@dataclass(frozen=True)
class ReservationRequest:
    """A booking request with times already parsed to minutes of day.

    ``end`` may be omitted when the policy books fixed slots.
    """

    resource_id: str
    requester: str
    date: date
    start: int
    end: int | None = None
    title: str | None = None
    description: str | None = None
    notes: str | None = None
    location: str | None = None
    meeting_type: str = "in-person"
    meeting_link: str | None = None
    priority: str = "medium"

    def details(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in DETAIL_FIELDS}


@dataclass(frozen=True)
class ReservationPatch:
    """Partial update; ``None`` leaves a field untouched."""

    date: date | None = None
    start: int | None = None
    end: int | None = None
    status: ReservationStatus | None = None
    cancel_reason: str | None = None
    title: str | None = None
    description: str | None = None
    notes: str | None = None
    location: str | None = None
    meeting_type: str | None = None
    meeting_link: str | None = None
    priority: str | None = None

    @property
    def touches_schedule(self) -> bool:
        return self.date is not None or self.start is not None or self.end is not None

    def details(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in DETAIL_FIELDS if getattr(self, name) is not None}
