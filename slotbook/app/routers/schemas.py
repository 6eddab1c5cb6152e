import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from slotbook.app.scheduling.catalog import SlotEntry
from slotbook.app.scheduling.intervals import format_clock
from slotbook.app.scheduling.lifecycle import ReservationStatus
from slotbook.app.scheduling.models import Reservation

CLOCK_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

MeetingType = Literal["in-person", "video-call", "phone-call"]
Priority = Literal["low", "medium", "high", "urgent"]


class ReservationIn(BaseModel):
    # omitted in simple mode: the single default resource
    resource_id: str | None = Field(default=None, min_length=1, max_length=64)
    requester: str = Field(min_length=1, max_length=100)
    date: dt.date
    start_time: str = Field(pattern=CLOCK_PATTERN)
    # omitted in simple mode: one slot long
    end_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=200)
    meeting_type: MeetingType = "in-person"
    meeting_link: str | None = Field(default=None, max_length=500)
    priority: Priority = "medium"

    @model_validator(mode="after")
    def _video_call_needs_link(self) -> "ReservationIn":
        if self.meeting_type == "video-call" and not self.meeting_link:
            raise ValueError("meeting_link is required for video calls")
        return self


class ReservationUpdateIn(BaseModel):
    date: dt.date | None = None
    start_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    end_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    status: ReservationStatus | None = None
    cancel_reason: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=200)
    meeting_type: MeetingType | None = None
    meeting_link: str | None = Field(default=None, max_length=500)
    priority: Priority | None = None


class CancelIn(BaseModel):
    reason: str | None = Field(default=None, max_length=200)


class StatusIn(BaseModel):
    status: ReservationStatus


class ReservationOut(BaseModel):
    id: str
    resource_id: str
    requester: str
    date: dt.date
    start_time: str
    end_time: str
    duration_minutes: int
    status: ReservationStatus
    title: str | None = None
    description: str | None = None
    notes: str | None = None
    location: str | None = None
    meeting_type: str
    meeting_link: str | None = None
    priority: str
    cancelled_by: str | None = None
    cancelled_at: dt.datetime | None = None
    cancel_reason: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationOut":
        return cls(
            id=reservation.id,
            resource_id=reservation.resource_id,
            requester=reservation.requester,
            date=reservation.date,
            start_time=format_clock(reservation.interval.start),
            end_time=format_clock(reservation.interval.end),
            duration_minutes=reservation.duration_minutes,
            status=reservation.status,
            title=reservation.title,
            description=reservation.description,
            notes=reservation.notes,
            location=reservation.location,
            meeting_type=reservation.meeting_type,
            meeting_link=reservation.meeting_link,
            priority=reservation.priority,
            cancelled_by=reservation.cancelled_by,
            cancelled_at=reservation.cancelled_at,
            cancel_reason=reservation.cancel_reason,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class ReservationListOut(BaseModel):
    date: dt.date
    reservations: list[ReservationOut]
    total: int


class SlotOut(BaseModel):
    time: str
    end_time: str
    available: bool
    reservation: ReservationOut | None = None

    @classmethod
    def from_entry(cls, entry: SlotEntry) -> "SlotOut":
        return cls(
            time=format_clock(entry.interval.start),
            end_time=format_clock(entry.interval.end),
            available=entry.available,
            reservation=ReservationOut.from_reservation(entry.reservation) if entry.reservation else None,
        )


class AvailabilityOut(BaseModel):
    resource_id: str
    date: dt.date
    slots: list[SlotOut]
    total_slots: int
    available_slots: int
    booked_slots: int
