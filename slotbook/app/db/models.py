from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

from slotbook.app.scheduling.intervals import TimeInterval
from slotbook.app.scheduling.lifecycle import ReservationStatus
from slotbook.app.scheduling.models import Reservation

Base = declarative_base()


class ReservationRow(Base):
    __tablename__ = "reservation"

    id = Column(String(64), primary_key=True)
    resource_id = Column(String(64), nullable=False)
    requester = Column(String(200), nullable=False)

    day = Column(Date, nullable=False)
    start_minute = Column(Integer, nullable=False)
    end_minute = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False)  # pending/confirmed/cancelled/completed/no-show

    title = Column(String(100), nullable=True)
    description = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    meeting_type = Column(String(16), nullable=False, default="in-person")
    meeting_link = Column(String(500), nullable=True)
    priority = Column(String(8), nullable=False, default="medium")

    cancelled_by = Column(String(64), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("end_minute > start_minute", name="ck_reservation_interval"),
        CheckConstraint("start_minute >= 0 AND end_minute < 1440", name="ck_reservation_day_bounds"),
        Index("ix_reservation_resource_day_start", "resource_id", "day", "start_minute"),
        Index("ix_reservation_status_day", "status", "day"),
    )


def to_row(reservation: Reservation) -> ReservationRow:
    return ReservationRow(
        id=reservation.id,
        resource_id=reservation.resource_id,
        requester=reservation.requester,
        day=reservation.date,
        start_minute=reservation.interval.start,
        end_minute=reservation.interval.end,
        status=reservation.status.value,
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


def from_row(row: ReservationRow) -> Reservation:
    return Reservation(
        id=row.id,
        resource_id=row.resource_id,
        requester=row.requester,
        date=row.day,
        interval=TimeInterval(row.start_minute, row.end_minute),
        status=ReservationStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        title=row.title,
        description=row.description,
        notes=row.notes,
        location=row.location,
        meeting_type=row.meeting_type,
        meeting_link=row.meeting_link,
        priority=row.priority,
        cancelled_by=row.cancelled_by,
        cancelled_at=row.cancelled_at,
        cancel_reason=row.cancel_reason,
    )
