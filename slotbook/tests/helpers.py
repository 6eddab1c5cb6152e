from datetime import date, datetime, timedelta

from slotbook.app.scheduling.catalog import WorkingWindow
from slotbook.app.scheduling.intervals import TimeInterval, parse_clock
from slotbook.app.scheduling.lifecycle import ReservationStatus
from slotbook.app.scheduling.models import Reservation, ReservationRequest

# 2024-01-01 is a Monday
BOOKING_DAY = date(2024, 1, 1)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


def all_week(start: str = "07:00", end: str = "19:00") -> WorkingWindow:
    return WorkingWindow(days_of_week=frozenset(range(7)), start=parse_clock(start), end=parse_clock(end))


def request(
    start: str,
    end: str | None = None,
    *,
    resource_id: str = "P1",
    day: date = BOOKING_DAY,
    requester: str = "Test Guest",
) -> ReservationRequest:
    return ReservationRequest(
        resource_id=resource_id,
        requester=requester,
        date=day,
        start=parse_clock(start),
        end=parse_clock(end) if end else None,
    )


def booked(
    reservation_id: str,
    start: str,
    end: str,
    *,
    resource_id: str = "P1",
    day: date = BOOKING_DAY,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
) -> Reservation:
    """A stored reservation built directly, bypassing the store."""
    created = datetime(2023, 12, 30, 12, 0)
    return Reservation(
        id=reservation_id,
        resource_id=resource_id,
        requester="guest",
        date=day,
        interval=TimeInterval.from_clock(start, end),
        status=status,
        created_at=created,
        updated_at=created,
    )
