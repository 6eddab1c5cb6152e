from datetime import date

from helpers import BOOKING_DAY, booked
from slotbook.app.scheduling.conflicts import Candidate, find_conflict
from slotbook.app.scheduling.intervals import TimeInterval
from slotbook.app.scheduling.lifecycle import ReservationStatus


def candidate(start, end, *, resource_id="P1", day=BOOKING_DAY):
    return Candidate(resource_id, day, TimeInterval.from_clock(start, end))


def test_overlapping_reservation_is_reported():
    morning = booked("r1", "09:00", "09:30")

    assert find_conflict(candidate("09:15", "09:45"), [morning]) is morning


def test_adjacent_reservation_is_not_a_conflict():
    reservations = [booked("r1", "09:00", "09:30"), booked("r2", "10:00", "10:30")]

    assert find_conflict(candidate("09:30", "10:00"), reservations) is None


def test_earliest_blocking_reservation_wins():
    reservations = [booked("late", "11:00", "12:00"), booked("early", "09:00", "10:00")]

    assert find_conflict(candidate("08:00", "13:00"), reservations).id == "early"


def test_other_resources_and_days_are_ignored():
    reservations = [
        booked("r1", "09:00", "10:00", resource_id="P2"),
        booked("r2", "09:00", "10:00", day=date(2024, 1, 2)),
    ]

    assert find_conflict(candidate("09:00", "10:00"), reservations) is None


def test_only_active_reservations_block():
    for status in (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED, ReservationStatus.NO_SHOW):
        assert find_conflict(candidate("09:00", "09:30"), [booked("r1", "09:00", "09:30", status=status)]) is None

    pending = booked("r1", "09:00", "09:30", status=ReservationStatus.PENDING)
    assert find_conflict(candidate("09:00", "09:30"), [pending]) is pending


def test_rescheduled_reservation_does_not_conflict_with_itself():
    own = booked("r1", "09:00", "10:00")
    other = booked("r2", "10:30", "11:00")

    assert find_conflict(candidate("09:30", "10:30"), [own, other], exclude_id="r1") is None
    assert find_conflict(candidate("09:30", "10:45"), [own, other], exclude_id="r1") is other
    assert find_conflict(candidate("09:30", "10:30"), [own, other]) is own
