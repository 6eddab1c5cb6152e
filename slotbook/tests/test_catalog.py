from dataclasses import replace
from datetime import date

import pytest

from helpers import BOOKING_DAY, all_week, booked
from slotbook.app.scheduling.catalog import WorkingWindow, availability, generate_slots
from slotbook.app.scheduling.errors import InvalidInterval, ValidationError
from slotbook.app.scheduling.intervals import TimeInterval, overlaps, parse_clock
from slotbook.app.scheduling.lifecycle import ReservationStatus


def test_default_window_yields_24_half_hour_slots():
    slots = generate_slots(all_week(), 30)

    assert len(slots) == 24
    assert slots[0] == TimeInterval.from_clock("07:00", "07:30")
    assert slots[-1] == TimeInterval.from_clock("18:30", "19:00")


@pytest.mark.parametrize(
    "start,end,granularity",
    [("07:00", "19:00", 30), ("09:00", "17:00", 15), ("08:00", "20:00", 60), ("00:00", "23:15", 45)],
)
def test_slots_are_contiguous_and_cover_the_window(start, end, granularity):
    window = all_week(start, end)
    slots = generate_slots(window, granularity)

    assert slots[0].start == window.start
    assert slots[-1].end == window.end
    for previous, following in zip(slots, slots[1:]):
        assert previous.end == following.start
        assert not overlaps(previous, following)
    assert all(slot.duration == granularity for slot in slots)


def test_trailing_remainder_is_dropped():
    slots = generate_slots(all_week("09:00", "10:45"), 30)

    assert [str(slot) for slot in slots] == ["09:00-09:30", "09:30-10:00", "10:00-10:30"]


def test_generation_is_repeatable():
    window = all_week()
    assert generate_slots(window, 30) == generate_slots(window, 30)


def test_non_positive_granularity_is_rejected():
    with pytest.raises(ValidationError):
        generate_slots(all_week(), 0)


def test_window_validation():
    with pytest.raises(InvalidInterval):
        all_week("19:00", "07:00")
    with pytest.raises(ValidationError):
        WorkingWindow(days_of_week=frozenset({7}), start=parse_clock("07:00"), end=parse_clock("19:00"))


def test_spanning_reservation_marks_every_slot_it_touches():
    lunch = booked("r1", "12:00", "13:00")

    entries = availability("P1", BOOKING_DAY, all_week(), 30, [lunch])

    by_time = {str(entry.interval): entry for entry in entries}
    assert len(entries) == 24
    assert not by_time["12:00-12:30"].available
    assert not by_time["12:30-13:00"].available
    assert by_time["12:00-12:30"].reservation is lunch
    assert by_time["12:30-13:00"].reservation is lunch
    assert by_time["11:30-12:00"].available
    assert by_time["13:00-13:30"].available
    assert sum(1 for entry in entries if not entry.available) == 2


def test_partial_overlap_marks_both_slots():
    entries = availability("P1", BOOKING_DAY, all_week(), 30, [booked("r1", "09:15", "09:45")])

    taken = [str(entry.interval) for entry in entries if not entry.available]
    assert taken == ["09:00-09:30", "09:30-10:00"]


def test_inactive_and_foreign_reservations_leave_slots_free():
    reservations = [
        booked("r1", "09:00", "09:30", status=ReservationStatus.CANCELLED),
        booked("r2", "10:00", "10:30", status=ReservationStatus.COMPLETED),
        booked("r3", "11:00", "11:30", status=ReservationStatus.NO_SHOW),
        booked("r4", "12:00", "12:30", resource_id="P2"),
        booked("r5", "13:00", "13:30", day=date(2024, 1, 2)),
        booked("r6", "14:00", "14:30", status=ReservationStatus.PENDING),
    ]

    entries = availability("P1", BOOKING_DAY, all_week(), 30, reservations)

    taken = [entry.reservation.id for entry in entries if not entry.available]
    assert taken == ["r6"]


def test_availability_is_idempotent():
    reservations = [booked("r1", "12:00", "13:00"), booked("r2", "08:00", "08:30")]

    first = availability("P1", BOOKING_DAY, all_week(), 30, reservations)
    second = availability("P1", BOOKING_DAY, all_week(), 30, reservations)

    assert first == second


def test_closed_day_has_no_slots():
    weekdays = replace(all_week(), days_of_week=frozenset(range(5)))

    # 2024-01-06 is a Saturday
    assert availability("P1", date(2024, 1, 6), weekdays, 30, []) == []
    assert len(availability("P1", BOOKING_DAY, weekdays, 30, [])) == 24
