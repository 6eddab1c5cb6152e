import itertools

import pytest

from slotbook.app.scheduling.errors import InvalidInterval, ValidationError
from slotbook.app.scheduling.intervals import (
    TimeInterval,
    duration_minutes,
    format_clock,
    overlaps,
    parse_clock,
    validate_duration,
)

SAMPLES = [
    TimeInterval(540, 570),
    TimeInterval(570, 600),
    TimeInterval(555, 585),
    TimeInterval(420, 1140),
    TimeInterval(0, 1),
    TimeInterval(1438, 1439),
    TimeInterval(600, 660),
]


def test_overlap_is_symmetric():
    for a, b in itertools.product(SAMPLES, repeat=2):
        assert overlaps(a, b) == overlaps(b, a)


def test_interval_overlaps_itself():
    for interval in SAMPLES:
        assert overlaps(interval, interval)


def test_back_to_back_intervals_do_not_overlap():
    nine = TimeInterval.from_clock("09:00", "09:30")
    half_past = TimeInterval.from_clock("09:30", "10:00")

    assert not overlaps(nine, half_past)
    assert not overlaps(half_past, nine)


def test_partial_and_containing_overlap():
    booked = TimeInterval.from_clock("09:00", "09:30")

    assert overlaps(booked, TimeInterval.from_clock("09:15", "09:45"))
    assert overlaps(booked, TimeInterval.from_clock("08:00", "12:00"))
    assert not overlaps(booked, TimeInterval.from_clock("10:00", "10:30"))


@pytest.mark.parametrize(
    "start,end",
    [
        (600, 570),
        (600, 600),
        (-1, 30),
        (1380, 1440),
        (1440, 1441),
    ],
)
def test_invalid_bounds_are_rejected(start, end):
    with pytest.raises(InvalidInterval):
        TimeInterval(start, end)


def test_invalid_interval_is_a_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        TimeInterval.from_clock("10:00", "09:30")
    assert excinfo.value.field == "end_time"


def test_parse_and_format_clock():
    assert parse_clock("07:00") == 420
    assert parse_clock("7:05") == 425
    assert parse_clock("23:59") == 1439
    assert format_clock(425) == "07:05"
    assert str(TimeInterval(540, 570)) == "09:00-09:30"


@pytest.mark.parametrize("value", ["24:00", "9:60", "0930", "", "nine"])
def test_parse_clock_rejects_malformed_times(value):
    with pytest.raises(InvalidInterval):
        parse_clock(value)


def test_duration_bounds():
    assert duration_minutes(TimeInterval(540, 600)) == 60

    validate_duration(TimeInterval(540, 555), 15, 480)
    validate_duration(TimeInterval(420, 900), 15, 480)
    with pytest.raises(ValidationError, match="Minimum duration is 15"):
        validate_duration(TimeInterval(540, 550), 15, 480)
    with pytest.raises(ValidationError, match="Maximum duration is 480"):
        validate_duration(TimeInterval(420, 901), 15, 480)
