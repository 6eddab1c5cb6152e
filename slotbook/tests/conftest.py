from datetime import datetime

import pytest

from helpers import FakeClock, all_week
from slotbook.app.scheduling.catalog import WorkingWindow
from slotbook.app.scheduling.directory import Resource, StaticResourceDirectory
from slotbook.app.scheduling.intervals import parse_clock
from slotbook.app.scheduling.policy import SchedulingPolicy
from slotbook.app.scheduling.store import MemoryReservationRepository, ReservationStore, SequentialIds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2023, 12, 31, 8, 0))


@pytest.fixture
def directory() -> StaticResourceDirectory:
    weekdays = WorkingWindow(days_of_week=frozenset(range(5)), start=parse_clock("09:00"), end=parse_clock("17:00"))
    return StaticResourceDirectory(
        [
            Resource(id="P1", window=all_week()),
            Resource(id="P2", window=all_week()),
            Resource(id="office", window=weekdays),
            Resource(id="retired", window=all_week(), active=False),
            Resource(id="default", window=all_week()),
        ]
    )


@pytest.fixture
def rich_store(clock: FakeClock, directory: StaticResourceDirectory) -> ReservationStore:
    return ReservationStore(
        MemoryReservationRepository(),
        directory,
        SchedulingPolicy.rich(),
        clock=clock,
        ids=SequentialIds(),
    )


@pytest.fixture
def simple_store(clock: FakeClock, directory: StaticResourceDirectory) -> ReservationStore:
    return ReservationStore(
        MemoryReservationRepository(),
        directory,
        SchedulingPolicy.simple(),
        clock=clock,
        ids=SequentialIds(),
        default_resource_id="default",
    )
