from datetime import date

import pytest

from slotbook.app.core.config import Settings
from slotbook.app.db.session import build_engine
from slotbook.app.db.repository import SqlReservationRepository
from slotbook.app.scheduling.lifecycle import ReservationStatus
from slotbook.app.scheduling.store import MemoryReservationRepository
from slotbook.app.services.scheduler import build_directory, build_store


def test_simple_mode_defaults():
    config = Settings(_env_file=None)
    policy = config.scheduling_policy()

    assert policy.mode == "simple"
    assert policy.granularity == 30
    assert policy.min_duration == policy.max_duration == 30
    assert policy.cancellation_lead == 30
    assert policy.initial_status is ReservationStatus.CONFIRMED

    window = config.default_window()
    assert (window.start, window.end) == (420, 1140)
    assert window.days_of_week == frozenset(range(7))


def test_rich_mode_from_environment(monkeypatch):
    monkeypatch.setenv("SCHEDULING_MODE", "rich")
    monkeypatch.setenv(
        "PROVIDERS",
        '{"dr-lee": {"start": "08:00", "end": "16:00", "days": [0, 2, 4]},'
        ' "dr-old": {"active": false}}',
    )
    config = Settings(_env_file=None)
    policy = config.scheduling_policy()

    assert policy.mode == "rich"
    assert (policy.min_duration, policy.max_duration) == (15, 480)
    assert policy.cancellation_lead == 0
    assert policy.initial_status is ReservationStatus.PENDING

    directory = build_directory(config)
    lee = directory.get("dr-lee")
    assert (lee.window.start, lee.window.end) == (480, 960)
    assert lee.window.works_on(date(2024, 1, 3))
    assert not lee.window.works_on(date(2024, 1, 2))
    assert not directory.get("dr-old").active
    assert directory.get("default") is not None


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        Settings(_env_file=None, SCHEDULING_MODE="hourly").scheduling_policy()


def test_build_store_picks_repository():
    config = Settings(_env_file=None)

    memory_store = build_store(config)
    sql_store = build_store(config, build_engine("sqlite://"))

    assert isinstance(memory_store._repository, MemoryReservationRepository)
    assert isinstance(sql_store._repository, SqlReservationRepository)
    assert memory_store.default_resource_id == "default"
