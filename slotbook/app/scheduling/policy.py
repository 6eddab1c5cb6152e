from __future__ import annotations

from dataclasses import dataclass

from slotbook.app.scheduling.lifecycle import ReservationStatus


@dataclass(frozen=True)
class SchedulingPolicy:
    """Knobs that distinguish the simple (fixed slot) and rich (free duration) modes."""

    mode: str
    granularity: int
    min_duration: int
    max_duration: int
    cancellation_lead: int
    initial_status: ReservationStatus
    fixed_slots: bool

    @classmethod
    def simple(cls, granularity: int = 30, cancellation_lead: int = 30) -> SchedulingPolicy:
        return cls(
            mode="simple",
            granularity=granularity,
            min_duration=granularity,
            max_duration=granularity,
            cancellation_lead=cancellation_lead,
            initial_status=ReservationStatus.CONFIRMED,
            fixed_slots=True,
        )

    @classmethod
    def rich(
        cls,
        granularity: int = 30,
        min_duration: int = 15,
        max_duration: int = 480,
        cancellation_lead: int = 0,
    ) -> SchedulingPolicy:
        return cls(
            mode="rich",
            granularity=granularity,
            min_duration=min_duration,
            max_duration=max_duration,
            cancellation_lead=cancellation_lead,
            initial_status=ReservationStatus.PENDING,
            fixed_slots=False,
        )
