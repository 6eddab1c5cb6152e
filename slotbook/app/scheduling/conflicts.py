from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from slotbook.app.scheduling.intervals import TimeInterval, overlaps
from slotbook.app.scheduling.models import Reservation


@dataclass(frozen=True)
class Candidate:
    resource_id: str
    date: date
    interval: TimeInterval


def is_active(reservation: Reservation) -> bool:
    return reservation.is_active


def find_conflict(
    candidate: Candidate,
    reservations: Iterable[Reservation],
    exclude_id: str | None = None,
) -> Reservation | None:
    """Return the earliest active reservation overlapping ``candidate``, if any.

    Only reservations on the candidate's resource and day are considered.
    ``exclude_id`` skips the reservation being rescheduled so it cannot
    conflict with itself. Cancelled, completed and no-show records never
    block.
    """
    same_day = sorted(
        (
            r
            for r in reservations
            if r.resource_id == candidate.resource_id
            and r.date == candidate.date
            and r.id != exclude_id
            and is_active(r)
        ),
        key=lambda r: r.sort_key,
    )
    for reservation in same_day:
        if reservation.interval.start >= candidate.interval.end:
            break
        if overlaps(reservation.interval, candidate.interval):
            return reservation
    return None
