from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from datetime import date, datetime
from threading import Lock
from typing import Any, Protocol
from uuid import uuid4

from slotbook.app.scheduling.catalog import SlotEntry, availability
from slotbook.app.scheduling.conflicts import Candidate, find_conflict
from slotbook.app.scheduling.directory import Resource, ResourceDirectory
from slotbook.app.scheduling.errors import ConflictError, NotFoundError, ValidationError
from slotbook.app.scheduling.intervals import TimeInterval, validate_duration
from slotbook.app.scheduling.lifecycle import (
    ReservationStatus,
    check_cancellation_window,
    check_in_future,
    check_mutable,
    check_transition,
    derive_duration,
)
from slotbook.app.scheduling.models import Reservation, ReservationPatch, ReservationRequest
from slotbook.app.scheduling.policy import SchedulingPolicy

Clock = Callable[[], datetime]
IdGenerator = Callable[[], str]
DayKey = tuple[str, date]

LOCK_STRIPES = 256


def uuid_ids() -> str:
    return uuid4().hex


class SequentialIds:
    """Counter-based ids ("1", "2", ...), as handed out by the simple booking page."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = Lock()

    def __call__(self) -> str:
        with self._lock:
            return str(next(self._counter))


class ReservationRepository(Protocol):
    def get(self, reservation_id: str) -> Reservation | None: ...

    def for_day(self, resource_id: str, day: date) -> list[Reservation]: ...

    def on_date(self, day: date) -> list[Reservation]: ...

    def add(self, reservation: Reservation) -> None: ...

    def replace(self, reservation: Reservation) -> None: ...

    def remove(self, reservation_id: str) -> None: ...


class MemoryReservationRepository:
    def __init__(self, reservations: Iterable[Reservation] = ()) -> None:
        self._items: dict[str, Reservation] = {r.id: r for r in reservations}
        self._lock = Lock()

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            return self._items.get(reservation_id)

    def for_day(self, resource_id: str, day: date) -> list[Reservation]:
        with self._lock:
            return [r for r in self._items.values() if r.resource_id == resource_id and r.date == day]

    def on_date(self, day: date) -> list[Reservation]:
        with self._lock:
            return [r for r in self._items.values() if r.date == day]

    def add(self, reservation: Reservation) -> None:
        with self._lock:
            self._items[reservation.id] = reservation

    def replace(self, reservation: Reservation) -> None:
        with self._lock:
            self._items[reservation.id] = reservation

    def remove(self, reservation_id: str) -> None:
        with self._lock:
            self._items.pop(reservation_id, None)


class ReservationStore:
    """Owns the reservations of one process and serializes every booking decision.

    Writes that can change the active set of a ``(resource, day)`` pair hold
    that pair's lock across the conflict scan and the write, so two
    overlapping requests can never both pass the scan.
    """

    def __init__(
        self,
        repository: ReservationRepository,
        directory: ResourceDirectory,
        policy: SchedulingPolicy,
        clock: Clock = datetime.now,
        ids: IdGenerator = uuid_ids,
        default_resource_id: str | None = None,
        lock_stripes: int = LOCK_STRIPES,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self.policy = policy
        self._clock = clock
        self._ids = ids
        # the implicit resource used when a caller names none
        self.default_resource_id = default_resource_id
        # a fixed pool of locks; every (resource, day) key maps onto one stripe
        self._stripes = [Lock() for _ in range(lock_stripes)]

    # -- locking -------------------------------------------------------------

    def _stripe(self, key: DayKey) -> int:
        return hash(key) % len(self._stripes)

    @contextmanager
    def _locked(self, keys: Iterable[DayKey]) -> Iterator[None]:
        # sorted acquisition keeps two cross-day moves from deadlocking;
        # keys sharing a stripe take it once
        with ExitStack() as stack:
            for index in sorted({self._stripe(key) for key in keys}):
                stack.enter_context(self._stripes[index])
            yield

    @contextmanager
    def _holding(self, reservation_id: str, target_day: date | None = None) -> Iterator[Reservation]:
        """Lock the reservation's current day (and ``target_day``) and yield its latest state."""
        while True:
            seen = self.get(reservation_id)
            keys = [(seen.resource_id, seen.date)]
            if target_day is not None:
                keys.append((seen.resource_id, target_day))
            with self._locked(keys):
                current = self.get(reservation_id)
                if current.date == seen.date:
                    yield current
                    return
            # moved to another day between the read and the lock; retry

    # -- validation ----------------------------------------------------------

    def _resource(self, resource_id: str) -> Resource:
        resource = self._directory.get(resource_id)
        if resource is None or not resource.active:
            raise ValidationError("Invalid or inactive resource", field="resource_id")
        return resource

    def _interval(self, start: int, end: int | None) -> TimeInterval:
        if end is None:
            if not self.policy.fixed_slots:
                raise ValidationError("End time is required", field="end_time")
            end = start + self.policy.granularity
        interval = TimeInterval(start, start + derive_duration(start, end))
        validate_duration(interval, self.policy.min_duration, self.policy.max_duration)
        return interval

    def _check_bookable(self, resource: Resource, day: date, interval: TimeInterval, now: datetime) -> None:
        check_in_future(day, interval, now)
        window = resource.window
        if not window.works_on(day):
            raise ValidationError("Resource does not work on this day", field="date")
        if not window.contains(interval):
            raise ValidationError(f"Time slot is outside working hours {window}", field="start_time")
        if self.policy.fixed_slots and (interval.start - window.start) % self.policy.granularity:
            raise ValidationError(
                f"Invalid time slot, slots start every {self.policy.granularity} minutes from {window}",
                field="start_time",
            )

    # -- reads -----------------------------------------------------------------

    def get(self, reservation_id: str) -> Reservation:
        reservation = self._repository.get(reservation_id)
        if reservation is None:
            raise NotFoundError(reservation_id)
        return reservation

    def list_by_date(
        self,
        day: date,
        resource_id: str | None = None,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        if resource_id is not None:
            found = self._repository.for_day(resource_id, day)
        else:
            found = self._repository.on_date(day)
        if status is not None:
            found = [r for r in found if r.status == status]
        return sorted(found, key=lambda r: r.sort_key)

    def availability(self, resource_id: str, day: date) -> list[SlotEntry]:
        resource = self._directory.get(resource_id)
        if resource is None:
            raise NotFoundError(resource_id, kind="Resource")
        if not resource.active:
            raise ValidationError("Invalid or inactive resource", field="resource_id")
        return availability(
            resource.id,
            day,
            resource.window,
            self.policy.granularity,
            self._repository.for_day(resource.id, day),
        )

    # -- writes ----------------------------------------------------------------

    def create(self, request: ReservationRequest) -> Reservation:
        now = self._clock()
        interval = self._interval(request.start, request.end)
        resource = self._resource(request.resource_id)
        self._check_bookable(resource, request.date, interval, now)

        candidate = Candidate(resource.id, request.date, interval)
        with self._locked([(resource.id, request.date)]):
            blocking = find_conflict(candidate, self._repository.for_day(resource.id, request.date))
            if blocking is not None:
                raise ConflictError(blocking)
            reservation = Reservation(
                id=self._ids(),
                resource_id=resource.id,
                requester=request.requester,
                date=request.date,
                interval=interval,
                status=self.policy.initial_status,
                created_at=now,
                updated_at=now,
                **request.details(),
            )
            self._repository.add(reservation)
        return reservation

    def update(self, reservation_id: str, patch: ReservationPatch, actor: str | None = None) -> Reservation:
        now = self._clock()
        with self._holding(reservation_id, patch.date) as current:
            check_mutable(current.status)
            changes: dict[str, Any] = patch.details()

            if patch.touches_schedule:
                day = patch.date or current.date
                start = current.interval.start if patch.start is None else patch.start
                end = patch.end
                if end is None and (patch.start is None or not self.policy.fixed_slots):
                    end = current.interval.end
                interval = self._interval(start, end)
                self._check_bookable(self._resource(current.resource_id), day, interval, now)
                blocking = find_conflict(
                    Candidate(current.resource_id, day, interval),
                    self._repository.for_day(current.resource_id, day),
                    exclude_id=current.id,
                )
                if blocking is not None:
                    raise ConflictError(blocking)
                changes.update(date=day, interval=interval)

            if patch.status is not None:
                changes.update(self._status_change(current, patch.status, actor, patch.cancel_reason, now))

            updated = replace(current, updated_at=now, **changes)
            self._repository.replace(updated)
        return updated

    def transition(
        self,
        reservation_id: str,
        status: ReservationStatus,
        actor: str | None = None,
        now: datetime | None = None,
    ) -> Reservation:
        """Apply one explicit lifecycle step (confirm, complete, no-show or cancel)."""
        now = now or self._clock()
        with self._holding(reservation_id) as current:
            updated = replace(current, updated_at=now, **self._status_change(current, status, actor, None, now))
            self._repository.replace(updated)
        return updated

    def cancel(
        self,
        reservation_id: str,
        actor: str | None,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Reservation:
        now = now or self._clock()
        with self._holding(reservation_id) as current:
            changes = self._status_change(current, ReservationStatus.CANCELLED, actor, reason, now)
            updated = replace(current, updated_at=now, **changes)
            self._repository.replace(updated)
        return updated

    def delete(self, reservation_id: str) -> Reservation:
        """Administrative hard removal; ignores lifecycle state and the cancellation window."""
        with self._holding(reservation_id) as current:
            self._repository.remove(current.id)
        return current

    def _status_change(
        self,
        current: Reservation,
        status: ReservationStatus,
        actor: str | None,
        reason: str | None,
        now: datetime,
    ) -> dict[str, Any]:
        check_transition(current.status, status)
        if status is not ReservationStatus.CANCELLED:
            return {"status": status}
        check_cancellation_window(current.date, current.interval, now, self.policy.cancellation_lead)
        return {
            "status": status,
            "cancelled_by": actor,
            "cancelled_at": now,
            "cancel_reason": reason,
        }
