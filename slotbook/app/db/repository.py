from contextlib import nullcontext
from datetime import date
from threading import RLock

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from slotbook.app.db.models import ReservationRow, from_row, to_row
from slotbook.app.scheduling.conflicts import Candidate, find_conflict
from slotbook.app.scheduling.errors import ConflictError
from slotbook.app.scheduling.models import Reservation

# exclusion constraint created by the migration on PostgreSQL
OVERLAP_CONSTRAINT = "ex_reservation_active_overlap"


class SqlReservationRepository:
    """Reservation persistence on a SQLAlchemy database, one session per call."""

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions
        bind = sessions.kw.get("bind")
        # sqlite allows one writer at a time; take turns instead of failing mid-commit
        self._lock = RLock() if bind is not None and bind.dialect.name == "sqlite" else nullcontext()

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock, self._sessions() as session:
            row = session.get(ReservationRow, reservation_id)
            return from_row(row) if row is not None else None

    def for_day(self, resource_id: str, day: date) -> list[Reservation]:
        query = (
            select(ReservationRow)
            .where(ReservationRow.resource_id == resource_id, ReservationRow.day == day)
            .order_by(ReservationRow.start_minute)
        )
        with self._lock, self._sessions() as session:
            return [from_row(row) for row in session.scalars(query)]

    def on_date(self, day: date) -> list[Reservation]:
        query = select(ReservationRow).where(ReservationRow.day == day).order_by(ReservationRow.start_minute)
        with self._lock, self._sessions() as session:
            return [from_row(row) for row in session.scalars(query)]

    def add(self, reservation: Reservation) -> None:
        with self._lock:
            try:
                with self._sessions.begin() as session:
                    session.add(to_row(reservation))
            except IntegrityError as exc:
                self._raise_conflict(reservation, exc)

    def replace(self, reservation: Reservation) -> None:
        with self._lock:
            try:
                with self._sessions.begin() as session:
                    session.merge(to_row(reservation))
            except IntegrityError as exc:
                self._raise_conflict(reservation, exc)

    def remove(self, reservation_id: str) -> None:
        with self._lock, self._sessions.begin() as session:
            session.execute(delete(ReservationRow).where(ReservationRow.id == reservation_id))

    def _raise_conflict(self, reservation: Reservation, exc: IntegrityError) -> None:
        # another process committed an overlapping booking after our scan
        if OVERLAP_CONSTRAINT not in str(getattr(exc, "orig", exc)):
            raise exc
        blocking = find_conflict(
            Candidate(reservation.resource_id, reservation.date, reservation.interval),
            self.for_day(reservation.resource_id, reservation.date),
            exclude_id=reservation.id,
        )
        if blocking is None:
            raise exc
        raise ConflictError(blocking) from exc
