"""Error kinds raised by the scheduling core.

Every error leaves the reservation store unchanged. The HTTP layer maps
``code`` onto a status; nothing here is retried or logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slotbook.app.scheduling.models import Reservation


class SchedulingError(Exception):
    code = "scheduling_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """A candidate breaks a constraint: past start, bad duration, outside hours."""

    code = "validation_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidInterval(ValidationError):
    code = "invalid_interval"


class ConflictError(SchedulingError):
    """The candidate overlaps an active reservation on the same resource and day."""

    code = "conflict"

    def __init__(self, blocking: Reservation) -> None:
        super().__init__(
            f"Time slot conflicts with reservation {blocking.id} "
            f"({blocking.date.isoformat()} {blocking.interval})"
        )
        self.blocking = blocking


class NotFoundError(SchedulingError):
    code = "not_found"

    def __init__(self, identifier: str, kind: str = "Reservation") -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.identifier = identifier
        self.kind = kind


class InvalidStateTransition(SchedulingError):
    code = "invalid_state_transition"

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move reservation from {current} to {requested}")
        self.current = current
        self.requested = requested


class CancellationWindowError(SchedulingError):
    code = "cancellation_window"

    def __init__(self, lead_minutes: int) -> None:
        super().__init__(
            f"Cancellation must be done at least {lead_minutes} minutes before the reservation starts"
        )
        self.lead_minutes = lead_minutes
