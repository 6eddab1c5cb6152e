import logging

from fastapi import HTTPException, status

from slotbook.app.scheduling.errors import (
    CancellationWindowError,
    ConflictError,
    InvalidStateTransition,
    NotFoundError,
    SchedulingError,
    ValidationError,
)
from slotbook.app.scheduling.intervals import format_clock

logger = logging.getLogger(__name__)


def http_error(exc: SchedulingError) -> HTTPException:
    """Translate a scheduling error into the HTTP response the caller sees."""
    logger.warning("Request rejected (%s): %s", exc.code, exc.message)

    if isinstance(exc, ConflictError):
        blocking = exc.blocking
        return HTTPException(
            status.HTTP_409_CONFLICT,
            detail={
                "message": "Time slot is already booked",
                "code": exc.code,
                "conflicting_reservation": {
                    "id": blocking.id,
                    "date": blocking.date.isoformat(),
                    "start_time": format_clock(blocking.interval.start),
                    "end_time": format_clock(blocking.interval.end),
                },
            },
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, InvalidStateTransition):
        return HTTPException(
            status.HTTP_409_CONFLICT,
            detail={"message": exc.message, "code": exc.code, "status": exc.current},
        )
    if isinstance(exc, CancellationWindowError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail={"message": exc.message, "code": exc.code})
    if isinstance(exc, ValidationError):
        return HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail={"message": exc.message, "code": exc.code, "field": exc.field},
        )
    return HTTPException(status.HTTP_400_BAD_REQUEST, detail={"message": exc.message, "code": exc.code})
