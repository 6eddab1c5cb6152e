import datetime as dt
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool

from slotbook.app.routers.errors import http_error
from slotbook.app.routers.schemas import (
    CancelIn,
    ReservationIn,
    ReservationListOut,
    ReservationOut,
    ReservationUpdateIn,
    StatusIn,
)
from slotbook.app.scheduling.errors import SchedulingError
from slotbook.app.scheduling.intervals import parse_clock
from slotbook.app.scheduling.lifecycle import ReservationStatus
from slotbook.app.scheduling.models import ReservationPatch, ReservationRequest
from slotbook.app.scheduling.store import ReservationStore
from slotbook.app.services.holds import SlotHeldError, booking_hold
from slotbook.app.services.scheduler import get_store

logger = logging.getLogger(__name__)

router = APIRouter()

ADMIN_ROLE = "admin"


def _held() -> HTTPException:
    return HTTPException(status.HTTP_409_CONFLICT, detail="Slot temporarily held by another request")


@router.post("/reservations", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationIn,
    store: ReservationStore = Depends(get_store),
) -> ReservationOut:
    resource_id = payload.resource_id or store.default_resource_id
    request = ReservationRequest(
        resource_id=resource_id,
        requester=payload.requester,
        date=payload.date,
        start=parse_clock(payload.start_time),
        end=parse_clock(payload.end_time) if payload.end_time else None,
        title=payload.title,
        description=payload.description,
        notes=payload.notes,
        location=payload.location,
        meeting_type=payload.meeting_type,
        meeting_link=payload.meeting_link,
        priority=payload.priority,
    )
    try:
        async with booking_hold(resource_id, payload.date):
            reservation = await run_in_threadpool(store.create, request)
    except SlotHeldError as exc:
        raise _held() from exc
    except SchedulingError as exc:
        raise http_error(exc) from exc

    logger.info(
        "Reservation %s booked on %s for %s %s",
        reservation.id,
        reservation.resource_id,
        reservation.date,
        reservation.interval,
    )
    return ReservationOut.from_reservation(reservation)


@router.get("/reservations", response_model=ReservationListOut)
async def list_reservations(
    date: dt.date = Query(...),
    resource_id: str | None = Query(default=None),
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    store: ReservationStore = Depends(get_store),
) -> ReservationListOut:
    reservations = await run_in_threadpool(store.list_by_date, date, resource_id, status_filter)
    return ReservationListOut(
        date=date,
        reservations=[ReservationOut.from_reservation(r) for r in reservations],
        total=len(reservations),
    )


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
async def get_reservation(
    reservation_id: str,
    store: ReservationStore = Depends(get_store),
) -> ReservationOut:
    try:
        reservation = await run_in_threadpool(store.get, reservation_id)
    except SchedulingError as exc:
        raise http_error(exc) from exc
    return ReservationOut.from_reservation(reservation)


@router.patch("/reservations/{reservation_id}", response_model=ReservationOut)
async def update_reservation(
    reservation_id: str,
    payload: ReservationUpdateIn,
    store: ReservationStore = Depends(get_store),
    x_actor_id: str | None = Header(default=None),
) -> ReservationOut:
    patch = ReservationPatch(
        date=payload.date,
        start=parse_clock(payload.start_time) if payload.start_time else None,
        end=parse_clock(payload.end_time) if payload.end_time else None,
        status=payload.status,
        cancel_reason=payload.cancel_reason,
        title=payload.title,
        description=payload.description,
        notes=payload.notes,
        location=payload.location,
        meeting_type=payload.meeting_type,
        meeting_link=payload.meeting_link,
        priority=payload.priority,
    )
    try:
        if patch.touches_schedule:
            current = await run_in_threadpool(store.get, reservation_id)
            async with booking_hold(current.resource_id, patch.date or current.date):
                reservation = await run_in_threadpool(store.update, reservation_id, patch, x_actor_id)
        else:
            reservation = await run_in_threadpool(store.update, reservation_id, patch, x_actor_id)
    except SlotHeldError as exc:
        raise _held() from exc
    except SchedulingError as exc:
        raise http_error(exc) from exc

    logger.info("Reservation %s updated by %s", reservation.id, x_actor_id or "anonymous")
    return ReservationOut.from_reservation(reservation)


@router.post("/reservations/{reservation_id}/status", response_model=ReservationOut)
async def change_status(
    reservation_id: str,
    payload: StatusIn,
    store: ReservationStore = Depends(get_store),
    x_actor_id: str | None = Header(default=None),
) -> ReservationOut:
    try:
        reservation = await run_in_threadpool(store.transition, reservation_id, payload.status, x_actor_id)
    except SchedulingError as exc:
        raise http_error(exc) from exc

    logger.info("Reservation %s is now %s", reservation.id, reservation.status.value)
    return ReservationOut.from_reservation(reservation)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
async def cancel_reservation(
    reservation_id: str,
    payload: CancelIn | None = None,
    store: ReservationStore = Depends(get_store),
    x_actor_id: str | None = Header(default=None),
) -> ReservationOut:
    reason = payload.reason if payload is not None else None
    try:
        reservation = await run_in_threadpool(store.cancel, reservation_id, x_actor_id, reason)
    except SchedulingError as exc:
        raise http_error(exc) from exc

    logger.info("Reservation %s cancelled by %s", reservation.id, x_actor_id or "anonymous")
    return ReservationOut.from_reservation(reservation)


@router.delete("/reservations/{reservation_id}", response_model=ReservationOut)
async def delete_reservation(
    reservation_id: str,
    store: ReservationStore = Depends(get_store),
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> ReservationOut:
    if x_actor_role != ADMIN_ROLE:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Access denied. Admin role required.")
    try:
        reservation = await run_in_threadpool(store.delete, reservation_id)
    except SchedulingError as exc:
        raise http_error(exc) from exc

    logger.info("Reservation %s deleted by admin %s", reservation.id, x_actor_id or "anonymous")
    return ReservationOut.from_reservation(reservation)
