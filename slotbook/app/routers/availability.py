import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from slotbook.app.routers.errors import http_error
from slotbook.app.routers.schemas import AvailabilityOut, SlotOut
from slotbook.app.scheduling.errors import SchedulingError
from slotbook.app.scheduling.store import ReservationStore
from slotbook.app.services.scheduler import get_store

router = APIRouter()


async def _availability(store: ReservationStore, resource_id: str, date: dt.date) -> AvailabilityOut:
    try:
        entries = await run_in_threadpool(store.availability, resource_id, date)
    except SchedulingError as exc:
        raise http_error(exc) from exc

    slots = [SlotOut.from_entry(entry) for entry in entries]
    available = sum(1 for slot in slots if slot.available)
    return AvailabilityOut(
        resource_id=resource_id,
        date=date,
        slots=slots,
        total_slots=len(slots),
        available_slots=available,
        booked_slots=len(slots) - available,
    )


@router.get("/resources/{resource_id}/availability", response_model=AvailabilityOut)
async def resource_availability(
    resource_id: str,
    date: dt.date = Query(...),
    store: ReservationStore = Depends(get_store),
) -> AvailabilityOut:
    return await _availability(store, resource_id, date)


@router.get("/availability", response_model=AvailabilityOut)
async def default_availability(
    date: dt.date = Query(...),
    store: ReservationStore = Depends(get_store),
) -> AvailabilityOut:
    """Slot catalog of the implicit resource (simple booking page)."""
    if store.default_resource_id is None:
        raise HTTPException(status_code=400, detail="No default resource configured")
    return await _availability(store, store.default_resource_id, date)
