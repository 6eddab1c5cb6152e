import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import uuid4

from slotbook.app.core import redis_client as redis_module
from slotbook.app.core.config import settings

logger = logging.getLogger(__name__)

HOLD_POLL_SECONDS = 0.05
HOLD_MAX_ATTEMPTS = 40


class SlotHeldError(Exception):
    """Another process kept the booking hold for this resource and day."""


def _hold_key(resource_id: str, day: date) -> str:
    return f"hold:{resource_id}:{day.strftime('%Y%m%d')}"


@asynccontextmanager
async def booking_hold(resource_id: str, day: date) -> AsyncIterator[None]:
    """Serialize bookings for one resource and day across API processes.

    Without Redis the in-process store lock is the only guard.
    """
    client = redis_module.redis_client
    if client is None:
        yield
        return

    key = _hold_key(resource_id, day)
    token = str(uuid4())
    for _ in range(HOLD_MAX_ATTEMPTS):
        if await client.set(key, token, nx=True, px=settings.HOLD_TTL_MS):
            break
        await asyncio.sleep(HOLD_POLL_SECONDS)
    else:
        logger.warning("Booking hold %s still taken after %d attempts", key, HOLD_MAX_ATTEMPTS)
        raise SlotHeldError(key)

    try:
        yield
    finally:
        if await client.get(key) == token:
            await client.delete(key)
