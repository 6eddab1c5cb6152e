from contextlib import asynccontextmanager

from fastapi import FastAPI

from slotbook.app.core.config import settings
from slotbook.app.core.logging import setup_logging
from slotbook.app.core.redis_client import close_redis, init_redis
from slotbook.app.scheduling.store import ReservationStore
from slotbook.app.services.scheduler import build_engine_from_settings, build_store
import slotbook.app.routers.availability as availability
import slotbook.app.routers.health as health
import slotbook.app.routers.reservations as reservations


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_redis()
    try:
        yield
    finally:
        await close_redis()
        if app.state.engine is not None:
            app.state.engine.dispose()


def create_app(store: ReservationStore | None = None) -> FastAPI:
    app = FastAPI(
        title="Slotbook Scheduling API",
        lifespan=lifespan,
    )
    if store is None:
        app.state.engine = build_engine_from_settings(settings)
        app.state.store = build_store(settings, app.state.engine)
    else:
        app.state.engine = None
        app.state.store = store

    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(availability.router, prefix=settings.API_PREFIX)
    app.include_router(reservations.router, prefix=settings.API_PREFIX)
    return app


app = create_app()
