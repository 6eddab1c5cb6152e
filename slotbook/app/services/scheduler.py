import logging

from fastapi import Request
from sqlalchemy.engine import Engine

from slotbook.app.core.config import Settings
from slotbook.app.db.repository import SqlReservationRepository
from slotbook.app.db.session import build_engine, build_sessionmaker, init_schema
from slotbook.app.scheduling.directory import Resource, StaticResourceDirectory
from slotbook.app.scheduling.store import (
    MemoryReservationRepository,
    ReservationRepository,
    ReservationStore,
    SequentialIds,
    uuid_ids,
)

logger = logging.getLogger(__name__)


def build_directory(config: Settings) -> StaticResourceDirectory:
    """Resources known to this deployment: the default one plus any configured providers."""
    resources = [Resource(id=config.DEFAULT_RESOURCE_ID, window=config.default_window())]
    for provider_id, (window, active) in config.provider_windows().items():
        resources.append(Resource(id=provider_id, window=window, active=active))
    return StaticResourceDirectory(resources)


def build_store(config: Settings, engine: Engine | None = None) -> ReservationStore:
    """Wire one ReservationStore for the process from settings."""
    policy = config.scheduling_policy()
    repository: ReservationRepository
    if engine is not None:
        if engine.dialect.name == "sqlite":
            init_schema(engine)
        repository = SqlReservationRepository(build_sessionmaker(engine))
        ids = uuid_ids
    else:
        repository = MemoryReservationRepository()
        ids = SequentialIds() if policy.fixed_slots else uuid_ids

    logger.info(
        "Reservation store ready: mode=%s granularity=%s storage=%s",
        policy.mode,
        policy.granularity,
        "sql" if engine is not None else "memory",
    )
    return ReservationStore(
        repository,
        build_directory(config),
        policy,
        ids=ids,
        default_resource_id=config.DEFAULT_RESOURCE_ID,
    )


def build_engine_from_settings(config: Settings) -> Engine | None:
    if not config.DATABASE_URL:
        return None
    return build_engine(config.DATABASE_URL)


def get_store(request: Request) -> ReservationStore:
    """FastAPI dependency returning the store wired onto the application."""
    return request.app.state.store
