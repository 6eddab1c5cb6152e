from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text
from starlette.concurrency import run_in_threadpool

from slotbook.app.core import redis_client as redis_module


router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, bool]:
    """Basic liveness probe."""
    return {"ok": True}


def _ping_database(engine) -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


@router.get("/readiness")
async def readiness(request: Request) -> dict[str, bool]:
    """Ensure the configured database and Redis are reachable."""
    engine = request.app.state.engine
    if engine is not None:
        try:
            await run_in_threadpool(_ping_database, engine)
        except Exception as exc:  # pragma: no cover - depends on a live database
            raise HTTPException(status_code=503, detail="Database unavailable") from exc

    if redis_module.redis_client is not None:
        try:
            await redis_module.redis_client.ping()
        except Exception as exc:  # pragma: no cover - depends on a live Redis
            raise HTTPException(status_code=503, detail="Redis unavailable") from exc

    return {"ready": True}
