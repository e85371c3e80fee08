from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import redis.asyncio as redis
import logging

from .. import __version__
from ..config import get_settings
from ..db.connection import get_db, get_redis
from ..middleware.error_handler import error_detail

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health():
    """Basic liveness check."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: redis.Redis = Depends(get_redis),
):
    """
    Readiness check.

    503 when the database is down. Redis only backs rate limiting and the stats
    cache, so losing it reports "degraded". A missing provider key is reported but
    does not fail readiness: analyses then fail with a configuration error.
    """
    checks = {}
    db_ok = False
    redis_ok = False

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
        db_ok = True
    except Exception:
        logger.warning("Readiness DB check failed", exc_info=True)
        checks["database"] = "error"

    try:
        await cache.ping()
        checks["redis"] = "ok"
        redis_ok = True
    except Exception:
        logger.warning("Readiness Redis check failed", exc_info=True)
        checks["redis"] = "error"

    provider_key = get_settings().reality_defender_api_key.get_secret_value()
    checks["detection_provider"] = "configured" if provider_key else "missing"

    if not db_ok:
        raise HTTPException(
            status_code=503,
            detail=error_detail(
                "DEPENDENCY_UNAVAILABLE",
                "One or more dependencies are unavailable",
                request,
                details=checks,
            ),
        )

    status = "ready" if redis_ok else "degraded"
    return {"status": status, "checks": checks}
