from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
import redis.asyncio as redis

from ..auth.jwt_verifier import JWTIdentityResolver, get_identity_resolver
from ..config import get_settings
from ..db.connection import get_db, get_redis
from ..errors import ConfigurationError
from ..middleware.error_handler import error_detail
from ..schemas.errors import ErrorResponse
from ..schemas.stats import DashboardStats
from ..services.stats_service import StatsService

router = APIRouter()


def get_stats_service(
    db: AsyncSession = Depends(get_db),
    cache: redis.Redis = Depends(get_redis),
) -> StatsService:
    settings = get_settings()
    return StatsService(
        db,
        cache,
        ttl_seconds=settings.stats_cache_ttl_seconds,
        default_quota_limit=settings.default_quota_limit,
    )


@router.get(
    "/dashboard/stats",
    response_model=DashboardStats,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_dashboard_stats(
    request: Request,
    stats_service: StatsService = Depends(get_stats_service),
    identity_resolver: JWTIdentityResolver = Depends(get_identity_resolver),
):
    """
    Usage summary for the signed-in user.

    Cached per user for a short TTL.
    """
    try:
        caller = await identity_resolver.resolve(request.headers.get("Authorization"))
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=error_detail("CONFIG_ERROR", str(exc), request))

    if caller is None:
        raise HTTPException(
            status_code=401,
            detail=error_detail("AUTH_REQUIRED", "Valid bearer token required", request),
        )

    return await stats_service.get_dashboard_stats(caller.user_id)
