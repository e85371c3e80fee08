from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRoute
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.jwt_verifier import JWTIdentityResolver, get_identity_resolver
from ..config import Settings, get_settings
from ..db.connection import get_db
from ..detection.provider import DetectionProvider, RealityDefenderProvider
from ..errors import UnauthorizedError
from ..logging import RequestLogger
from ..middleware.rate_limit import RateLimiter, get_rate_limiter
from ..schemas.analysis import AnalysisFailureResponse, AnalysisRequest, AnalysisResponse
from ..services.analysis_store import AnalysisStore, SqlAnalysisStore
from ..services.dispatcher import AnalysisDispatcher

RATE_LIMIT_WINDOW_SECONDS = 3600
ROUTE_NAME = "analyze-deepfake"


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=AnalysisFailureResponse(error=message).model_dump(),
    )


class AnalysisFailureRoute(APIRoute):
    """
    Renders every failure on these routes as {success: false, error}.

    The wrapped handler includes dependency resolution, so database, Redis and
    settings errors raised while building the dispatcher get the same shape as
    errors raised by the dispatch itself.
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def failure_shaped_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except Exception as exc:
                log = RequestLogger(getattr(request.state, "request_id", "unknown"), route=ROUTE_NAME)
                log.error("analysis_failed", error=str(exc), error_type=type(exc).__name__)
                return _failure(500, str(exc) or type(exc).__name__)

        return failure_shaped_handler


router = APIRouter(route_class=AnalysisFailureRoute)


def get_analysis_store(db: AsyncSession = Depends(get_db)) -> AnalysisStore:
    return SqlAnalysisStore(db)


def get_detection_provider(settings: Settings = Depends(get_settings)) -> DetectionProvider:
    return RealityDefenderProvider(
        api_key=settings.reality_defender_api_key.get_secret_value(),
        endpoint=settings.reality_defender_url,
        timeout_seconds=settings.provider_timeout_seconds,
    )


def get_dispatcher(
    store: AnalysisStore = Depends(get_analysis_store),
    provider: DetectionProvider = Depends(get_detection_provider),
) -> AnalysisDispatcher:
    return AnalysisDispatcher(store, provider)


@router.post(
    "/analyze-deepfake",
    response_model=AnalysisResponse,
    responses={429: {"model": AnalysisFailureResponse}, 500: {"model": AnalysisFailureResponse}},
)
async def analyze_deepfake(
    request: Request,
    dispatcher: AnalysisDispatcher = Depends(get_dispatcher),
    identity_resolver: JWTIdentityResolver = Depends(get_identity_resolver),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Analyze an uploaded file for deepfake content.

    Routes to Reality Defender while the caller has quota left, otherwise to the
    heuristic fallback. Provider failures are absorbed by the fallback; every other
    failure (auth, configuration, bad body, storage) returns 500 with success=false.
    """
    log = RequestLogger(request.state.request_id, route=ROUTE_NAME)
    settings = get_settings()

    caller = await identity_resolver.resolve(request.headers.get("Authorization"))
    if caller is None:
        raise UnauthorizedError()

    if not await rate_limiter.check(
        f"analyze:{caller.user_id}",
        limit=settings.analyze_rate_limit,
        window_seconds=RATE_LIMIT_WINDOW_SECONDS,
    ):
        log.warning("rate_limited", user_id=caller.user_id, limit=settings.analyze_rate_limit)
        return _failure(429, "Too many analysis requests. Retry later.")

    body = AnalysisRequest.model_validate(await request.json())
    result = await dispatcher.dispatch(body, caller, log)
    return result.to_response()
