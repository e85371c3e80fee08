from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..auth.jwt_verifier import CallerIdentity
from ..detection.heuristic import HeuristicDetector
from ..detection.outcome import DetectionOutcome, HeuristicOutcome, ProviderOutcome
from ..detection.provider import DetectionProvider
from ..errors import ProviderFailure
from ..formatting import round_half_up
from ..logging import RequestLogger
from ..schemas.analysis import AnalysisRequest
from .analysis_store import AnalysisRecord, AnalysisStore


@dataclass(frozen=True)
class DispatchResult:
    outcome: DetectionOutcome
    processing_time: int

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "result": self.outcome.to_result(),
            "method": self.outcome.response_method,
            "processing_time": self.processing_time,
        }


def whole_seconds(elapsed: float) -> int:
    """Round elapsed seconds half-up."""
    return round_half_up(elapsed)


class AnalysisDispatcher:
    """Routes one analysis request to the provider or the heuristic fallback.

    Exactly one analysis record is written per dispatch. Quota is read once and,
    only after a successful provider call, written back as read value + 1. There is
    no isolation between that read and write.
    """

    def __init__(
        self,
        store: AnalysisStore,
        provider: DetectionProvider,
        heuristic: Optional[HeuristicDetector] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.provider = provider
        self.heuristic = heuristic or HeuristicDetector()
        self.clock = clock

    async def dispatch(
        self,
        request: AnalysisRequest,
        caller: CallerIdentity,
        log: RequestLogger,
    ) -> DispatchResult:
        start = self.clock()
        log = log.bind(user_id=caller.user_id, file_id=request.file_id)
        log.info("analysis_start", file_name=request.file_name, file_type=request.file_type)

        quota = await self.store.get_quota(caller.user_id)
        if quota is None or quota.exhausted:
            log.info(
                "quota_exhausted_using_fallback",
                quota_used=quota.used if quota else None,
                quota_limit=quota.limit if quota else None,
            )
            outcome: DetectionOutcome = self._fallback(request, provider_error=False)
        else:
            outcome = await self._detect(request, log)
            if isinstance(outcome, ProviderOutcome):
                await self.store.increment_quota(caller.user_id, quota.used)

        processing_time = whole_seconds(self.clock() - start)
        await self.store.insert_analysis(
            AnalysisRecord(
                file_id=request.file_id,
                user_id=caller.user_id,
                confidence_score=outcome.confidence,
                is_deepfake=outcome.is_deepfake,
                detection_method=outcome.detection_method,
                raw_result=outcome.raw_result,
                processing_time=processing_time,
                request_id=log.request_id,
            )
        )

        log.info(
            "analysis_complete",
            method=outcome.detection_method,
            is_deepfake=outcome.is_deepfake,
            confidence=outcome.confidence,
            processing_time=processing_time,
        )
        return DispatchResult(outcome=outcome, processing_time=processing_time)

    async def _detect(self, request: AnalysisRequest, log: RequestLogger) -> DetectionOutcome:
        try:
            with log.stage(self.provider.name):
                result = await self.provider.analyze(url=request.file_url, file_type=request.file_type)
        except ProviderFailure as exc:
            log.warning(
                "provider_failed_using_fallback",
                provider=self.provider.name,
                status_code=exc.status_code,
                error=str(exc),
            )
            return self._fallback(request, provider_error=True)

        return ProviderOutcome(result=result)

    def _fallback(self, request: AnalysisRequest, provider_error: bool) -> HeuristicOutcome:
        payload = self.heuristic.analyze(request.file_url, request.file_type)
        return HeuristicOutcome(payload=payload, provider_error=provider_error)
