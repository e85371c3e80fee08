from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from ..models.analysis import Analysis
from ..models.profile import Profile


@dataclass(frozen=True)
class QuotaState:
    used: int
    limit: int

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit


@dataclass(frozen=True)
class AnalysisRecord:
    file_id: str
    user_id: str
    confidence_score: float
    is_deepfake: bool
    detection_method: str
    processing_time: int
    raw_result: Dict[str, Any] = field(default_factory=dict)
    status: str = "completed"
    request_id: Optional[str] = None


class AnalysisStore(Protocol):
    async def get_quota(self, user_id: str) -> Optional[QuotaState]: ...

    async def increment_quota(self, user_id: str, observed_used: int) -> None: ...

    async def insert_analysis(self, record: AnalysisRecord) -> None: ...


class SqlAnalysisStore:
    """
    Profiles and analyses over SQLAlchemy.

    Every write commits on its own. The quota increment writes observed_used + 1, so
    two concurrent dispatches that read the same value both store the same new value.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_quota(self, user_id: str) -> Optional[QuotaState]:
        result = await self.db.execute(
            select(Profile.api_quota_used, Profile.api_quota_limit).where(Profile.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return QuotaState(used=row.api_quota_used or 0, limit=row.api_quota_limit or 0)

    async def increment_quota(self, user_id: str, observed_used: int) -> None:
        await self.db.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(api_quota_used=observed_used + 1)
        )
        await self.db.commit()

    async def insert_analysis(self, record: AnalysisRecord) -> None:
        self.db.add(
            Analysis(
                file_id=record.file_id,
                user_id=record.user_id,
                status=record.status,
                confidence_score=record.confidence_score,
                is_deepfake=record.is_deepfake,
                detection_method=record.detection_method,
                raw_result=record.raw_result,
                processing_time=record.processing_time,
                request_id=record.request_id,
            )
        )
        await self.db.commit()
