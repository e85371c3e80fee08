import json
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
import redis.asyncio as redis

from ..models.analysis import Analysis
from ..models.file import UploadedFile
from ..models.profile import Profile
from ..formatting import round_half_up
from ..schemas.stats import DashboardStats

CACHE_TTL = 60
DEFAULT_QUOTA_LIMIT = 50


class StatsService:
    def __init__(
        self,
        db: AsyncSession,
        cache: redis.Redis,
        ttl_seconds: int = CACHE_TTL,
        default_quota_limit: int = DEFAULT_QUOTA_LIMIT,
    ):
        self.db = db
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.default_quota_limit = default_quota_limit

    async def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        """Get cached dashboard stats for a user or compute fresh."""
        key = f"dashboard_stats:{user_id}"
        cached = await self.cache.get(key)
        if cached:
            return DashboardStats(**json.loads(cached))

        stats = await self._compute_stats(user_id)

        await self.cache.setex(key, self.ttl_seconds, json.dumps(stats.model_dump()))

        return stats

    async def _compute_stats(self, user_id: str) -> DashboardStats:
        quota = (
            await self.db.execute(
                select(Profile.api_quota_used, Profile.api_quota_limit).where(Profile.id == user_id)
            )
        ).one_or_none()

        total_files = await self.db.scalar(
            select(func.count(UploadedFile.id)).where(UploadedFile.user_id == user_id)
        )

        completed = (Analysis.user_id == user_id, Analysis.status == "completed")

        deepfakes_detected = await self.db.scalar(
            select(func.count(Analysis.id)).where(*completed, Analysis.is_deepfake.is_(True))
        )

        avg_processing_time = await self.db.scalar(
            select(func.avg(func.coalesce(Analysis.processing_time, 0))).where(*completed)
        ) or 0

        avg_confidence = await self.db.scalar(
            select(func.avg(func.coalesce(Analysis.confidence_score, 0))).where(*completed)
        ) or 0

        return DashboardStats(
            total_files=total_files or 0,
            deepfakes_detected=deepfakes_detected or 0,
            quota_used=(quota.api_quota_used if quota else 0) or 0,
            quota_limit=(quota.api_quota_limit if quota else 0) or self.default_quota_limit,
            accuracy_rate=round_half_up(float(avg_confidence) * 100),
            avg_processing_time=round_half_up(float(avg_processing_time)),
        )
