from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from deepguard.auth.jwt_verifier import CallerIdentity, bearer_token
from deepguard.detection.provider import DetectionProvider, ProviderResult
from deepguard.schemas.stats import DashboardStats
from deepguard.services.analysis_store import AnalysisRecord, QuotaState


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


class FakeStore:
    def __init__(self, quota: Optional[QuotaState] = QuotaState(used=0, limit=50)):
        self.quota = quota
        self.records: List[AnalysisRecord] = []
        self.increments: List[tuple] = []

    async def get_quota(self, user_id: str) -> Optional[QuotaState]:
        return self.quota

    async def increment_quota(self, user_id: str, observed_used: int) -> None:
        self.increments.append((user_id, observed_used))
        self.quota = QuotaState(used=observed_used + 1, limit=self.quota.limit)

    async def insert_analysis(self, record: AnalysisRecord) -> None:
        self.records.append(record)


class FakeProvider(DetectionProvider):
    name = "reality_defender"

    def __init__(self, result: Optional[ProviderResult] = None, error: Optional[Exception] = None):
        self.result = result or ProviderResult(
            prediction="Authentic Content",
            confidence=0.95,
            raw={"prediction": "Authentic Content", "confidence": 0.95},
        )
        self.error = error
        self.calls: List[dict] = []

    async def analyze(self, *, url: str, file_type: str) -> ProviderResult:
        self.calls.append({"url": url, "file_type": file_type})
        if self.error is not None:
            raise self.error
        return self.result


class FakeIdentityResolver:
    def __init__(self, identity: CallerIdentity = CallerIdentity(user_id="user-1")):
        self.identity = identity

    async def resolve(self, auth_header: Optional[str]) -> Optional[CallerIdentity]:
        return self.identity if bearer_token(auth_header) else None


class DummyRateLimiter:
    def __init__(self):
        self.allowed = True
        self.keys: List[str] = []

    async def check(self, key: str, limit: int, window_seconds: int) -> bool:
        self.keys.append(key)
        return self.allowed


class DummyStatsService:
    def __init__(self):
        self.requested: List[str] = []

    async def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        self.requested.append(user_id)
        return DashboardStats(
            total_files=4,
            deepfakes_detected=1,
            quota_used=3,
            quota_limit=50,
            accuracy_rate=87,
            avg_processing_time=2,
        )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def identity_resolver() -> FakeIdentityResolver:
    return FakeIdentityResolver()


@pytest.fixture
def rate_limiter() -> DummyRateLimiter:
    return DummyRateLimiter()


@pytest.fixture
def stats_service() -> DummyStatsService:
    return DummyStatsService()


@pytest_asyncio.fixture
async def client(store, provider, identity_resolver, rate_limiter, stats_service):
    from deepguard.auth.jwt_verifier import get_identity_resolver
    from deepguard.main import app
    from deepguard.middleware.rate_limit import get_rate_limiter
    from deepguard.routes.analysis import get_analysis_store, get_detection_provider
    from deepguard.routes.dashboard import get_stats_service

    app.dependency_overrides[get_analysis_store] = lambda: store
    app.dependency_overrides[get_detection_provider] = lambda: provider
    app.dependency_overrides[get_identity_resolver] = lambda: identity_resolver
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_stats_service] = lambda: stats_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client

    app.dependency_overrides.clear()
