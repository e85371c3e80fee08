import logging
import asyncio
import time
from collections import deque
from typing import Deque, Dict
from fastapi import Depends
import redis.asyncio as redis

from ..db.connection import get_redis

logger = logging.getLogger(__name__)

_LOCAL_FALLBACK_MAX_KEYS = 5000
_local_windows: Dict[str, Deque[float]] = {}
_local_lock = asyncio.Lock()


async def _local_check(key: str, limit: int, window_seconds: int) -> bool:
    """Sliding window kept in process memory, used while Redis is unreachable."""
    now = time.time()
    cutoff = now - window_seconds

    async with _local_lock:
        window = _local_windows.setdefault(key, deque())

        while window and window[0] <= cutoff:
            window.popleft()

        if len(window) >= limit:
            return False

        window.append(now)

        if len(_local_windows) > _LOCAL_FALLBACK_MAX_KEYS:
            _local_windows.pop(next(iter(_local_windows)))

    return True


class RateLimiter:
    """Fixed-window counter per key in Redis."""

    def __init__(self, redis_client: redis.Redis, prefix: str = "ratelimit"):
        self.redis = redis_client
        self.prefix = prefix

    def _bucket_key(self, key: str, window_seconds: int, now: float) -> str:
        return f"{self.prefix}:{key}:{int(now // window_seconds)}"

    async def check(self, key: str, limit: int, window_seconds: int) -> bool:
        """
        Count one hit against key and report whether it is within limit.

        Fails open onto the in-process window if Redis errors.
        """
        bucket = self._bucket_key(key, window_seconds, time.time())
        try:
            pipe = self.redis.pipeline()
            pipe.incr(bucket)
            pipe.expire(bucket, window_seconds, nx=True)
            count, _ = await pipe.execute()
            return count <= limit
        except Exception:
            logger.warning(
                "Rate limiter Redis error; using local fallback",
                exc_info=True,
            )
            return await _local_check(key, limit=limit, window_seconds=window_seconds)


def get_rate_limiter(cache: redis.Redis = Depends(get_redis)) -> RateLimiter:
    return RateLimiter(cache)
