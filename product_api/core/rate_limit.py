"""
Fixed-window rate limiter keyed by client IP.

Each window of `window_seconds` allows `limit` requests per client; the
counter resets when the next window starts. Counters live in process memory
by default, or in Redis so several workers share one budget.
"""

import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError
from starlette.requests import Request

from product_api.config import get_settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int


class RateLimiter(ABC):
    """Fixed-window counter. `hit` records one request for `key`."""

    def __init__(self, limit: int, window_seconds: int, clock=time.time):
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock

    def _window(self) -> tuple[int, int]:
        """Current window number and seconds until it ends."""
        now = self._clock()
        window = int(now // self.window_seconds)
        reset_in = max(1, math.ceil((window + 1) * self.window_seconds - now))
        return window, reset_in

    def _result(self, count: int, reset_in: int) -> RateLimitResult:
        allowed = count <= self.limit
        return RateLimitResult(
            allowed=allowed,
            limit=self.limit,
            remaining=max(self.limit - count, 0),
            retry_after=0 if allowed else reset_in,
        )

    @abstractmethod
    async def hit(self, key: str) -> RateLimitResult: ...

    @abstractmethod
    async def reset(self) -> None:
        """Forget all counters."""


class InMemoryRateLimiter(RateLimiter):
    """Per-process counters. Thread-safe; resets on restart."""

    def __init__(self, limit: int, window_seconds: int, clock=time.time):
        super().__init__(limit, window_seconds, clock)
        self._counters: dict[str, tuple[int, int]] = {}
        self._lock = threading.Lock()

    async def hit(self, key: str) -> RateLimitResult:
        window, reset_in = self._window()
        with self._lock:
            current_window, count = self._counters.get(key, (window, 0))
            if current_window != window:
                count = 0
            count += 1
            self._counters[key] = (window, count)
            # Drop counters from finished windows so memory tracks active clients only.
            if len(self._counters) > 10_000:
                self._counters = {k: v for k, v in self._counters.items() if v[0] == window}
        return self._result(count, reset_in)

    async def reset(self) -> None:
        with self._lock:
            self._counters.clear()


class RedisRateLimiter(RateLimiter):
    """Shared counters in Redis: INCR on a per-window key, expiring with the window."""

    KEY_PREFIX = "rate_limit:"

    def __init__(self, redis: Redis, limit: int, window_seconds: int, clock=time.time):
        super().__init__(limit, window_seconds, clock)
        self.redis = redis

    async def hit(self, key: str) -> RateLimitResult:
        window, reset_in = self._window()
        redis_key = f"{self.KEY_PREFIX}{key}:{window}"
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.incr(redis_key)
                pipe.expire(redis_key, self.window_seconds)
                count, _ = await pipe.execute()
        except RedisError as exc:
            # Limiter unavailable: let traffic through rather than fail every request.
            logger.warning("rate_limit.storage_unavailable", error=str(exc))
            return RateLimitResult(allowed=True, limit=self.limit, remaining=self.limit, retry_after=0)
        return self._result(int(count), reset_in)

    async def reset(self) -> None:
        async for redis_key in self.redis.scan_iter(match=f"{self.KEY_PREFIX}*"):
            await self.redis.delete(redis_key)


def client_identifier(request: Request) -> str:
    """First X-Forwarded-For entry when behind a proxy, else the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"
    if request.client:
        return f"ip:{request.client.host}"
    return "ip:unknown"


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter built from settings."""
    settings = get_settings()
    if settings.rate_limit_storage == "redis":
        redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        return RedisRateLimiter(redis, settings.rate_limit_per_window, settings.rate_limit_window_seconds)
    return InMemoryRateLimiter(settings.rate_limit_per_window, settings.rate_limit_window_seconds)
