# =============================================================================
# app/rate_limit.py - Request Rate Limiting
# =============================================================================
# Fixed-window quota per client IP, applied to every /api router:
#   RATE_LIMIT_REQUESTS per RATE_LIMIT_WINDOW_SECONDS (100 per 15 minutes).
#
# Counters live in Redis when REDIS_URL is set, so every API process shares
# one quota. Without Redis (or when it is unreachable) each process keeps
# its own counters.
#
# The client IP is the socket peer. X-Forwarded-For is used only when
# TRUST_PROXY is set.
#
# Tests switch the limiter off with app.state.disable_rate_limits = True.
# =============================================================================

import asyncio
import logging
import math
import time
from typing import Callable

from fastapi import Request
import redis.asyncio as redis

from app.config import settings
from app.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

KEY_PREFIX = "enzolearn:rate"

_local_counters: dict[str, tuple[int, float]] = {}
_local_lock = asyncio.Lock()


def _client_identifier(request: Request) -> str:
    if settings.TRUST_PROXY:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _prune_expired(now: float) -> None:
    expired = [key for key, (_, reset_at) in _local_counters.items() if reset_at <= now]
    for key in expired:
        del _local_counters[key]


async def _consume_local_quota(key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
    now = time.time()
    async with _local_lock:
        _prune_expired(now)
        count, reset_at = _local_counters.get(key, (0, now + window_seconds))
        if now >= reset_at:
            count = 0
            reset_at = now + window_seconds
        count += 1
        _local_counters[key] = (count, reset_at)
        return count <= limit, max(1, math.ceil(reset_at - now))


async def _consume_redis_quota(key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
    redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        current = await redis_client.incr(key)
        if current == 1:
            await redis_client.expire(key, window_seconds)
        ttl = await redis_client.ttl(key)
    finally:
        await redis_client.aclose()
    return current <= limit, ttl if ttl and ttl > 0 else window_seconds


def reset_local_counters() -> None:
    """Forget every in-process counter."""
    _local_counters.clear()


def rate_limit(
    scope: str = "api",
    limit: int | None = None,
    window_seconds: int | None = None,
) -> Callable:
    """
    Return a FastAPI dependency that enforces a per-client request quota.

    Args:
        scope: Counter namespace; routers sharing a scope share a quota
        limit: Requests per window (default RATE_LIMIT_REQUESTS)
        window_seconds: Window length (default RATE_LIMIT_WINDOW_SECONDS)

    Raises:
        RateLimitExceededError: 429 once the quota is spent
    """
    max_requests = limit or settings.RATE_LIMIT_REQUESTS
    window = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS

    async def _dependency(request: Request) -> None:
        if getattr(request.app.state, "disable_rate_limits", False):
            return

        key = f"{KEY_PREFIX}:{scope}:{_client_identifier(request)}"

        if settings.REDIS_URL:
            try:
                allowed, retry_after = await _consume_redis_quota(key, max_requests, window)
            except redis.RedisError as e:
                logger.warning(f"Redis rate limit unavailable, using local counters: {e}")
                allowed, retry_after = await _consume_local_quota(key, max_requests, window)
        else:
            allowed, retry_after = await _consume_local_quota(key, max_requests, window)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            raise RateLimitExceededError(retry_after)

    return _dependency
