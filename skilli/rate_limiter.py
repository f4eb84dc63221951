"""
Fixed-window rate limiting for the auth endpoints

Windows are counted in process memory. With REDIS_URL configured each window
is seeded from and periodically pushed to Redis so that several API workers
converge on one count per client.
"""

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import AUTH_RATE_LIMIT, AUTH_RATE_WINDOW, RATE_LIMIT_ENABLED, REDIS_URL

logger = logging.getLogger(__name__)

REDIS_SYNC_INTERVAL = 10
PURGE_INTERVAL = 60


@dataclass
class Window:
    count: int
    resets_at: int
    synced_at: int = 0


_windows: dict[str, Window] = {}
_lock = Lock()
_last_purge = 0
_redis: Optional[redis.Redis] = None


def _mask(url: str) -> str:
    if "@" not in url:
        return "****"
    scheme = url.split(":", 1)[0]
    return f"{scheme}:****@{url.rsplit('@', 1)[1]}"


def get_redis_client() -> Optional[redis.Redis]:
    """Shared Redis connection, or None when counters stay local"""
    global _redis

    if not REDIS_URL:
        return None
    if _redis is None:
        logger.info(f"🔄 Connecting rate limiter to Redis at {_mask(REDIS_URL)}")
        client = redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        client.ping()
        _redis = client
        logger.info("✅ Rate limiter connected to Redis")
    return _redis


def reset_rate_limits():
    with _lock:
        _windows.clear()


def _purge_expired(now: int):
    global _last_purge
    if now - _last_purge < PURGE_INTERVAL:
        return
    with _lock:
        stale = [key for key, window in _windows.items() if window.resets_at <= now]
        for key in stale:
            del _windows[key]
    if stale:
        logger.debug(f"🧹 Dropped {len(stale)} expired rate limit windows")
    _last_purge = now


def _open_window(key: str, window_seconds: int, now: int, client: Optional[redis.Redis]) -> Window:
    if client is not None:
        try:
            shared = client.get(key)
            remaining = client.ttl(key)
            if shared and remaining > 0:
                return Window(count=int(shared), resets_at=now + remaining, synced_at=now)
        except redis.RedisError as e:
            logger.warning(f"⚠️ Could not read {key} from Redis, counting locally: {e}")
    return Window(count=0, resets_at=now + window_seconds, synced_at=now)


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """
    Count one hit against `key`.

    Returns (allowed, hits in the current window, seconds until it resets).
    Refused hits are not counted.
    """
    now = int(time.time())
    _purge_expired(now)

    with _lock:
        window = _windows.get(key)
        if window is None:
            window = _windows[key] = _open_window(key, window_seconds, now, client)
        elif now >= window.resets_at:
            window.count, window.resets_at, window.synced_at = 0, now + window_seconds, 0

        allowed = window.count < limit
        if allowed:
            window.count += 1

        if client is not None and now - window.synced_at >= REDIS_SYNC_INTERVAL:
            try:
                client.set(key, window.count, ex=window_seconds)
                window.synced_at = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Could not push {key} to Redis: {e}")

        return allowed, window.count, max(0, window.resets_at - now)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(
    request: Request, limit: int, window_seconds: int, key_prefix: str, per_ip: bool = True
):
    """Raise 429 once the caller has used up the window"""
    if not RATE_LIMIT_ENABLED:
        return

    key = f"{key_prefix}:{_client_ip(request) if per_ip else 'global'}"
    try:
        client = get_redis_client()
    except redis.RedisError as e:
        logger.warning(f"⚠️ Redis unavailable, rate limiting locally: {e}")
        client = None

    allowed, hits, retry_after = check_rate_limit(key, limit, window_seconds, client)
    if not allowed:
        logger.warning(f"🚫 Rate limit hit for {key} ({hits}/{limit})")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": retry_after,
                "limit": limit,
                "window_seconds": window_seconds,
            },
            headers={"Retry-After": str(retry_after)},
        )

    request.state.rate_limit_remaining = limit - hits


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str, per_ip: bool = True):
    """Build a FastAPI dependency bound to one limit"""

    async def rate_limiter(request: Request):
        await enforce_rate_limit(request, limit, window_seconds, key_prefix, per_ip)

    return rate_limiter


auth_rate_limiter = create_rate_limiter(
    limit=AUTH_RATE_LIMIT, window_seconds=AUTH_RATE_WINDOW, key_prefix="auth"
)
