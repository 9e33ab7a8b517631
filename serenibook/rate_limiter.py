"""
Per-IP request throttling for the public endpoints (sign-up, login, password reset)

Each limit is a fixed window counted in process memory. When Redis is configured the
counters are pushed there every few seconds, and a worker seeing a key for the first
time resumes the window another worker started.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
REDIS_PUSH_INTERVAL = 10  # seconds between pushes of a counter to Redis
SWEEP_INTERVAL = 60  # seconds between purges of finished windows

_redis: Optional[redis.Redis] = None


def redis_configured() -> bool:
    return bool(os.getenv("REDIS_URL") or os.getenv("REDIS_HOST"))


def _connection_options() -> dict:
    return {
        "decode_responses": True,
        "socket_connect_timeout": 15,
        "socket_timeout": 30,
        "retry_on_timeout": True,
        "health_check_interval": 30,
        "max_connections": 20,
    }


def get_redis_client() -> Optional[redis.Redis]:
    """
    Shared Redis connection, created on first use.
    None when Redis is not configured. Connection failures are raised to the caller.
    """
    global _redis

    if _redis is not None or not redis_configured():
        return _redis

    url = os.getenv("REDIS_URL")
    logger.info("🔄 Connecting to Redis...")
    if url:
        candidate = redis.from_url(url, **_connection_options())
    else:
        candidate = redis.Redis(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            password=os.getenv("REDIS_PASSWORD") or None,
            db=int(os.getenv("REDIS_DB", "0")),
            ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
            **_connection_options(),
        )

    try:
        candidate.ping()
    except redis.RedisError as e:
        logger.error(f"❌ Redis unreachable: {e}")
        raise

    logger.info("✅ Redis connected")
    _redis = candidate
    return _redis


class WindowCounter:
    """Hits recorded in the current window of one key"""

    def __init__(self, reset_at: int, count: int = 0):
        self.count = count
        self.reset_at = reset_at
        self.pushed_at = 0


class RateLimitStore:
    def __init__(self):
        self._counters: dict[str, WindowCounter] = {}
        self._lock = Lock()
        self._swept_at = 0

    def _sweep(self, now: int) -> None:
        if now - self._swept_at < SWEEP_INTERVAL:
            return
        finished = [key for key, counter in self._counters.items() if now >= counter.reset_at]
        for key in finished:
            del self._counters[key]
        if finished:
            logger.debug(f"🧹 Dropped {len(finished)} finished rate limit windows")
        self._swept_at = now

    def _resume_from_redis(self, key: str, now: int, client: redis.Redis) -> Optional[WindowCounter]:
        try:
            stored = client.get(key)
            remaining = client.ttl(key)
        except redis.RedisError as e:
            logger.warning(f"⚠️ Could not read {key} from Redis, counting locally: {e}")
            return None
        if stored and remaining > 0:
            return WindowCounter(reset_at=now + remaining, count=int(stored))
        return None

    def _push_to_redis(self, key: str, counter: WindowCounter, now: int, client: redis.Redis) -> None:
        try:
            client.set(key, counter.count, ex=max(1, counter.reset_at - now))
            counter.pushed_at = now
        except redis.RedisError as e:
            logger.warning(f"⚠️ Could not push {key} to Redis: {e}")

    def hit(
        self, key: str, limit: int, window_seconds: int, client: Optional[redis.Redis]
    ) -> tuple[bool, int, int]:
        """Record one request against key.

        Returns (allowed, hits in window, seconds until the window resets).
        Refused requests are not counted.
        """
        now = int(time.time())
        with self._lock:
            self._sweep(now)

            counter = self._counters.get(key)
            if counter is None:
                if client is not None:
                    counter = self._resume_from_redis(key, now, client)
                if counter is None:
                    counter = WindowCounter(reset_at=now + window_seconds)
                counter.pushed_at = now
                self._counters[key] = counter
            elif now >= counter.reset_at:
                counter.count = 0
                counter.reset_at = now + window_seconds
                counter.pushed_at = 0

            allowed = counter.count < limit
            if allowed:
                counter.count += 1

            if client is not None and now - counter.pushed_at >= REDIS_PUSH_INTERVAL:
                self._push_to_redis(key, counter, now, client)

            return allowed, counter.count, max(0, counter.reset_at - now)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._swept_at = 0


store = RateLimitStore()


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis]
) -> tuple[bool, int, int]:
    return store.hit(key, limit, window_seconds, client)


def reset_rate_limits() -> None:
    """Forget every in-memory counter"""
    store.reset()


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(
    limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True
):
    """
    Build a FastAPI dependency allowing `limit` requests per `window_seconds`,
    per client IP (or shared by everyone when use_ip is False).

        rate_limit_login = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        if not RATE_LIMIT_ENABLED:
            return

        scope = get_client_ip(request) if use_ip else "global"
        key = f"{key_prefix}:{scope}"

        try:
            client = get_redis_client()
        except redis.RedisError:
            client = None

        try:
            allowed, hits, retry_after = check_rate_limit(key, limit, window_seconds, client)
        except Exception as e:
            logger.error(f"❌ Rate limit check failed for {key}: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Rate limiting service temporarily unavailable",
            ) from e

        if not allowed:
            logger.warning(f"🚫 Too many requests on {key} ({hits}/{limit} in {window_seconds}s)")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "message": f"Too many requests. Try again in {retry_after} seconds.",
                    "retry_after": retry_after,
                    "limit": limit,
                    "window_seconds": window_seconds,
                },
                headers={"Retry-After": str(retry_after)},
            )

        request.state.rate_limit_remaining = limit - hits

    return rate_limiter
