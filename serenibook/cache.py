"""
Short-lived de-duplication of client request ids
Used by session sync so that bursts of identical refresh calls do the work once
"""

import logging
import time
from threading import Lock
from typing import Optional

from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)

PROCESSED_REQUEST_TTL_SECONDS = 30


class ProcessedRequestCache:
    """Remembers request ids for a fixed TTL

    Entries live in process memory. When Redis is configured the ids are also
    claimed there with SET NX so that every worker sees the same window.
    """

    def __init__(self, ttl_seconds: int = PROCESSED_REQUEST_TTL_SECONDS, prefix: str = "processed"):
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix
        self._entries: dict[str, float] = {}
        self._lock = Lock()

    def _purge(self, now: float) -> None:
        expired = [key for key, expires_at in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def _claim_in_redis(self, request_id: str) -> Optional[bool]:
        try:
            client = get_redis_client()
        except Exception as e:
            logger.warning(f"⚠️ Redis unavailable for request de-duplication: {e}")
            return None
        if client is None:
            return None

        try:
            return bool(client.set(f"{self.prefix}:{request_id}", "1", nx=True, ex=self.ttl_seconds))
        except Exception as e:
            logger.warning(f"⚠️ Redis de-duplication failed, using memory only: {e}")
            return None

    def mark_if_new(self, request_id: str) -> bool:
        """Record a request id.

        Returns True the first time an id is seen within the TTL window and
        False for every repeat.
        """
        now = time.monotonic()
        with self._lock:
            self._purge(now)
            if request_id in self._entries:
                logger.debug(f"🔁 Duplicate request ignored: {request_id}")
                return False
            self._entries[request_id] = now + self.ttl_seconds

        claimed = self._claim_in_redis(request_id)
        if claimed is False:
            logger.debug(f"🔁 Request already processed by another worker: {request_id}")
            return False
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge(time.monotonic())
            return len(self._entries)


processed_requests = ProcessedRequestCache()
