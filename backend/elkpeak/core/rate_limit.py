import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import redis
from fastapi import Request

from elkpeak.core.config import get_settings
from elkpeak.core.errors import RateLimitError

logger = logging.getLogger("elk.ratelimit")


@dataclass(frozen=True)
class RatePolicy:
    """A fixed-window quota for one gateway scope."""

    scope: str
    limit: int
    window_seconds: int
    message: str = RateLimitError.default_message
    # Include the (hashed, truncated) user agent in the caller key.
    per_user_agent: bool = False


def get_client_ip(request: Request) -> str:
    """
    Best-effort client IP extraction.

    - Behind a proxy we trust the first X-Forwarded-For hop, then X-Real-IP.
    - In tests/dev, fall back to request.client.host.
    """
    xff = (request.headers.get("x-forwarded-for") or "").strip()
    if xff:
        # XFF may contain a chain: client, proxy1, proxy2
        return xff.split(",")[0].strip() or "unknown"
    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _hash(s: str) -> str:
    s = (s or "").strip().lower()
    if not s:
        return "empty"
    return hashlib.sha256(s.encode("utf-8")).hexdigest()[:32]


_redis_client: Optional[redis.Redis] = None
_redis_lock = threading.Lock()


def _get_redis_client() -> Optional[redis.Redis]:
    """
    Lazily create a Redis client.

    If Redis is not configured or is unreachable, returns None and we fall back
    to in-memory counters (best-effort protection).
    """
    global _redis_client
    if _redis_client is not None:
        return _redis_client

    with _redis_lock:
        if _redis_client is not None:
            return _redis_client
        url = (get_settings().redis_url or "").strip()
        if not url:
            return None
        try:
            client = redis.Redis.from_url(url, decode_responses=True)
            # quick connectivity check
            client.ping()
            _redis_client = client
            return _redis_client
        except redis.RedisError:
            # Do not cache failures permanently; redis might appear later.
            logger.warning("redis unavailable for rate limiting; using in-memory counters")
            return None


@dataclass(frozen=True)
class LimitResult:
    allowed: bool
    retry_after_seconds: int


_mem_lock = threading.Lock()
_mem_counters: dict[str, tuple[float, int]] = {}


def _mem_hit(key: str, limit: int, window_seconds: int) -> LimitResult:
    now = time.time()
    with _mem_lock:
        reset_at, count = _mem_counters.get(key, (now + window_seconds, 0))
        if now >= reset_at:
            reset_at, count = now + window_seconds, 0
        count += 1
        _mem_counters[key] = (reset_at, count)
        allowed = count <= limit
        retry_after = max(1, int(reset_at - now)) if not allowed else 0
        return LimitResult(allowed=allowed, retry_after_seconds=retry_after)


def _redis_hit(key: str, limit: int, window_seconds: int) -> Optional[LimitResult]:
    client = _get_redis_client()
    if client is None:
        return None
    try:
        count = int(client.incr(key))
        if count == 1:
            client.expire(key, int(window_seconds))
        ttl = int(client.ttl(key))
        # ttl can be -1/-2; normalize
        retry_after = max(1, ttl) if count > limit else 0
        return LimitResult(allowed=(count <= limit), retry_after_seconds=retry_after)
    except redis.RedisError:
        return None


def hit(key: str, limit: int, window_seconds: int) -> LimitResult:
    """
    Increment a counter in a fixed window and return whether request is allowed.
    Prefers Redis, falls back to in-memory.
    """
    res = _redis_hit(key, limit, window_seconds)
    if res is not None:
        return res
    return _mem_hit(key, limit, window_seconds)


def reset_counters() -> None:
    """Drop all in-memory windows (process restart equivalent)."""
    with _mem_lock:
        _mem_counters.clear()


def enforce_rate_limit(request: Request, policy: RatePolicy) -> None:
    """
    Rate limit helper. Raises RateLimitError (429) when the caller's window is exhausted.
    """
    if get_settings().rate_limit_enabled is False:
        return

    ip = get_client_ip(request)
    d = _hash((request.headers.get("user-agent") or "")[:50]) if policy.per_user_agent else ""
    key = f"elk:rl:{policy.scope}:{ip}:{d}"
    res = hit(key, policy.limit, policy.window_seconds)
    if not res.allowed:
        logger.warning("rate_limited scope=%s ip=%s", policy.scope, ip)
        headers = {"Retry-After": str(res.retry_after_seconds)} if res.retry_after_seconds else None
        raise RateLimitError(policy.message, headers=headers)


AUTH_VERIFY = RatePolicy(
    "auth_verify", limit=10, window_seconds=300,
    message="Too many authentication attempts. Please try again later.",
)
DASHBOARD_METRICS = RatePolicy("dashboard_metrics", limit=60, window_seconds=60, per_user_agent=True)
GOALS = RatePolicy("goals", limit=60, window_seconds=60)
METRIC_OVERRIDES = RatePolicy("metric_overrides", limit=100, window_seconds=60)
MONTHLY_LOGS = RatePolicy("monthly_logs", limit=100, window_seconds=60)
ADMIN_CONTACTS = RatePolicy("admin_contacts", limit=100, window_seconds=60)
MANAGE_DATA = RatePolicy("manage_data", limit=100, window_seconds=60)
CONTACT_SUBMIT = RatePolicy(
    "contact_submit", limit=5, window_seconds=3600,
    message="Too many submissions. Please try again later.",
)
