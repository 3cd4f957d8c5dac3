# common/cache_utils.py
# ===================================================================
"""
Single-flight response caching for the analytics API.

Payloads are stored as orjson bytes in the Django cache (django-redis in
every deployed environment). Concurrent misses for the same key are
serialized through a short Redis lock so an expensive aggregate is computed
once and then served to every waiting request.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import re
import urllib.parse
import uuid
from contextlib import asynccontextmanager
from functools import cache as memoize_cache
from typing import (
    TYPE_CHECKING,
    Any,
    Final,
    TypeVar,
    cast,
)

import orjson
import redis.asyncio as aioredis
import structlog
from django.conf import settings
from django.core.cache import cache

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

T = TypeVar("T")

log = structlog.get_logger(__name__).bind(component="CacheUtils")

KEY_NAMESPACE: Final[str] = "prostaff"
MAX_KEY_LENGTH: Final[int] = 250
_UNLOCK_SCRIPT: Final[str] = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
else
    return 0
end
"""


def _dumps(obj: Any) -> bytes:
    return orjson.dumps(obj)


def _loads(raw: bytes) -> Any:
    return orjson.loads(raw)


# ===================================================================
# Cache keys
# ===================================================================
def build_cache_key(prefix: str, **params: Any) -> str:
    """
    Builds a stable key from a request path and its parameters.

    Parameters are sorted so `?days=7&opponent=x` and `?opponent=x&days=7`
    share one entry. Keys longer than MAX_KEY_LENGTH keep the path prefix and
    replace the query with its digest.
    """
    prefix = f"{KEY_NAMESPACE}:{prefix}"
    if not params:
        return prefix

    query = urllib.parse.urlencode(sorted(params.items()), doseq=True)
    key = f"{prefix}:{query}"
    if len(key) <= MAX_KEY_LENGTH:
        return key

    digest = hashlib.sha256(query.encode()).hexdigest()
    cut = MAX_KEY_LENGTH - len(digest) - 1
    return f"{prefix[:cut]}:{digest}"


# ===================================================================
# Redis lock
# ===================================================================
def _redis_location() -> str:
    location = settings.CACHES.get("default", {}).get("LOCATION")
    if isinstance(location, list | tuple):
        location = location[0] if location else None
    if isinstance(location, str) and location.startswith(("redis://", "rediss://", "unix://")):
        return re.split(r"[,;]", location)[0].strip()
    return os.getenv("REDIS_CACHE_URL", "redis://127.0.0.1:6379/1")


@memoize_cache
def get_redis_client() -> aioredis.Redis:
    return aioredis.from_url(_redis_location(), decode_responses=True)


@asynccontextmanager
async def redis_lock(
    key: str,
    *,
    timeout: int = 10,
    retry_delay: float = 0.05,
) -> AsyncIterator[None]:
    """Holds `lock:<key>` until the block exits or `timeout` seconds pass."""
    token = str(uuid.uuid4())
    redis = get_redis_client()
    lock_key = f"lock:{key}"

    try:
        while not await redis.set(lock_key, token, nx=True, ex=timeout):
            await asyncio.sleep(retry_delay)
        yield
    finally:
        # Only the holder may release; an expired lock may belong to someone else now.
        await redis.eval(_UNLOCK_SCRIPT, 1, lock_key, token)


# ===================================================================
# Single-flight get-or-set
# ===================================================================
async def aget_or_set(
    key: str,
    producer: Callable[[], T | Awaitable[T]],
    *,
    ttl: int = 300,
    lock_timeout: int = 30,
) -> T:
    """Returns the cached payload, or produces and stores it under the key's lock."""
    raw = await cache.aget(key)
    if raw is not None:
        return cast("T", _loads(raw))

    async with redis_lock(key, timeout=lock_timeout):
        raw = await cache.aget(key)
        if raw is not None:
            return cast("T", _loads(raw))

        result: T | Awaitable[T] = producer()
        if asyncio.iscoroutine(result):
            result = await cast("Awaitable[T]", result)
        value = cast("T", result)

        try:
            data = _dumps(value)
            await cache.aset(key, data, timeout=ttl)
            log.debug("Cache set", key=key, size_kb=f"{len(data) / 1024:.1f}")
        except (TypeError, orjson.JSONEncodeError):
            log.exception("Payload is not cacheable", key=key)

        return value


async def adelete(key: str) -> int:
    return await cache.adelete(key)


async def aset_json(key: str, value: Any, ttl: int | None = None) -> None:
    await cache.aset(key, _dumps(value), timeout=ttl)
