# apps/core/views/health.py
# ======================================================================
from __future__ import annotations

import asyncio
import time

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest
from django.utils import timezone

from common.views_utils import OrjsonResponse

log = structlog.get_logger(__name__).bind(component="HealthCheck")


# --------------------------------------------------------------------------- helpers


def _simple_db_query() -> None:
    """Gets a connection and performs a simple query within the same thread."""
    db_conn = connections["default"]
    with db_conn.cursor() as cur:
        cur.execute("SELECT 1")
        cur.fetchone()


async def _check_database() -> dict[str, str | float]:
    start = time.perf_counter()
    try:
        await asyncio.to_thread(_simple_db_query)
        return {
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }
    except DatabaseError as exc:
        log.warning("Database health check failed", err=str(exc))
        return {"status": "unhealthy", "error": str(exc)}


async def _check_cache() -> dict[str, str]:
    key = f"health:{int(time.time())}"
    try:
        await cache.aset(key, "ok", 10)
        ok = await cache.aget(key) == "ok"
        await cache.adelete(key)
    except Exception as exc:  # noqa: BLE001
        log.warning("Cache health check failed", err=str(exc))
        return {"status": "unhealthy", "error": str(exc)}
    if not ok:
        return {"status": "unhealthy", "error": "Cache round-trip check failed"}
    return {"status": "healthy"}


# --------------------------------------------------------------------------- view
async def health_check(request: HttpRequest) -> OrjsonResponse:
    """
    Health endpoint covering the database and the cache.
    • `?check=basic`  → liveness-only.
    """
    start_view = time.perf_counter()
    base_payload = {
        "timestamp": timezone.now().isoformat(),
        "version": getattr(settings, "APP_VERSION", "unknown"),
        "environment": getattr(settings, "ENVIRONMENT", "unknown"),
    }

    # very cheap liveness probe for Kubernetes/ECS
    if request.GET.get("check") == "basic":
        return OrjsonResponse({"status": "ok", **base_payload})

    db_result, cache_result = await asyncio.gather(_check_database(), _check_cache())
    checks = {"database": db_result, "cache": cache_result}

    overall_healthy = all(v["status"] == "healthy" for v in checks.values())
    response = {
        "status": "healthy" if overall_healthy else "unhealthy",
        "checks": checks,
        "response_time_ms": round((time.perf_counter() - start_view) * 1000, 2),
        **base_payload,
    }
    return OrjsonResponse(response, status=200 if overall_healthy else 503)
