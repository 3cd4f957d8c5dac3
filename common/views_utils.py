# common/views_utils.py
# ======================================================================
"""
Shared plumbing for the async JSON API: orjson responses, pagination,
query-string helpers and the cached GET lifecycle every endpoint follows.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Self,
    TypeVar,
    cast,
)

import orjson
import structlog
from django.http import (
    Http404,
    HttpRequest,
    HttpResponse,
)
from django.views import View
from pydantic import ValidationError

from apps.core.models import Organization

from .cache_utils import adelete, aset_json
from .cache_utils import aget_or_set as _aget_or_set
from .cache_utils import build_cache_key as _build_cache_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

log = structlog.get_logger(__name__).bind(component="ViewsUtils")

TRUTHY = frozenset({"1", "true", "yes", "on"})


# ------------------------------------------------------------------ responses
class OrjsonResponse(HttpResponse):
    """JSON response encoded with orjson; naive datetimes are treated as UTC."""

    def __init__(self, data: Any, *, status: int = 200, **kw: Any) -> None:
        content = orjson.dumps(data, option=orjson.OPT_NAIVE_UTC)
        kw.setdefault("content_type", "application/json")
        super().__init__(content=content, status=status, **kw)


def _validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]) or "__all__", "message": err["msg"]}
        for err in exc.errors()
    ]


# ------------------------------------------------------------------ pagination
@dataclass(slots=True, frozen=True)
class Page:
    """
    1-based page of a list endpoint.

    `offset` is derived from `number` and `size` and is what the ORM slice
    uses.
    """

    number: int
    size: int
    offset: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "offset", (self.number - 1) * self.size)

    @property
    def limit(self) -> int:
        return self.offset + self.size

    def total_pages(self, count: int) -> int:
        return -(-count // self.size)

    @classmethod
    def from_request(
        cls,
        req: HttpRequest,
        /,
        *,
        max_size: int = 100,
        default_size: int = 50,
    ) -> Self:
        """Reads `page` and `page_size`; junk values fall back to the defaults, sizes are clamped."""
        try:
            page_num = max(int(req.GET.get("page", 1)), 1)
        except (TypeError, ValueError):
            page_num = 1

        try:
            raw_size = int(req.GET.get("page_size", default_size))
        except (TypeError, ValueError):
            raw_size = default_size

        return cls(page_num, max(1, min(raw_size, max_size)))


# ------------------------------------------------------------------ BaseAsyncView
class BaseAsyncView(View):
    """
    Async class-based view with JSON error mapping and response caching.

        • pydantic `ValidationError` → 400 with per-field messages
        • `Http404` (and subclasses)  → 404
        • anything else               → logged, generic 500
        • `nocache=true` bypasses the cache, `reset=true` refreshes it
        • `X-Cache-Status` reports HIT | MISS | REFRESH | BYPASS
    """

    META_CACHE_PARAMS: frozenset[str] = frozenset({"reset", "nocache"})

    async def dispatch(self, request: HttpRequest, *args: Any, **kw: Any):  # type: ignore[override]
        self.request = request

        handler = getattr(self, request.method.lower(), None)
        if handler is None:
            return await self.http_method_not_allowed(request, *args, **kw)

        try:
            response = await handler(request, *args, **kw)
        except ValidationError as exc:
            log.info("Invalid request parameters", path=request.path, errors=exc.error_count())
            response = OrjsonResponse(
                {"detail": "Invalid query parameters.", "errors": _validation_errors(exc)},
                status=400,
            )
        except Http404 as exc:
            log.info("Resource not found", path=request.path, err=str(exc))
            response = OrjsonResponse({"detail": str(exc) or "Not found."}, status=404)
        except Exception as exc:
            log.exception("Unhandled API error", path=request.path, exc_info=exc)
            response = OrjsonResponse({"detail": "An internal server error occurred."}, status=500)

        cache_status = getattr(request, "_cache_status", None)
        if cache_status:
            response["X-Cache-Status"] = cache_status
        return response

    async def http_method_not_allowed(self, request: HttpRequest, *a: Any, **k: Any) -> HttpResponse:
        log.warning("Method Not Allowed", method=request.method, path=request.path)
        return OrjsonResponse({"detail": f'Method "{request.method}" not allowed.'}, status=405)

    # ─────────────────────── request-parsing helpers ─────────────────
    @staticmethod
    def get_bool_param(request: HttpRequest, key: str, *, default: bool = False) -> bool:
        val = request.GET.get(key)
        if val is None:
            return default
        return val.lower() in TRUTHY

    @staticmethod
    def get_int_param(
        request: HttpRequest,
        key: str,
        /,
        *,
        default: int,
        min_val: int | None = None,
        max_val: int | None = None,
    ) -> int:
        try:
            val = int(request.GET.get(key, default))
        except (TypeError, ValueError):
            return default
        if min_val is not None:
            val = max(val, min_val)
        if max_val is not None:
            val = min(val, max_val)
        return val

    # ───────────────────────── caching ───────────────────────────────
    def build_cache_key(self, request: HttpRequest, **extra: Any) -> str:
        """
        Request path plus the query string (minus the cache flags) merged
        with `extra`; `extra` wins on conflicts, so validated parameters
        override raw ones.
        """
        params = {k: v for k, v in request.GET.items() if k not in self.META_CACHE_PARAMS}
        params.update(extra)
        return _build_cache_key(request.path, **params)

    async def get_cached_data(
        self,
        request: HttpRequest,
        producer: Callable[[], T | Awaitable[T]],
        *,
        ttl: int,
        **cache_key_kwargs: Any,
    ) -> T:
        async def produce() -> T:
            res = producer()
            if asyncio.iscoroutine(res):
                return await cast("Awaitable[T]", res)
            return cast("T", res)

        cache_key = self.build_cache_key(request, **cache_key_kwargs)

        if self.get_bool_param(request, "nocache"):
            log.debug("Cache bypassed", key=cache_key)
            request._cache_status = "BYPASS"
            return await produce()

        if self.get_bool_param(request, "reset"):
            log.info("Cache reset", key=cache_key)
            await adelete(cache_key)
            data = await produce()
            await aset_json(cache_key, data, ttl=ttl)
            request._cache_status = "REFRESH"
            return data

        async def produce_on_miss() -> T:
            request._cache_status = "MISS"
            return await produce()

        data = await _aget_or_set(cache_key, produce_on_miss, ttl=ttl)
        if not hasattr(request, "_cache_status"):
            request._cache_status = "HIT"
        return data


class BaseAppView(BaseAsyncView, ABC):
    """
    The GET lifecycle shared by all API views.

    1. `_get_params` turns path kwargs and the query string into validated
       primitives (validation errors surface as 400).
    2. Those primitives key the cache.
    3. On a miss, `_produce_payload` builds the response body from them.
    """

    CACHE_TTL: int = 300

    @abstractmethod
    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def _produce_payload(self, params: dict[str, Any]) -> Any:
        raise NotImplementedError

    async def get(self, request: HttpRequest, **kwargs) -> OrjsonResponse:
        params = self._get_params(request, **kwargs)

        async def _producer() -> Any:
            return await self._produce_payload(params)

        data = await self.get_cached_data(request, producer=_producer, ttl=self.CACHE_TTL, **params)
        return OrjsonResponse(data)


class OrganizationAppView(BaseAppView, ABC):
    """
    Views under `/organizations/{organization_id}/`; the tenant always comes
    from the path and must exist before anything is computed or cached.
    """

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {"organization_id": str(kwargs["organization_id"])}

    async def get(self, request: HttpRequest, **kwargs) -> OrjsonResponse:
        organization_id = kwargs["organization_id"]
        if not await Organization.objects.filter(pk=organization_id).aexists():
            msg = f"Organization {organization_id} not found."
            raise Http404(msg)
        return await super().get(request, **kwargs)
