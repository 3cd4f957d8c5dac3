# apps/analytics/views.py
# ======================================================================
"""Asynchronous team analytics views, scoped to one organization."""

from __future__ import annotations

from typing import Any

import structlog
from asgiref.sync import sync_to_async
from django.http import HttpRequest

from common.views_utils import OrganizationAppView

from .conf import TIMEOUTS, AnalyticsFilters, MatchWindow, TrendOptions
from .services.analytics_query_service import AnalyticsQueryService

log = structlog.get_logger(__name__).bind(component="AnalyticsViews")

WINDOW_PARAMS = ("start_date", "end_date", "days")
FILTER_PARAMS = ("opponent", "match_type", "player_id")


class AnalyticsWindowView(OrganizationAppView):
    """
    Parses and validates the match window and filters shared by the
    analytics endpoints.

    Query Parameters:
    - Window: `start_date` + `end_date` (ISO dates) or `days`
    - Filters: `opponent`, `match_type`, `player_id`

    Invalid combinations raise a pydantic `ValidationError`, answered with 400.
    Only the validated primitives go into the cache key; the service rebuilds
    the models from them.
    """

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        window = MatchWindow.model_validate({k: request.GET[k] for k in WINDOW_PARAMS if request.GET.get(k)})
        filters = AnalyticsFilters.model_validate({k: request.GET[k] for k in FILTER_PARAMS if request.GET.get(k)})
        return {
            **super()._get_params(request, **kwargs),
            **{k: str(v) for k, v in window.model_dump(mode="json", exclude_none=True).items()},
            **{k: str(v) for k, v in filters.model_dump(mode="json", exclude_none=True).items()},
        }

    @staticmethod
    def _build_service(p: dict[str, Any]) -> AnalyticsQueryService:
        return AnalyticsQueryService(
            p["organization_id"],
            MatchWindow.model_validate({k: p[k] for k in WINDOW_PARAMS if k in p}),
            AnalyticsFilters.model_validate({k: p[k] for k in FILTER_PARAMS if k in p}),
        )


class PerformanceView(AnalyticsWindowView):
    """GET …/analytics/performance – overview, win-rate trend, roles, best performers."""

    CACHE_TTL = TIMEOUTS["performance"]

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        options = TrendOptions.model_validate({"group_by": request.GET.get("group_by") or "week"})
        return {**super()._get_params(request, **kwargs), "group_by": options.group_by}

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        service = self._build_service(p)
        return await sync_to_async(service.performance)(p["group_by"])


class TeamComparisonView(AnalyticsWindowView):
    """GET …/analytics/team-comparison – per-player summaries, team averages and role rankings."""

    CACHE_TTL = TIMEOUTS["team_comparison"]

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        service = self._build_service(p)
        return await sync_to_async(service.team_comparison)()
