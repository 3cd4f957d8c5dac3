# apps/matches/views.py
# =====================================================================
"""Async API views for an organization's matches."""

from __future__ import annotations

from typing import Any

import structlog
from asgiref.sync import sync_to_async
from django.http import Http404, HttpRequest

from apps.analytics.conf import AnalyticsFilters
from common.views_utils import OrganizationAppView, Page

from .conf import MAX_LIMIT_MATCHES, TIMEOUTS
from .models import Match
from .serializers import MatchSerializer

log = structlog.get_logger(__name__).bind(component="MatchViews")


class MatchListView(OrganizationAppView):
    """
    GET /api/v1/organizations/{organization_id}/matches

    Query Parameters:
    - Pagination: `page`, `page_size`
    - Filters: `match_type`, `opponent`, `victory`
    """

    CACHE_TTL = TIMEOUTS["match_list"]

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        page = Page.from_request(request, max_size=MAX_LIMIT_MATCHES)
        filters = AnalyticsFilters(
            opponent=request.GET.get("opponent") or None,
            match_type=request.GET.get("match_type") or None,
        )
        victory = request.GET.get("victory")
        return {
            **super()._get_params(request, **kwargs),
            "page": page.number,
            "page_size": page.size,
            "opponent": filters.opponent or "",
            "match_type": filters.match_type.value if filters.match_type else "",
            "victory": "" if victory is None else str(self.get_bool_param(request, "victory")).lower(),
        }

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        page = Page(p["page"], p["page_size"])
        qs = Match.objects.for_organization(p["organization_id"])
        if p["opponent"]:
            qs = qs.with_opponent(p["opponent"])
        if p["match_type"]:
            qs = qs.by_type(p["match_type"])
        if p["victory"]:
            qs = qs.victories() if p["victory"] == "true" else qs.defeats()
        qs = qs.order_by("-game_start", "-created_at")

        total = await qs.acount()
        matches = [m async for m in qs[page.offset : page.limit]]
        return {
            "count": total,
            "page": page.number,
            "page_size": page.size,
            "total_pages": page.total_pages(total),
            "data": [MatchSerializer.serialize_list_item(m) for m in matches],
        }


class MatchDetailView(OrganizationAppView):
    """GET /api/v1/organizations/{organization_id}/matches/{match_id} – match with scoreboard, team KDA and MVP."""

    CACHE_TTL = TIMEOUTS["match_detail"]

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {
            **super()._get_params(request, **kwargs),
            "match_id": str(kwargs["match_id"]),
        }

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(self._build_detail)(p["organization_id"], p["match_id"])

    @staticmethod
    def _build_detail(organization_id: str, match_id: str) -> dict[str, Any]:
        try:
            match = Match.objects.for_organization(organization_id).get(pk=match_id)
        except Match.DoesNotExist as e:
            msg = f"Match {match_id} not found."
            raise Http404(msg) from e

        stats = list(match.player_stats.select_related("player").order_by("-performance_score"))
        return MatchSerializer.serialize_detail(
            match,
            stats,
            kda_summary=match.kda_summary(),
            mvp=match.mvp_player(),
        )
