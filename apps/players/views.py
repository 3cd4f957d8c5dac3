# apps/players/views.py
# ======================================================================
"""Asynchronous per-player analytics views, scoped to one organization."""

from __future__ import annotations

from typing import Any

import structlog
from asgiref.sync import sync_to_async
from django.http import HttpRequest

from common.views_utils import OrganizationAppView

from . import conf
from .services import player_analytics

log = structlog.get_logger(__name__).bind(component="PlayersViews")


class PlayerAnalyticsView(OrganizationAppView):
    """Common path-parameter handling for `/organizations/{org}/players/{player}/…` views."""

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {
            **super()._get_params(request, **kwargs),
            "player_id": str(kwargs["player_id"]),
        }


class KdaTrendView(PlayerAnalyticsView):
    """GET …/players/{player_id}/kda-trend – per-match KDA and rolling averages."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("kda_trend", 300)

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.kda_trend)(p["organization_id"], p["player_id"])


class LaningView(PlayerAnalyticsView):
    """GET …/players/{player_id}/laning – CS and gold over recent games."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("laning", 300)

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.laning)(p["organization_id"], p["player_id"])


class VisionView(PlayerAnalyticsView):
    """GET …/players/{player_id}/vision – warding and role comparison."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("vision", 300)

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.vision)(p["organization_id"], p["player_id"])


class ChampionPoolView(PlayerAnalyticsView):
    """GET …/players/{player_id}/champions – graded champion pool."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("champions", 600)

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.champion_stats)(p["organization_id"], p["player_id"])


class ChampionDetailView(PlayerAnalyticsView):
    """GET …/players/{player_id}/champions/{champion} – one champion in depth."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("champion_detail", 300)

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        max_limit = conf.MAX_CHAMPION_DETAIL_LIMIT
        return {
            **super()._get_params(request, **kwargs),
            "champion": kwargs["champion"],
            "limit": self.get_int_param(request, "limit", default=0, min_val=0, max_val=max_limit),
        }

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.champion_details)(
            p["organization_id"],
            p["player_id"],
            p["champion"],
            limit=p["limit"] or None,
        )


class PlayerStatsView(PlayerAnalyticsView):
    """GET …/players/{player_id}/stats – record, recent form and main champions."""

    CACHE_TTL = conf.PLAYER_TIMEOUTS.get("stats", 300)

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        return await sync_to_async(player_analytics.player_overview)(p["organization_id"], p["player_id"])
