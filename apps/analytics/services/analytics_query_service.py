# apps/analytics/services/analytics_query_service.py
# ================================================================================
"""
Grouped aggregate queries over an organization's match window.

Every public method issues a fixed number of GROUP BY queries regardless of
roster size; nothing loops over players issuing one query each. The service
is synchronous and is meant to be driven from async views through
`asgiref.sync_to_async`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import structlog
from django.conf import settings
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncDay, TruncMonth, TruncWeek

from apps.analytics.conf import AnalyticsFilters, MatchWindow, TrendPeriod
from apps.analytics.services.grading import PerformanceGradingEngine
from apps.matches.models import Match, PlayerMatchStat
from apps.matches.services.stat_aggregator import kda_ratio
from apps.players.conf import PlayerRole
from apps.players.models import Player

if TYPE_CHECKING:
    from uuid import UUID

    from apps.matches.models.match import MatchQuerySet
    from apps.matches.models.player_match_stat import PlayerMatchStatQuerySet

log: Final = structlog.get_logger(__name__).bind(component="AnalyticsQueryService")

_TRUNCATORS: Final = {"day": TruncDay, "week": TruncWeek, "month": TruncMonth}
_ROLE_ORDER: Final[dict[str, int]] = {role: index for index, role in enumerate(PlayerRole.values)}


def _round(value: float | None, ndigits: int) -> float:
    return round(value, ndigits) if value is not None else 0.0


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def _metric_aggregates() -> dict[str, Any]:
    """Aggregate expressions shared by per-player summaries and team averages."""
    return {
        "games_played": Count("id"),
        "total_kills": Sum("kills", default=0),
        "total_deaths": Sum("deaths", default=0),
        "total_assists": Sum("assists", default=0),
        "avg_damage": Avg("damage_dealt_total"),
        "avg_gold": Avg("gold_earned"),
        "avg_cs": Avg("cs"),
        "avg_cs_per_min": Avg("cs_per_min"),
        "avg_damage_share": Avg("damage_share"),
        "avg_vision_score": Avg("vision_score"),
        "avg_performance_score": Avg("performance_score"),
        # Vision per minute only counts stats whose match has a known duration.
        "timed_vision": Sum("vision_score", filter=Q(match__game_duration__gt=0), default=0),
        "timed_seconds": Sum("match__game_duration", filter=Q(match__game_duration__gt=0), default=0),
        "double_kills": Sum("double_kills", default=0),
        "triple_kills": Sum("triple_kills", default=0),
        "quadra_kills": Sum("quadra_kills", default=0),
        "penta_kills": Sum("penta_kills", default=0),
    }


def _format_metrics(row: dict[str, Any]) -> dict[str, Any]:
    minutes = (row["timed_seconds"] or 0) / 60.0
    return {
        "games_played": row["games_played"] or 0,
        "kda": kda_ratio(row["total_kills"], row["total_deaths"], row["total_assists"]),
        "avg_damage": _round(row["avg_damage"], 0),
        "avg_gold": _round(row["avg_gold"], 0),
        "avg_cs": _round(row["avg_cs"], 1),
        "avg_cs_per_min": _round(row["avg_cs_per_min"], 2),
        "avg_damage_share": _round(row["avg_damage_share"], 3),
        "avg_vision_score": _round(row["avg_vision_score"], 1),
        "avg_performance_score": _round(row["avg_performance_score"], 1),
        "vision_per_min": round(row["timed_vision"] / minutes, 2) if minutes else 0.0,
        "multikills": {
            "double": row["double_kills"] or 0,
            "triple": row["triple_kills"] or 0,
            "quadra": row["quadra_kills"] or 0,
            "penta": row["penta_kills"] or 0,
        },
    }


class AnalyticsQueryService:
    """
    Team and player analytics for one organization over one match window.

    The organization is always passed in explicitly. `filters.player_id`
    narrows the per-player views (summaries, rankings, best performers) and
    adds an individual breakdown to `performance()`; team-level figures
    always cover the whole roster.
    """

    def __init__(
        self,
        organization_id: UUID | str,
        window: MatchWindow | None = None,
        filters: AnalyticsFilters | None = None,
        *,
        grader: PerformanceGradingEngine | None = None,
    ) -> None:
        self.organization_id = organization_id
        self.window = window or MatchWindow()
        self.filters = filters or AnalyticsFilters()
        self.grader = grader or PerformanceGradingEngine()

    # ─── Base Querysets ────────────────────────────────────────────────────

    def matches(self) -> MatchQuerySet:
        start, end = self.window.bounds()
        qs = Match.objects.for_organization(self.organization_id).in_date_range(start, end)
        if self.filters.opponent:
            qs = qs.with_opponent(self.filters.opponent)
        if self.filters.match_type:
            qs = qs.by_type(self.filters.match_type)
        return qs

    def stats(self) -> PlayerMatchStatQuerySet:
        return PlayerMatchStat.objects.for_organization(self.organization_id).filter(match__in=self.matches())

    def _roster_stats(self) -> PlayerMatchStatQuerySet:
        roster = Player.objects.for_organization(self.organization_id).active()
        qs = self.stats().filter(player__in=roster)
        if self.filters.player_id:
            qs = qs.filter(player_id=self.filters.player_id)
        return qs

    # ─── Comparison ────────────────────────────────────────────────────────

    def player_summaries(self) -> list[dict[str, Any]]:
        """One row per active player, best average performance score first."""
        rows = (
            self._roster_stats()
            .values("player_id", "player__summoner_name", "player__role")
            .annotate(**_metric_aggregates())
            .order_by("-avg_performance_score", "player__summoner_name", "player_id")
        )
        summaries = []
        for row in rows:
            metrics = _format_metrics(row)
            metrics["grade"] = self.grader.grade_performance(
                kda=metrics["kda"],
                cs_per_min=metrics["avg_cs_per_min"],
                damage_share_pct=metrics["avg_damage_share"] * 100,
                vision_per_min=metrics["vision_per_min"],
            )
            summaries.append(
                {
                    "player": {
                        "id": str(row["player_id"]),
                        "summoner_name": row["player__summoner_name"],
                        "role": row["player__role"],
                    },
                    **metrics,
                },
            )
        return summaries

    def team_averages(self) -> dict[str, Any]:
        """Same metrics as `player_summaries`, across every stat in the window; zeros when empty."""
        row = self.stats().aggregate(**_metric_aggregates())
        return _format_metrics(row)

    def role_rankings(self) -> dict[str, list[dict[str, Any]]]:
        rankings: dict[str, list[dict[str, Any]]] = {role: [] for role in PlayerRole.values}
        rows = (
            self._roster_stats()
            .values("player_id", "player__summoner_name", "player__role")
            .annotate(games=Count("id"), avg_performance=Avg("performance_score"))
            .order_by("-avg_performance", "player__summoner_name", "player_id")
        )
        for row in rows:
            role = row["player__role"]
            if role not in rankings:
                continue
            rankings[role].append(
                {
                    "player_id": str(row["player_id"]),
                    "summoner_name": row["player__summoner_name"],
                    "avg_performance": _round(row["avg_performance"], 1),
                    "games": row["games"],
                },
            )
        return rankings

    def team_comparison(self) -> dict[str, Any]:
        log.debug("Building team comparison", organization_id=str(self.organization_id))
        return {
            "players": self.player_summaries(),
            "team_averages": self.team_averages(),
            "role_rankings": self.role_rankings(),
        }

    # ─── Team Performance ──────────────────────────────────────────────────

    def overview(self) -> dict[str, Any]:
        match_row = self.matches().aggregate(
            total=Count("id"),
            wins=Count("id", filter=Q(victory=True)),
            losses=Count("id", filter=Q(victory=False)),
            avg_duration=Avg("game_duration"),
        )
        stat_row = self.stats().aggregate(
            total_kills=Sum("kills", default=0),
            total_deaths=Sum("deaths", default=0),
            total_assists=Sum("assists", default=0),
            avg_kills=Avg("kills"),
            avg_deaths=Avg("deaths"),
            avg_assists=Avg("assists"),
            avg_gold=Avg("gold_earned"),
            avg_damage=Avg("damage_dealt_total"),
            avg_vision=Avg("vision_score"),
        )
        return {
            "total_matches": match_row["total"],
            "wins": match_row["wins"],
            "losses": match_row["losses"],
            "win_rate": _percentage(match_row["wins"], match_row["total"]),
            "avg_game_duration": _round(match_row["avg_duration"], 0),
            "avg_kda": kda_ratio(stat_row["total_kills"], stat_row["total_deaths"], stat_row["total_assists"]),
            "avg_kills_per_game": _round(stat_row["avg_kills"], 1),
            "avg_deaths_per_game": _round(stat_row["avg_deaths"], 1),
            "avg_assists_per_game": _round(stat_row["avg_assists"], 1),
            "avg_gold_per_game": _round(stat_row["avg_gold"], 0),
            "avg_damage_per_game": _round(stat_row["avg_damage"], 0),
            "avg_vision_score": _round(stat_row["avg_vision"], 1),
        }

    def win_rate_trend(self, group_by: TrendPeriod = "week") -> list[dict[str, Any]]:
        """Win rate per calendar day, week (Monday start) or month, oldest first."""
        try:
            truncate = _TRUNCATORS[group_by]
        except KeyError as exc:
            msg = f"Unsupported trend period: {group_by!r}."
            raise ValueError(msg) from exc

        rows = (
            self.matches()
            .annotate(period=truncate("game_start"))
            .values("period")
            .annotate(total=Count("id"), wins=Count("id", filter=Q(victory=True)))
            .order_by("period")
        )
        return [
            {
                "period": row["period"].date().isoformat(),
                "matches": row["total"],
                "wins": row["wins"],
                "losses": row["total"] - row["wins"],
                "win_rate": _percentage(row["wins"], row["total"]),
            }
            for row in rows
        ]

    def performance_by_role(self) -> list[dict[str, Any]]:
        rows = (
            self.stats()
            .values("player__role")
            .annotate(
                games=Count("id"),
                avg_kills=Avg("kills"),
                avg_deaths=Avg("deaths"),
                avg_assists=Avg("assists"),
                avg_gold=Avg("gold_earned"),
                avg_damage=Avg("damage_dealt_total"),
                avg_vision=Avg("vision_score"),
                avg_performance=Avg("performance_score"),
            )
            .order_by("player__role")
        )
        result = [
            {
                "role": row["player__role"],
                "games": row["games"],
                "avg_kda": {
                    "kills": _round(row["avg_kills"], 1),
                    "deaths": _round(row["avg_deaths"], 1),
                    "assists": _round(row["avg_assists"], 1),
                },
                "avg_gold": _round(row["avg_gold"], 0),
                "avg_damage": _round(row["avg_damage"], 0),
                "avg_vision": _round(row["avg_vision"], 1),
                "avg_performance_score": _round(row["avg_performance"], 1),
            }
            for row in rows
        ]
        return sorted(result, key=lambda item: _ROLE_ORDER.get(item["role"], len(_ROLE_ORDER)))

    def best_performers(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Top players by average performance score; `mvp_count` is the number of games won."""
        limit = limit or settings.ANALYTICS_CONFIG.BEST_PERFORMERS_LIMIT
        rows = (
            self._roster_stats()
            .values("player_id", "player__summoner_name", "player__role")
            .annotate(
                games=Count("id"),
                total_kills=Sum("kills", default=0),
                total_deaths=Sum("deaths", default=0),
                total_assists=Sum("assists", default=0),
                avg_performance=Avg("performance_score"),
                mvp_count=Count("id", filter=Q(match__victory=True)),
            )
            .order_by("-avg_performance", "player__summoner_name", "player_id")[:limit]
        )
        return [
            {
                "player": {
                    "id": str(row["player_id"]),
                    "summoner_name": row["player__summoner_name"],
                    "role": row["player__role"],
                },
                "games": row["games"],
                "avg_kda": kda_ratio(row["total_kills"], row["total_deaths"], row["total_assists"]),
                "avg_performance_score": _round(row["avg_performance"], 1),
                "mvp_count": row["mvp_count"],
            }
            for row in rows
        ]

    def match_type_breakdown(self) -> list[dict[str, Any]]:
        rows = (
            self.matches()
            .values("match_type")
            .annotate(total=Count("id"), wins=Count("id", filter=Q(victory=True)))
            .order_by("match_type")
        )
        return [
            {
                "match_type": row["match_type"],
                "total": row["total"],
                "wins": row["wins"],
                "losses": row["total"] - row["wins"],
                "win_rate": _percentage(row["wins"], row["total"]),
            }
            for row in rows
        ]

    def player_stats(self, player_id: UUID | str) -> dict[str, Any] | None:
        """Individual totals for one player in the window, or None when they did not play."""
        row = (
            self.stats()
            .filter(player_id=player_id)
            .aggregate(
                games=Count("id"),
                wins=Count("id", filter=Q(match__victory=True)),
                kills=Sum("kills", default=0),
                deaths=Sum("deaths", default=0),
                assists=Sum("assists", default=0),
                # Per-minute rates only count matches with a known duration.
                cs=Sum("cs", filter=Q(match__game_duration__gt=0), default=0),
                gold=Sum("gold_earned", filter=Q(match__game_duration__gt=0), default=0),
                seconds=Sum("match__game_duration", filter=Q(match__game_duration__gt=0), default=0),
                avg_vision=Avg("vision_score"),
                avg_damage_share=Avg("damage_share"),
            )
        )
        games = row["games"]
        if not games:
            return None
        minutes = row["seconds"] / 60.0
        return {
            "player_id": str(player_id),
            "games_played": games,
            "win_rate": round(row["wins"] / games, 3),
            "kda": kda_ratio(row["kills"], row["deaths"], row["assists"]),
            "cs_per_min": round(row["cs"] / minutes, 1) if minutes else 0.0,
            "gold_per_min": round(row["gold"] / minutes, 0) if minutes else 0.0,
            "vision_score": _round(row["avg_vision"], 1),
            "damage_share": _round(row["avg_damage_share"], 3),
            "avg_kills": round(row["kills"] / games, 1),
            "avg_deaths": round(row["deaths"] / games, 1),
            "avg_assists": round(row["assists"] / games, 1),
        }

    def performance(self, group_by: TrendPeriod = "week") -> dict[str, Any]:
        data: dict[str, Any] = {
            "overview": self.overview(),
            "win_rate_trend": self.win_rate_trend(group_by),
            "performance_by_role": self.performance_by_role(),
            "best_performers": self.best_performers(),
            "match_type_breakdown": self.match_type_breakdown(),
        }
        if self.filters.player_id:
            data["player_stats"] = self.player_stats(self.filters.player_id)
        log.debug("Built performance payload", organization_id=str(self.organization_id))
        return data
