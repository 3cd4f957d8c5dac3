# apps/players/services/player_analytics.py
# ================================================================================
"""
Per-player analytics: KDA trend, laning, vision, champion pool and overview.

Each function takes the organization explicitly and only ever reads rows
owned by it, so a player id from another organization is simply not found.
The functions are synchronous; views run them through `sync_to_async`.
"""

from __future__ import annotations

from statistics import fmean
from typing import TYPE_CHECKING, Any, Final

import structlog
from django.conf import settings
from django.db.models import Avg, Count, Sum
from django.http import Http404

from apps.analytics.services.grading import PerformanceGradingEngine
from apps.matches.models import Match, PlayerMatchStat
from apps.matches.services.stat_aggregator import kda_ratio
from apps.players.conf import (
    FALLBACK_MATCH_MINUTES,
    HIGHLY_PLAYED_MIN_GAMES,
    RECENT_FORM_WINDOWS,
    TOP_CHAMPIONS_LIMIT,
)
from apps.players.models import ChampionPoolEntry, Player
from apps.players.serializers import PlayerSerializer

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

log: Final = structlog.get_logger(__name__).bind(component="PlayerAnalytics")

_grader = PerformanceGradingEngine()


class PlayerNotFound(Http404):
    pass


class ChampionNotPlayed(Http404):
    pass


# ─── Helpers ───────────────────────────────────────────────────────────────────


def _get_player(organization_id: UUID | str, player_id: UUID | str) -> Player:
    try:
        return Player.objects.for_organization(organization_id).get(pk=player_id)
    except Player.DoesNotExist as exc:
        msg = f"Player {player_id} not found."
        raise PlayerNotFound(msg) from exc


def _recent_stats(organization_id: UUID | str, player: Player, limit: int) -> list[PlayerMatchStat]:
    qs = PlayerMatchStat.objects.for_organization(organization_id).filter(player=player).latest_first()
    return list(qs[:limit])


def _mean(values: Iterable[float | None], ndigits: int) -> float:
    present = [value for value in values if value is not None]
    return round(fmean(present), ndigits) if present else 0.0


def _summed_kda(stats: Sequence[PlayerMatchStat]) -> float:
    """KDA over summed counters, deaths floored to 1; 0 for no stats."""
    if not stats:
        return 0.0
    return kda_ratio(
        sum(stat.kills for stat in stats),
        sum(stat.deaths for stat in stats),
        sum(stat.assists for stat in stats),
    )


def _date(stat: PlayerMatchStat) -> str | None:
    start = stat.match.game_start
    return start.isoformat() if start else None


# ─── KDA Trend ─────────────────────────────────────────────────────────────────


def kda_trend(organization_id: UUID | str, player_id: UUID | str) -> dict[str, Any]:
    player = _get_player(organization_id, player_id)
    stats = _recent_stats(organization_id, player, settings.ANALYTICS_CONFIG.KDA_TREND_LIMIT)
    return {
        "player": PlayerSerializer.serialize_player(player),
        "kda_by_match": [
            {
                "match_id": str(stat.match_id),
                "date": _date(stat),
                "kills": stat.kills,
                "deaths": stat.deaths,
                "assists": stat.assists,
                "kda": stat.kda_ratio,
                "champion": stat.champion,
                "victory": stat.match.victory,
            }
            for stat in stats
        ],
        "averages": {
            "last_10_games": _summed_kda(stats[:10]),
            "last_20_games": _summed_kda(stats[:20]),
            "overall": _summed_kda(stats),
        },
    }


# ─── Laning ────────────────────────────────────────────────────────────────────


def laning(organization_id: UUID | str, player_id: UUID | str) -> dict[str, Any]:
    player = _get_player(organization_id, player_id)
    stats = _recent_stats(organization_id, player, settings.ANALYTICS_CONFIG.RECENT_STATS_LIMIT)

    cs_values = [stat.cs for stat in stats]
    gold_values = [stat.gold_earned for stat in stats if stat.gold_earned is not None]
    timed = [stat for stat in stats if stat.match.game_duration]
    timed_minutes = sum(stat.match.game_duration for stat in timed) / 60.0

    rows = []
    for stat in stats:
        duration = stat.match.game_duration
        minutes = duration / 60.0 if duration else FALLBACK_MATCH_MINUTES
        rows.append(
            {
                "match_id": str(stat.match_id),
                "date": _date(stat),
                "cs_total": stat.cs,
                "cs_per_min": round(stat.cs / minutes, 1),
                "gold": stat.gold_earned,
                "champion": stat.champion,
                "victory": stat.match.victory,
            },
        )

    return {
        "player": PlayerSerializer.serialize_player(player),
        "cs_performance": {
            "avg_cs_total": _mean(cs_values, 1),
            "avg_cs_per_min": round(sum(stat.cs for stat in timed) / timed_minutes, 1) if timed_minutes else 0.0,
            "best_cs_game": max(cs_values, default=0),
            "worst_cs_game": min(cs_values, default=0),
        },
        "gold_performance": {
            "avg_gold": _mean(gold_values, 0),
            "best_gold_game": max(gold_values, default=0),
            "worst_gold_game": min(gold_values, default=0),
        },
        "cs_by_match": rows,
    }


# ─── Vision ────────────────────────────────────────────────────────────────────


def _vision_percentile(player_avg: float | None, teammate_avgs: list[float]) -> int:
    """Rank of the player's average among same-role teammates, as 1–100."""
    if player_avg is None or not teammate_avgs:
        return 0
    ranked = sorted([*teammate_avgs, player_avg])
    rank = ranked.index(player_avg) + 1
    return round(rank / len(ranked) * 100)


def _role_comparison(organization_id: UUID | str, player: Player) -> dict[str, Any]:
    org_stats = PlayerMatchStat.objects.for_organization(organization_id)
    teammates = org_stats.filter(player__role=player.role).exclude(player=player)
    player_avg = org_stats.filter(player=player).aggregate(avg=Avg("vision_score"))["avg"]
    role_avg = teammates.aggregate(avg=Avg("vision_score"))["avg"]
    teammate_avgs = [
        row["avg"]
        for row in teammates.values("player_id").annotate(avg=Avg("vision_score")).order_by()
        if row["avg"] is not None
    ]
    return {
        "player_avg": round(player_avg, 1) if player_avg is not None else 0.0,
        "role_avg": round(role_avg, 1) if role_avg is not None else 0.0,
        "percentile": _vision_percentile(player_avg, teammate_avgs),
    }


def vision(organization_id: UUID | str, player_id: UUID | str) -> dict[str, Any]:
    player = _get_player(organization_id, player_id)
    stats = _recent_stats(organization_id, player, settings.ANALYTICS_CONFIG.RECENT_STATS_LIMIT)

    timed = [stat for stat in stats if stat.match.game_duration and stat.vision_score is not None]
    timed_minutes = sum(stat.match.game_duration for stat in timed) / 60.0
    trend = sorted(
        (
            {
                "date": stat.match.game_start.date().isoformat(),
                "vision_score": stat.vision_score or 0,
                "wards_placed": stat.wards_placed or 0,
                "wards_destroyed": stat.wards_destroyed or 0,
                "champion": stat.champion,
                "victory": stat.match.victory,
            }
            for stat in stats
            if stat.match.game_start
        ),
        key=lambda row: row["date"],
    )

    return {
        "player": PlayerSerializer.serialize_player(player),
        "avg_vision_score": _mean((stat.vision_score for stat in stats), 1),
        "avg_wards_placed": _mean((stat.wards_placed for stat in stats), 1),
        "avg_wards_destroyed": _mean((stat.wards_destroyed for stat in stats), 1),
        "avg_control_wards": _mean((stat.control_wards_purchased for stat in stats), 1),
        "best_vision_game": max((stat.vision_score or 0 for stat in stats), default=0),
        "total_wards_placed": sum(stat.wards_placed or 0 for stat in stats),
        "total_wards_destroyed": sum(stat.wards_destroyed or 0 for stat in stats),
        "vision_per_min": (
            round(sum(stat.vision_score for stat in timed) / timed_minutes, 2) if timed_minutes else 0.0
        ),
        "role_comparison": _role_comparison(organization_id, player),
        "vision_trend": trend,
    }


# ─── Champions ─────────────────────────────────────────────────────────────────


def _graded_pool(organization_id: UUID | str, player: Player) -> list[dict[str, Any]]:
    entries = ChampionPoolEntry.objects.for_organization(organization_id).for_player(player.pk).main_champions()
    return [
        PlayerSerializer.serialize_pool_entry(
            entry,
            mastery_grade=_grader.mastery_grade(entry.win_rate, entry.average_kda),
        )
        for entry in entries
    ]


def champion_stats(organization_id: UUID | str, player_id: UUID | str) -> dict[str, Any]:
    player = _get_player(organization_id, player_id)
    pool = _graded_pool(organization_id, player)
    games = [entry["games_played"] for entry in pool]
    return {
        "player": PlayerSerializer.serialize_player(player),
        "champion_stats": pool,
        "top_champions": pool[:TOP_CHAMPIONS_LIMIT],
        "champion_diversity": {
            "total_champions": len(pool),
            "highly_played": sum(1 for count in games if count >= HIGHLY_PLAYED_MIN_GAMES),
            "average_games": _mean(games, 1),
        },
    }


def champion_details(
    organization_id: UUID | str,
    player_id: UUID | str,
    champion: str,
    *,
    limit: int | None = None,
) -> dict[str, Any]:
    """Aggregates and the latest matches for one champion, matched case-insensitively."""
    player = _get_player(organization_id, player_id)
    limit = limit or settings.ANALYTICS_CONFIG.CHAMPION_DETAIL_LIMIT
    qs = (
        PlayerMatchStat.objects.for_organization(organization_id)
        .filter(player=player, champion__iexact=champion)
        .latest_first()
    )
    stats = list(qs[:limit])
    if not stats:
        msg = f"No matches found for champion {champion}."
        raise ChampionNotPlayed(msg)

    games = len(stats)
    wins = sum(1 for stat in stats if stat.match.victory)
    return {
        "player": PlayerSerializer.serialize_player(player),
        "champion": stats[0].champion,
        "aggregate_stats": {
            "total_games": games,
            "wins": wins,
            "losses": games - wins,
            "win_rate": round(wins / games, 3),
            "avg_kda": _summed_kda(stats),
            "avg_kills": round(sum(stat.kills for stat in stats) / games, 1),
            "avg_deaths": round(sum(stat.deaths for stat in stats) / games, 1),
            "avg_assists": round(sum(stat.assists for stat in stats) / games, 1),
            "avg_cs_per_min": _mean((stat.cs_per_min for stat in stats), 1),
            "avg_damage_dealt": _mean((stat.damage_dealt_total for stat in stats), 0),
            "avg_damage_taken": _mean((stat.damage_taken for stat in stats), 0),
            "avg_gold_per_min": _mean((stat.gold_per_min for stat in stats), 0),
            "avg_vision_score": _mean((stat.vision_score for stat in stats), 1),
            "grade": _grader.grade_performance(
                kda=_summed_kda(stats),
                cs_per_min=_mean((stat.cs_per_min for stat in stats), 2),
                damage_share_pct=_mean((stat.damage_share for stat in stats), 3) * 100,
                vision_per_min=_mean((stat.vision_per_min for stat in stats), 2),
            ),
        },
        "matches": [PlayerSerializer.serialize_champion_match(stat) for stat in stats],
    }


# ─── Overview ──────────────────────────────────────────────────────────────────


def _recent_form(matches: Sequence[Match]) -> list[str]:
    return ["W" if match.victory else "L" for match in matches]


def player_overview(organization_id: UUID | str, player_id: UUID | str) -> dict[str, Any]:
    """Overall record, recent form, main champions and per-role averages."""
    player = _get_player(organization_id, player_id)
    matches = (
        Match.objects.for_organization(organization_id)
        .filter(player_stats__player=player)
        .order_by("-game_start", "-created_at")
    )
    stats = PlayerMatchStat.objects.for_organization(organization_id).filter(player=player)

    totals = stats.aggregate(
        games=Count("id"),
        kills=Sum("kills", default=0),
        deaths=Sum("deaths", default=0),
        assists=Sum("assists", default=0),
        avg_cs=Avg("cs"),
        avg_vision=Avg("vision_score"),
        avg_damage=Avg("damage_dealt_champions"),
    )
    total_matches = matches.count()
    wins = matches.victories().count()
    recent = list(matches[: max(RECENT_FORM_WINDOWS)])

    by_role = (
        stats.values("role")
        .annotate(
            games=Count("id"),
            avg_kills=Avg("kills"),
            avg_deaths=Avg("deaths"),
            avg_assists=Avg("assists"),
            avg_performance=Avg("performance_score"),
        )
        .order_by("-games", "role")
    )

    log.debug("Built player overview", player_id=str(player.pk), matches=total_matches)
    return {
        "player": PlayerSerializer.serialize_player(player),
        "overall": {
            "total_matches": total_matches,
            "wins": wins,
            "losses": matches.defeats().count(),
            "win_rate": round(wins / total_matches * 100, 1) if total_matches else 0.0,
            "avg_kda": (
                kda_ratio(totals["kills"], totals["deaths"], totals["assists"]) if totals["games"] else 0.0
            ),
            "avg_cs": round(totals["avg_cs"], 1) if totals["avg_cs"] is not None else 0.0,
            "avg_vision_score": round(totals["avg_vision"], 1) if totals["avg_vision"] is not None else 0.0,
            "avg_damage": round(totals["avg_damage"]) if totals["avg_damage"] is not None else 0,
        },
        "recent_form": {f"last_{size}_matches": _recent_form(recent[:size]) for size in RECENT_FORM_WINDOWS},
        "champion_pool": _graded_pool(organization_id, player)[:TOP_CHAMPIONS_LIMIT],
        "performance_by_role": [
            {
                "role": row["role"],
                "games": row["games"],
                "avg_kda": {
                    "kills": round(row["avg_kills"] or 0, 1),
                    "deaths": round(row["avg_deaths"] or 0, 1),
                    "assists": round(row["avg_assists"] or 0, 1),
                },
                "avg_performance": round(row["avg_performance"] or 0, 1),
            }
            for row in by_role
        ],
    }
