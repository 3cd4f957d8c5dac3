# apps/matches/serializers.py
# ================================================================================
"""
High-performance, read-only serializers for Match and PlayerMatchStat.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from apps.players.models import Player

    from .models import Match, PlayerMatchStat


class MatchSerializer:
    """A collection of static methods for serializing match-related models."""

    @staticmethod
    def serialize_list_item(match: Match) -> dict[str, Any]:
        return {
            "id": str(match.id),
            "match_type": match.match_type,
            "riot_match_id": match.riot_match_id,
            "game_start": match.game_start.isoformat() if match.game_start else None,
            "game_duration": match.game_duration,
            "duration_formatted": match.duration_formatted,
            "victory": match.victory,
            "result": match.result_text,
            "our_side": match.our_side,
            "opponent_name": match.opponent_name,
            "score": match.score_display,
        }

    @staticmethod
    def serialize_detail(
        match: Match,
        stats: list[PlayerMatchStat],
        *,
        kda_summary: dict[str, Any],
        mvp: Player | None,
    ) -> dict[str, Any]:
        data = MatchSerializer.serialize_list_item(match)
        data.update(
            {
                "game_end": match.game_end.isoformat() if match.game_end else None,
                "our_score": match.our_score,
                "opponent_score": match.opponent_score,
                "team_kda": kda_summary,
                "mvp": {"id": str(mvp.id), "summoner_name": mvp.summoner_name} if mvp else None,
                "player_stats": [MatchSerializer.serialize_stat(stat) for stat in stats],
            },
        )
        return data

    @staticmethod
    def serialize_stat(stat: PlayerMatchStat) -> dict[str, Any]:
        """Serializes one scoreboard line with its derived fields."""
        return {
            "player_id": str(stat.player_id),
            "summoner_name": stat.player.summoner_name,
            "champion": stat.champion,
            "role": stat.role,
            "kills": stat.kills,
            "deaths": stat.deaths,
            "assists": stat.assists,
            "kda": stat.kda_display,
            "kda_ratio": stat.kda_ratio,
            "cs": stat.cs,
            "cs_per_min": stat.cs_per_min,
            "gold_earned": stat.gold_earned,
            "gold_per_min": stat.gold_per_min,
            "damage_dealt_champions": stat.damage_dealt_champions,
            "damage_share_percentage": stat.damage_share_percentage,
            "kill_participation_percentage": stat.kill_participation_percentage,
            "vision_score": stat.vision_score,
            "multikill_count": stat.multikill_count,
            "performance_score": stat.performance_score,
        }
