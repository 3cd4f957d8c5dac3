# apps/players/serializers.py
# ================================================================================
"""
High-performance, read-only serializers for Player and related models.
This approach avoids reflection overhead for faster API responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from apps.matches.models import PlayerMatchStat

    from .models import ChampionPoolEntry, Player


class PlayerSerializer:
    """A collection of static methods for serializing player-related models."""

    @staticmethod
    def serialize_player(player: Player) -> dict[str, Any]:
        return {
            "id": str(player.id),
            "summoner_name": player.summoner_name,
            "real_name": player.real_name,
            "role": player.role,
            "status": player.status,
        }

    @staticmethod
    def serialize_pool_entry(entry: ChampionPoolEntry, *, mastery_grade: str | None = None) -> dict[str, Any]:
        """Serializes a champion pool entry; averages come from the running sums."""
        data = {
            "champion": entry.champion,
            "games_played": entry.games_played,
            "games_won": entry.games_won,
            "win_rate": round(entry.win_rate, 3),
            "average_kda": entry.average_kda,
            "average_cs_per_min": entry.average_cs_per_min,
            "average_damage_share": entry.average_damage_share,
            "last_played": entry.last_played.isoformat() if entry.last_played else None,
        }
        if mastery_grade is not None:
            data["mastery_grade"] = mastery_grade
        return data

    @staticmethod
    def serialize_champion_match(stat: PlayerMatchStat) -> dict[str, Any]:
        """One row of a champion detail's match list."""
        match = stat.match
        return {
            "match_id": str(match.id),
            "riot_match_id": match.riot_match_id,
            "date": match.game_start.isoformat() if match.game_start else None,
            "victory": bool(match.victory),
            "game_duration": match.game_duration or 0,
            "role": stat.role,
            "kda": stat.kda_display,
            "kda_ratio": stat.kda_ratio,
            "kills": stat.kills,
            "deaths": stat.deaths,
            "assists": stat.assists,
            "cs": stat.cs,
            "cs_per_min": round(stat.cs_per_min or 0, 1),
            "gold_earned": stat.gold_earned or 0,
            "gold_per_min": round(stat.gold_per_min or 0),
            "damage_dealt": stat.damage_dealt_total or 0,
            "damage_taken": stat.damage_taken or 0,
            "damage_share": stat.damage_share or 0,
            "kill_participation": stat.kill_participation or 0,
            "vision_score": stat.vision_score or 0,
            "wards_placed": stat.wards_placed or 0,
            "wards_destroyed": stat.wards_destroyed or 0,
            "control_wards": stat.control_wards_purchased or 0,
            "performance_score": stat.performance_score,
            "multikills": {
                "double": stat.double_kills,
                "triple": stat.triple_kills,
                "quadra": stat.quadra_kills,
                "penta": stat.penta_kills,
            },
        }
