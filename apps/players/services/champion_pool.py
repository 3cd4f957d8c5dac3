# apps/players/services/champion_pool.py
# ================================================================================
from __future__ import annotations

from typing import TYPE_CHECKING, Final

import structlog
from django.db import transaction
from django.db.models import Count, ExpressionWrapper, F, FloatField, IntegerField, Max, Q, Sum
from django.db.models.functions import Coalesce, Greatest
from django.utils import timezone

from apps.matches.models import PlayerMatchStat
from apps.players.models import ChampionPoolEntry

if TYPE_CHECKING:
    from uuid import UUID

log: Final = structlog.get_logger(__name__).bind(component="ChampionPoolTracker")


class ChampionPoolTracker:
    """
    Maintains each player's per-champion running aggregates.

    `record` folds one newly created stat into its pool entry with O(1) work.
    The entry row is locked for the rest of the enclosing transaction, so
    concurrent imports for the same (player, champion) pair apply one after
    the other. `rebuild` recomputes an entry from the full match history and
    is the repair path if an entry ever drifts.
    """

    def record(self, stat: PlayerMatchStat) -> ChampionPoolEntry:
        match = stat.match
        with transaction.atomic():
            ChampionPoolEntry.objects.get_or_create(player_id=stat.player_id, champion=stat.champion)
            entry = ChampionPoolEntry.objects.select_for_update().get(
                player_id=stat.player_id,
                champion=stat.champion,
            )

            entry.games_played += 1
            if match.victory:
                entry.games_won += 1

            entry.kda_total += stat.kda_ratio
            if stat.cs_per_min is not None:
                entry.cs_per_min_total += stat.cs_per_min
                entry.cs_per_min_samples += 1
            if stat.damage_share is not None:
                entry.damage_share_total += stat.damage_share
                entry.damage_share_samples += 1

            played_at = match.game_start or timezone.now()
            if entry.last_played is None or played_at > entry.last_played:
                entry.last_played = played_at
            entry.save()

        log.debug(
            "Champion pool updated",
            player_id=str(stat.player_id),
            champion=stat.champion,
            games=entry.games_played,
        )
        return entry

    def rebuild(self, player_id: UUID | str, champion: str) -> ChampionPoolEntry:
        """
        Recomputes one pool entry from every stat the player has on the champion.

        The entry is locked before history is read, so a concurrent `record`
        either lands before the reads or waits for the rebuild to commit.
        """
        kda_expr = ExpressionWrapper(
            (F("kills") + F("assists")) * 1.0 / Greatest(F("deaths"), 1, output_field=IntegerField()),
            output_field=FloatField(),
        )
        stats = PlayerMatchStat.objects.filter(player_id=player_id, champion=champion)

        with transaction.atomic():
            entry, _ = ChampionPoolEntry.objects.select_for_update().get_or_create(
                player_id=player_id,
                champion=champion,
            )
            row = stats.aggregate(
                games=Count("id"),
                wins=Count("id", filter=Q(match__victory=True)),
                cs_total=Coalesce(Sum("cs_per_min"), 0.0),
                cs_samples=Count("cs_per_min"),
                dmg_total=Coalesce(Sum("damage_share"), 0.0),
                dmg_samples=Count("damage_share"),
                last_played=Max("match__game_start"),
            )
            # Per-stat KDA is rounded before averaging, same as `record`.
            kda_total = sum(round(value, 2) for value in stats.annotate(kda=kda_expr).values_list("kda", flat=True))

            entry.games_played = row["games"]
            entry.games_won = row["wins"]
            entry.kda_total = kda_total
            entry.cs_per_min_total = row["cs_total"]
            entry.cs_per_min_samples = row["cs_samples"]
            entry.damage_share_total = row["dmg_total"]
            entry.damage_share_samples = row["dmg_samples"]
            entry.last_played = row["last_played"] or entry.last_played
            entry.save()
        return entry

    def rebuild_all(self, organization_id: UUID | str) -> int:
        """Rebuilds every pool entry for an organization's players; returns how many."""
        pairs = (
            PlayerMatchStat.objects.for_organization(organization_id)
            .values_list("player_id", "champion")
            .distinct()
            .order_by()
        )
        count = 0
        for player_id, champion in pairs.iterator():
            self.rebuild(player_id, champion)
            count += 1
        log.info("Champion pools rebuilt", organization_id=str(organization_id), entries=count)
        return count
