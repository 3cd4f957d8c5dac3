# apps/players/models/champion_pool.py
# ================================================================================
"""Per-player, per-champion running aggregates."""

from __future__ import annotations

from typing import Self

from django.db import models
from django.db.models import Case, ExpressionWrapper, F, FloatField, Value, When

from apps.core.models import OrganizationScopedQuerySet


def _safe_mean(total: float, samples: int) -> float:
    return total / samples if samples else 0.0


class ChampionPoolQuerySet(OrganizationScopedQuerySet):
    """Custom QuerySet for champion pool entries."""

    organization_lookup = "player__organization_id"

    def for_player(self, player_id) -> Self:
        return self.filter(player_id=player_id)

    def with_average_kda(self) -> Self:
        """Annotates `avg_kda` so pools can be ordered by it in SQL."""
        return self.annotate(
            avg_kda=Case(
                When(games_played=0, then=Value(0.0)),
                default=ExpressionWrapper(
                    F("kda_total") * 1.0 / F("games_played"),
                    output_field=FloatField(),
                ),
                output_field=FloatField(),
            ),
        )

    def main_champions(self) -> Self:
        """Most-played first, ties broken by average KDA."""
        return self.with_average_kda().order_by("-games_played", "-avg_kda")


class ChampionPoolEntry(models.Model):
    """
    Running aggregates for one player on one champion.

    The pool stores sums and sample counts instead of averages; every average
    is a read-only mean derived from them, so a new match is folded in with
    O(1) work. Rows are only ever accumulated, never deleted.
    """

    player = models.ForeignKey(
        "players.Player",
        on_delete=models.CASCADE,
        related_name="champion_pools",
    )
    champion = models.CharField(max_length=64, db_index=True)

    games_played = models.PositiveIntegerField(default=0)
    games_won = models.PositiveIntegerField(default=0)

    kda_total = models.FloatField(default=0.0)
    cs_per_min_total = models.FloatField(default=0.0)
    cs_per_min_samples = models.PositiveIntegerField(default=0)
    damage_share_total = models.FloatField(default=0.0)
    damage_share_samples = models.PositiveIntegerField(default=0)

    last_played = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ChampionPoolQuerySet.as_manager()

    class Meta:
        db_table = "champion_pools"
        ordering = ["-games_played"]
        verbose_name = "Champion Pool Entry"
        verbose_name_plural = "Champion Pool Entries"
        constraints = [
            models.UniqueConstraint(fields=["player", "champion"], name="champion_pool_player_champion_uniq"),
        ]

    def __str__(self) -> str:
        return f"{self.player_id} on {self.champion} ({self.games_played} games)"

    @property
    def average_kda(self) -> float:
        return round(_safe_mean(self.kda_total, self.games_played), 2)

    @property
    def average_cs_per_min(self) -> float:
        return round(_safe_mean(self.cs_per_min_total, self.cs_per_min_samples), 2)

    @property
    def average_damage_share(self) -> float:
        return round(_safe_mean(self.damage_share_total, self.damage_share_samples), 2)

    @property
    def win_rate(self) -> float:
        """Fraction of games won, 0.0–1.0."""
        return _safe_mean(self.games_won, self.games_played)
