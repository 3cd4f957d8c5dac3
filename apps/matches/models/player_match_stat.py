# apps/matches/models/player_match_stat.py
# ================================================================================
"""
Scoreboard statistics for a single player within a single match.
"""

from __future__ import annotations

from typing import Any, Self

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction

from apps.core.models import OrganizationScopedQuerySet
from apps.matches.services import stat_aggregator


class PlayerMatchStatQuerySet(OrganizationScopedQuerySet):
    """Custom queryset for per-player match rows."""

    organization_lookup = "match__organization_id"

    def latest_first(self) -> Self:
        return self.select_related("match").order_by("-match__game_start", "-created_at")


class PlayerMatchStat(models.Model):
    """
    One player's performance in one match. Raw counters come from import or
    manual entry; `cs_per_min`, `gold_per_min` and `performance_score` are
    recomputed on every save. Creating a row folds it into the player's
    champion pool inside the same transaction.
    """

    id = models.BigAutoField(primary_key=True)

    # --- Foreign Keys ---
    match = models.ForeignKey(
        "matches.Match",
        on_delete=models.CASCADE,
        related_name="player_stats",
    )
    player = models.ForeignKey(
        "players.Player",
        on_delete=models.CASCADE,
        related_name="match_stats",
    )
    champion = models.CharField(max_length=64, db_index=True)
    role = models.CharField(max_length=16, blank=True, default="")

    # --- Scoreboard Numbers ---
    kills = models.PositiveSmallIntegerField(default=0)
    deaths = models.PositiveSmallIntegerField(default=0)
    assists = models.PositiveSmallIntegerField(default=0)
    double_kills = models.PositiveSmallIntegerField(default=0)
    triple_kills = models.PositiveSmallIntegerField(default=0)
    quadra_kills = models.PositiveSmallIntegerField(default=0)
    penta_kills = models.PositiveSmallIntegerField(default=0)

    cs = models.PositiveIntegerField(default=0)
    gold_earned = models.PositiveIntegerField(null=True, blank=True)
    damage_dealt_champions = models.PositiveIntegerField(null=True, blank=True)
    damage_dealt_total = models.PositiveIntegerField(null=True, blank=True)
    damage_taken = models.PositiveIntegerField(null=True, blank=True)
    damage_share = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0.0), MaxValueValidator(1.0)],
        help_text="Fraction of the team's champion damage, 0.0–1.0.",
    )
    kill_participation = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0.0), MaxValueValidator(1.0)],
    )

    # --- Vision ---
    vision_score = models.PositiveIntegerField(null=True, blank=True)
    wards_placed = models.PositiveSmallIntegerField(null=True, blank=True)
    wards_destroyed = models.PositiveSmallIntegerField(null=True, blank=True)
    control_wards_purchased = models.PositiveSmallIntegerField(null=True, blank=True)

    # --- Derived on save ---
    cs_per_min = models.FloatField(null=True, blank=True)
    gold_per_min = models.FloatField(null=True, blank=True)
    performance_score = models.FloatField(default=0.0, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PlayerMatchStatQuerySet.as_manager()

    class Meta:
        db_table = "player_match_stats"
        ordering = ["match", "player"]
        indexes = [
            models.Index(fields=["player", "champion"], name="pms_player_champion_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["player", "match"], name="pms_player_match_uniq"),
        ]

    def __str__(self) -> str:
        return f"{self.player_id} on {self.champion} (Match {self.match_id})"

    # ------------------------------------------------------- derived fields --
    @property
    def kda_ratio(self) -> float:
        return stat_aggregator.kda_ratio(self.kills, self.deaths, self.assists)

    @property
    def kda_display(self) -> str:
        return f"{self.kills}/{self.deaths}/{self.assists}"

    @property
    def multikill_count(self) -> int:
        return self.double_kills + self.triple_kills + self.quadra_kills + self.penta_kills

    @property
    def damage_share_percentage(self) -> float:
        return round((self.damage_share or 0) * 100, 1)

    @property
    def kill_participation_percentage(self) -> float:
        return round((self.kill_participation or 0) * 100, 1)

    @property
    def vision_per_min(self) -> float:
        duration = self.match.game_duration if self.match_id else None
        if not duration:
            return 0.0
        return (self.vision_score or 0) / (duration / 60.0)

    def calculate_derived_stats(self) -> None:
        if self.match_id is None:
            self.performance_score = 0.0
            return
        match = self.match
        derived = stat_aggregator.derive(
            kills=self.kills,
            deaths=self.deaths,
            assists=self.assists,
            cs=self.cs,
            gold_earned=self.gold_earned,
            damage_share=self.damage_share,
            vision_score=self.vision_score,
            game_duration=match.game_duration,
            victory=match.victory,
        )
        if derived.cs_per_min is not None:
            self.cs_per_min = derived.cs_per_min
        if derived.gold_per_min is not None:
            self.gold_per_min = derived.gold_per_min
        self.performance_score = derived.performance_score

    def save(self, *args: Any, **kwargs: Any) -> None:
        # Local import: the tracker imports this module's model.
        from apps.players.services.champion_pool import ChampionPoolTracker

        self.calculate_derived_stats()
        is_new = self._state.adding
        with transaction.atomic():
            super().save(*args, **kwargs)
            if is_new:
                ChampionPoolTracker().record(self)
