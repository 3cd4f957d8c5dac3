# apps/matches/models/match.py
# ================================================================================
"""The core Match model: one completed game played by an organization."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Self

from django.db import models
from django.db.models import Q, Sum

from apps.core.models import OrganizationScopedQuerySet
from apps.matches.conf import MatchType, Side

if TYPE_CHECKING:
    from apps.players.models import Player


class MatchQuerySet(OrganizationScopedQuerySet):
    """Custom queryset for the Match model with chainable filter methods."""

    def victories(self) -> Self:
        return self.filter(victory=True)

    def defeats(self) -> Self:
        return self.filter(victory=False)

    def by_type(self, match_type: str) -> Self:
        return self.filter(match_type=match_type)

    def in_date_range(self, start: datetime, end: datetime) -> Self:
        return self.filter(game_start__gte=start, game_start__lte=end)

    def with_opponent(self, opponent: str) -> Self:
        return self.filter(opponent_name__icontains=opponent)


class Match(models.Model):
    """
    A single game from the organization's point of view. Immutable once
    imported, apart from administrative edits.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        "core.Organization",
        on_delete=models.CASCADE,
        related_name="matches",
    )
    match_type = models.CharField(max_length=16, choices=MatchType.choices, db_index=True)
    riot_match_id = models.CharField(max_length=64, unique=True, null=True, blank=True)

    game_start = models.DateTimeField(null=True, blank=True, db_index=True)
    game_end = models.DateTimeField(null=True, blank=True)
    game_duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Match duration in seconds.",
    )

    victory = models.BooleanField(null=True, blank=True, db_index=True)
    our_side = models.CharField(max_length=8, choices=Side.choices, blank=True, default="")
    opponent_name = models.CharField(max_length=255, blank=True, default="")
    our_score = models.PositiveSmallIntegerField(null=True, blank=True)
    opponent_score = models.PositiveSmallIntegerField(null=True, blank=True)

    # --- Timestamps ---
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MatchQuerySet.as_manager()

    class Meta:
        db_table = "matches"
        ordering = ["-game_start"]
        verbose_name = "Match"
        verbose_name_plural = "Matches"
        indexes = [
            models.Index(fields=["organization", "game_start"], name="matches_org_game_start_idx"),
            models.Index(fields=["organization", "victory"], name="matches_org_victory_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                name="game_duration_positive",
                condition=Q(game_duration__isnull=True) | Q(game_duration__gt=0),
            ),
        ]

    def __str__(self) -> str:
        return f"Match {self.id} vs {self.opponent_name or 'unknown'}"

    @property
    def result_text(self) -> str:
        if self.victory is None:
            return "Unknown"
        return "Victory" if self.victory else "Defeat"

    @property
    def duration_formatted(self) -> str:
        if not self.game_duration:
            return "Unknown"
        minutes, seconds = divmod(self.game_duration, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def score_display(self) -> str:
        if self.our_score is None or self.opponent_score is None:
            return "Unknown"
        return f"{self.our_score} - {self.opponent_score}"

    def kda_summary(self) -> dict[str, Any]:
        """Team K/D/A for this match from a single aggregate query."""
        row = self.player_stats.aggregate(k=Sum("kills"), d=Sum("deaths"), a=Sum("assists"))
        kills, deaths, assists = row["k"] or 0, row["d"] or 0, row["a"] or 0
        return {
            "kills": kills,
            "deaths": deaths,
            "assists": assists,
            "kda": round((kills + assists) / max(deaths, 1), 2),
        }

    def mvp_player(self) -> Player | None:
        """The player with the best performance score, ties broken by kills then assists."""
        stat = (
            self.player_stats.select_related("player")
            .order_by("-performance_score", "-kills", "-assists")
            .first()
        )
        return stat.player if stat else None
