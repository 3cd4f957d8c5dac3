# apps/players/models/player.py
# ================================================================================
"""The Player model: one athlete on an organization's roster."""

from __future__ import annotations

import uuid
from typing import Self

from django.db import models

from apps.core.models import OrganizationScopedQuerySet
from apps.players.conf import PlayerRole, PlayerStatus

__all__ = ("Player", "PlayerQuerySet")


class PlayerQuerySet(OrganizationScopedQuerySet):
    """Custom QuerySet for the Player model."""

    def active(self) -> Self:
        return self.filter(status=PlayerStatus.ACTIVE)


class Player(models.Model):
    """A rostered player belonging to exactly one organization."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        "core.Organization",
        on_delete=models.CASCADE,
        related_name="players",
    )
    summoner_name = models.CharField(max_length=100)
    real_name = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(max_length=16, choices=PlayerRole.choices)
    status = models.CharField(
        max_length=16,
        choices=PlayerStatus.choices,
        default=PlayerStatus.ACTIVE,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PlayerQuerySet.as_manager()

    class Meta:
        db_table = "players"
        ordering = ["summoner_name"]
        verbose_name = "Player"
        verbose_name_plural = "Players"
        indexes = [
            models.Index(fields=["organization", "role"], name="players_org_role_idx"),
            models.Index(fields=["organization", "status"], name="players_org_status_idx"),
        ]

    def __str__(self) -> str:
        return self.summoner_name
