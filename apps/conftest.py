# apps/conftest.py
"""Shared fixtures: an organization, its five-player roster and match factories."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest
from django.utils import timezone

from apps.core.models import Organization
from apps.matches.models import Match, PlayerMatchStat
from apps.players.conf import PlayerRole
from apps.players.models import Player


@pytest.fixture
def organization(db) -> Organization:
    return Organization.objects.create(name="Pain Gaming", slug="pain-gaming", region="BR")


@pytest.fixture
def other_organization(db) -> Organization:
    return Organization.objects.create(name="LOUD", slug="loud", region="BR")


@pytest.fixture
def roster(organization) -> dict[str, Player]:
    """One active player per role, keyed by role."""
    names = {
        PlayerRole.TOP: "Wizer",
        PlayerRole.JUNGLE: "CarioK",
        PlayerRole.MID: "dyNquedo",
        PlayerRole.ADC: "TitaN",
        PlayerRole.SUPPORT: "Kuri",
    }
    return {
        role.value: Player.objects.create(organization=organization, summoner_name=name, role=role)
        for role, name in names.items()
    }


@pytest.fixture
def make_match(organization):
    def _make(
        *,
        org: Organization | None = None,
        days_ago: float = 1,
        duration: int | None = 1800,
        victory: bool | None = True,
        **fields: Any,
    ) -> Match:
        start = timezone.now() - timedelta(days=days_ago)
        fields.setdefault("match_type", "official")
        fields.setdefault("opponent_name", "LOUD")
        return Match.objects.create(
            organization=org or organization,
            game_start=start,
            game_end=start + timedelta(seconds=duration) if duration else None,
            game_duration=duration,
            victory=victory,
            **fields,
        )

    return _make


@pytest.fixture
def make_stat():
    def _make(match: Match, player: Player, champion: str = "Ahri", **counters: Any) -> PlayerMatchStat:
        counters.setdefault("role", player.role)
        stat = PlayerMatchStat(match=match, player=player, champion=champion, **counters)
        stat.save()
        return stat

    return _make
