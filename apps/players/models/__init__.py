# apps/players/models/__init__.py
# ================================================================================
"""
Aggregate re-exports for the players app models.

This file allows for convenient imports like `from apps.players.models import Player`,
while the actual model classes are organized into separate, focused modules.
"""

from __future__ import annotations

from .champion_pool import ChampionPoolEntry, ChampionPoolQuerySet
from .player import Player, PlayerQuerySet

__all__ = [
    "ChampionPoolEntry",
    "ChampionPoolQuerySet",
    "Player",
    "PlayerQuerySet",
]
