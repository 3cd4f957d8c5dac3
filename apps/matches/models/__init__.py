# apps/matches/models/__init__.py
# ================================================================================
"""
Match-data models.

`Match` holds one game from the organization's point of view and
`PlayerMatchStat` one player's scoreboard row in it. This `__init__.py`
re-exports both for easy access from other apps.
"""

from __future__ import annotations

from .match import Match, MatchQuerySet
from .player_match_stat import PlayerMatchStat, PlayerMatchStatQuerySet

__all__ = [
    "Match",
    "MatchQuerySet",
    "PlayerMatchStat",
    "PlayerMatchStatQuerySet",
]
