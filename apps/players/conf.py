# apps/players/conf.py
# ================================================================================
"""Configuration, constants, and enums for the 'players' app."""

from __future__ import annotations

from typing import Final

from django.db import models


class PlayerRole(models.TextChoices):
    """The five positions of a League of Legends roster, in draft order."""

    TOP = "top", "Top"
    JUNGLE = "jungle", "Jungle"
    MID = "mid", "Mid"
    ADC = "adc", "ADC"
    SUPPORT = "support", "Support"


class PlayerStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    BENCHED = "benched", "Benched"
    TRIAL = "trial", "Trial"


# ─── Analytics Defaults ────────────────────────────────────────────────────────
# A champion counts as "highly played" in the diversity summary from this many games.
HIGHLY_PLAYED_MIN_GAMES: Final[int] = 10
TOP_CHAMPIONS_LIMIT: Final[int] = 5
# Laning rows fall back to this duration when a match has none recorded.
FALLBACK_MATCH_MINUTES: Final[float] = 25.0
RECENT_FORM_WINDOWS: Final[tuple[int, ...]] = (5, 10)
MAX_CHAMPION_DETAIL_LIMIT: Final[int] = 100

# ─── Cache Timeouts ────────────────────────────────────────────────────────────
# Timeouts in seconds for player analytics endpoints.
PLAYER_TIMEOUTS: Final[dict[str, int]] = {
    "kda_trend": 60 * 5,
    "laning": 60 * 5,
    "vision": 60 * 5,
    "champions": 60 * 10,
    "champion_detail": 60 * 5,
    "stats": 60 * 5,
}
