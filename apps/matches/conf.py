# apps/matches/conf.py
# ================================================================================
"""Configuration, constants, and enums for the 'matches' app."""

from __future__ import annotations

from typing import Final

from django.db import models

# ─── App-wide Constants ────────────────────────────────────────────────────────
SECONDS_PER_MINUTE: Final[float] = 60.0
MAX_LIMIT_MATCHES: Final[int] = 200

# ─── Performance Score Weights ─────────────────────────────────────────────────
# Each component is capped before summation; the total is capped at SCORE_MAX.
KDA_WEIGHT: Final[float] = 10.0
KDA_CAP: Final[float] = 40.0
CS_PER_MIN_WEIGHT: Final[float] = 2.5
CS_CAP: Final[float] = 20.0
DAMAGE_SHARE_WEIGHT: Final[float] = 100 * 0.8
DAMAGE_CAP: Final[float] = 20.0
VISION_WEIGHT: Final[float] = 10 / 100
VISION_CAP: Final[float] = 10.0
VICTORY_BONUS: Final[float] = 10.0
SCORE_MAX: Final[float] = 100.0

# ─── Cache Timeouts ────────────────────────────────────────────────────────────
TIMEOUTS: Final[dict[str, int]] = {
    "match_list": 60,
    "match_detail": 60 * 5,
}


# ─── Django Model Enums ────────────────────────────────────────────────────────


class MatchType(models.TextChoices):
    OFFICIAL = "official", "Official Match"
    SCRIM = "scrim", "Scrim"
    TOURNAMENT = "tournament", "Tournament"


class Side(models.TextChoices):
    BLUE = "blue", "Blue Side"
    RED = "red", "Red Side"
