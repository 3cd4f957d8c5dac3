# apps/matches/services/stat_aggregator.py
# ================================================================================
"""
Derived per-match metrics computed from a player's raw counters.

Everything here is a pure function: no database access, no exceptions for
absent stats. Missing numbers are treated as zero before any arithmetic, and
per-minute rates stay unset (None) when the game duration is unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from apps.matches.conf import (
    CS_CAP,
    CS_PER_MIN_WEIGHT,
    DAMAGE_CAP,
    DAMAGE_SHARE_WEIGHT,
    KDA_CAP,
    KDA_WEIGHT,
    SCORE_MAX,
    SECONDS_PER_MINUTE,
    VICTORY_BONUS,
    VISION_CAP,
    VISION_WEIGHT,
)


def _num(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _capped(value: float, cap: float) -> float:
    return max(0.0, min(value, cap))


def kda_ratio(kills: int | None, deaths: int | None, assists: int | None) -> float:
    """(kills + assists) / max(deaths, 1), rounded to two decimals."""
    return round((_num(kills) + _num(assists)) / max(_num(deaths), 1.0), 2)


def per_minute(total: float | None, duration_seconds: int | None) -> float | None:
    """Rate per minute of play, or None when the duration is missing or zero."""
    if not duration_seconds or duration_seconds <= 0:
        return None
    return round(_num(total) / (duration_seconds / SECONDS_PER_MINUTE), 2)


def performance_score(
    *,
    kda: float | None,
    cs_per_min: float | None,
    damage_share: float | None,
    vision_score: float | None,
    victory: bool | None,
) -> float:
    """
    0–100 composite score.

    KDA is worth up to 40 points, farming and damage share up to 20 each,
    vision up to 10, plus a flat 10 for a win. Each component is clamped
    before summation so no single stat can push the total past the cap.
    """
    score = (
        _capped(_num(kda) * KDA_WEIGHT, KDA_CAP)
        + _capped(_num(cs_per_min) * CS_PER_MIN_WEIGHT, CS_CAP)
        + _capped(_num(damage_share) * DAMAGE_SHARE_WEIGHT, DAMAGE_CAP)
        + _capped(_num(vision_score) * VISION_WEIGHT, VISION_CAP)
    )
    if victory:
        score += VICTORY_BONUS
    return round(min(score, SCORE_MAX), 2)


@dataclass(slots=True, frozen=True)
class DerivedStats:
    """Fields attached to a PlayerMatchStat before it is persisted."""

    kda: float
    cs_per_min: float | None
    gold_per_min: float | None
    performance_score: float


def derive(
    *,
    kills: int | None,
    deaths: int | None,
    assists: int | None,
    cs: int | None,
    gold_earned: int | None,
    damage_share: float | None,
    vision_score: int | None,
    game_duration: int | None,
    victory: bool | None,
) -> DerivedStats:
    kda = kda_ratio(kills, deaths, assists)
    cs_per_min = per_minute(cs, game_duration)
    return DerivedStats(
        kda=kda,
        cs_per_min=cs_per_min,
        gold_per_min=per_minute(gold_earned, game_duration),
        performance_score=performance_score(
            kda=kda,
            cs_per_min=cs_per_min,
            damage_share=damage_share,
            vision_score=vision_score,
            victory=victory,
        ),
    )
