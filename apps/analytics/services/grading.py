# apps/analytics/services/grading.py
# ================================================================================
"""
Maps continuous performance metrics to discrete grades.

All cut points live in `apps.analytics.conf` as threshold tables, so the
ladders can be inspected and tested as data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from apps.analytics.conf import (
    CS_PER_MIN_BUCKETS,
    DAMAGE_SHARE_PCT_BUCKETS,
    KDA_BUCKETS,
    MASTERY_GRADES,
    MASTERY_KDA_WEIGHT,
    MASTERY_WIN_RATE_WEIGHT,
    PERFORMANCE_GRADES,
    VISION_PER_MIN_BUCKETS,
    ThresholdTable,
)

if TYPE_CHECKING:
    from apps.matches.models import PlayerMatchStat


@dataclass(slots=True, frozen=True)
class SubScores:
    """The four 1–5 buckets a performance grade is averaged from."""

    kda: int
    cs: int
    damage: int
    vision: int

    @property
    def average(self) -> float:
        return (self.kda + self.cs + self.damage + self.vision) / 4.0

    def to_dict(self) -> dict[str, int | float]:
        return {
            "kda": self.kda,
            "cs": self.cs,
            "damage": self.damage,
            "vision": self.vision,
            "average": self.average,
        }


class PerformanceGradingEngine:
    """Letter grades for match performances and champion mastery."""

    @staticmethod
    def bucket[T](value: float | None, table: ThresholdTable[T]) -> T:
        return table.lookup(value or 0.0)

    def sub_scores(
        self,
        *,
        kda: float | None,
        cs_per_min: float | None,
        damage_share_pct: float | None,
        vision_per_min: float | None,
    ) -> SubScores:
        return SubScores(
            kda=self.bucket(kda, KDA_BUCKETS),
            cs=self.bucket(cs_per_min, CS_PER_MIN_BUCKETS),
            damage=self.bucket(damage_share_pct, DAMAGE_SHARE_PCT_BUCKETS),
            vision=self.bucket(vision_per_min, VISION_PER_MIN_BUCKETS),
        )

    def grade_performance(
        self,
        *,
        kda: float | None,
        cs_per_min: float | None,
        damage_share_pct: float | None,
        vision_per_min: float | None,
    ) -> str:
        """S/A/B/C/D from the mean of the four sub-score buckets."""
        scores = self.sub_scores(
            kda=kda,
            cs_per_min=cs_per_min,
            damage_share_pct=damage_share_pct,
            vision_per_min=vision_per_min,
        )
        return PERFORMANCE_GRADES.lookup(scores.average)

    def grade_stat(self, stat: PlayerMatchStat) -> str:
        return self.grade_performance(
            kda=stat.kda_ratio,
            cs_per_min=stat.cs_per_min,
            damage_share_pct=(stat.damage_share or 0) * 100,
            vision_per_min=stat.vision_per_min,
        )

    @staticmethod
    def mastery_score(win_rate: float | None, avg_kda: float | None) -> float:
        """`win_rate` is a 0–1 fraction."""
        return (win_rate or 0.0) * 100 * MASTERY_WIN_RATE_WEIGHT + (avg_kda or 0.0) * 10 * MASTERY_KDA_WEIGHT

    def mastery_grade(self, win_rate: float | None, avg_kda: float | None) -> str:
        return MASTERY_GRADES.lookup(self.mastery_score(win_rate, avg_kda))
