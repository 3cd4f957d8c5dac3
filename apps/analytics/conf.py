# apps/analytics/conf.py
# ================================================================================
"""Configuration, grading tables, and Pydantic parameter models for the 'analytics' app."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Final, Literal
from uuid import UUID

from django.conf import settings
from django.utils import timezone
from pydantic import Field, model_validator

from apps.core.conf import FrozenModel
from apps.matches.conf import MatchType

# ─── Threshold Tables ──────────────────────────────────────────────────────────
# Each table is ordered by descending inclusive lower bound; a value takes the
# first entry it reaches, or the table's floor when it reaches none.


@dataclass(slots=True, frozen=True)
class ThresholdTable[T]:
    """An ordered ladder of cut points mapping a continuous value to a discrete one."""

    steps: tuple[tuple[float, T], ...]
    floor: T

    def __post_init__(self) -> None:
        bounds = [bound for bound, _ in self.steps]
        if bounds != sorted(bounds, reverse=True) or len(set(bounds)) != len(bounds):
            msg = "Threshold bounds must be strictly descending."
            raise ValueError(msg)

    def lookup(self, value: float) -> T:
        for bound, result in self.steps:
            if value >= bound:
                return result
        return self.floor


KDA_BUCKETS: Final = ThresholdTable[int](steps=((4, 5), (3, 4), (2, 3), (1, 2)), floor=1)
CS_PER_MIN_BUCKETS: Final = ThresholdTable[int](steps=((10, 5), (8, 4), (6, 3), (4, 2)), floor=1)
DAMAGE_SHARE_PCT_BUCKETS: Final = ThresholdTable[int](steps=((30, 5), (25, 4), (20, 3), (15, 2)), floor=1)
VISION_PER_MIN_BUCKETS: Final = ThresholdTable[int](steps=((2.5, 5), (2, 4), (1.5, 3), (1, 2)), floor=1)

PERFORMANCE_GRADES: Final = ThresholdTable[str](
    steps=((4.5, "S"), (3.5, "A"), (2.5, "B"), (1.5, "C")),
    floor="D",
)
MASTERY_GRADES: Final = ThresholdTable[str](
    steps=((80, "S"), (70, "A"), (60, "B"), (50, "C")),
    floor="D",
)

# Mastery score = win_rate * 100 * WIN_RATE_WEIGHT + avg_kda * 10 * KDA_WEIGHT
MASTERY_WIN_RATE_WEIGHT: Final[float] = 0.6
MASTERY_KDA_WEIGHT: Final[float] = 0.4

# ─── Cache Timeouts ────────────────────────────────────────────────────────────
TIMEOUTS: Final[dict[str, int]] = {
    "performance": 60 * 5,
    "team_comparison": 60 * 5,
}

TrendPeriod = Literal["day", "week", "month"]


# ─── Pydantic Parameter Models ─────────────────────────────────────────────────


class MatchWindow(FrozenModel):
    """
    The time window an analytics query covers.

    Either an explicit `start_date`/`end_date` pair, a `days` look-back, or,
    when neither is given, the configured default look-back.
    """

    start_date: date | None = None
    end_date: date | None = None
    days: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _validate_range(self) -> MatchWindow:
        if (self.start_date is None) != (self.end_date is None):
            msg = "start_date and end_date must be provided together."
            raise ValueError(msg)
        if self.start_date is not None and self.days is not None:
            msg = "Use either a date range or days, not both."
            raise ValueError(msg)
        max_days = settings.ANALYTICS_CONFIG.MAX_WINDOW_DAYS
        if self.days is not None and self.days > max_days:
            msg = f"days cannot exceed {max_days}."
            raise ValueError(msg)
        if self.start_date is not None:
            start, end = self.bounds()
            if start > end:
                msg = "start_date must not be after end_date."
                raise ValueError(msg)
        return self

    def bounds(self) -> tuple[datetime, datetime]:
        """Resolves the window to an aware (start, end) pair."""
        if self.start_date is not None and self.end_date is not None:
            return _as_aware(self.start_date, time.min), _as_aware(self.end_date, time.max)
        now = timezone.now()
        days = self.days or settings.ANALYTICS_CONFIG.DEFAULT_WINDOW_DAYS
        return now - timedelta(days=days), now


class AnalyticsFilters(FrozenModel):
    """Optional narrowing applied on top of the window."""

    opponent: str | None = Field(default=None, min_length=1, max_length=255)
    match_type: MatchType | None = None
    player_id: UUID | None = None


class TrendOptions(FrozenModel):
    group_by: TrendPeriod = "week"


def _as_aware(value: date, at: time) -> datetime:
    return timezone.make_aware(datetime.combine(value, at))
