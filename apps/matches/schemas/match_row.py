# apps/matches/schemas/match_row.py
# ================================================================================
"""
Defines MatchRow, a schema for validating raw match data before it is turned
into a `Match` and its `PlayerMatchStat` rows.
"""

from __future__ import annotations

from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from apps.matches.conf import MatchType, Side


class MatchRow(BaseModel):
    """
    A data contract for one imported game.

    `stats` is kept as raw dictionaries so that one malformed scoreboard line
    can be skipped without rejecting the whole match.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    match_type: MatchType = MatchType.OFFICIAL
    riot_match_id: str | None = Field(default=None, min_length=1, max_length=64)
    game_start: AwareDatetime | None = None
    game_end: AwareDatetime | None = None
    game_duration: int | None = Field(default=None, gt=0)
    victory: bool | None = None
    our_side: Side | None = None
    opponent_name: str = Field(default="", max_length=255)
    our_score: int | None = Field(default=None, ge=0)
    opponent_score: int | None = Field(default=None, ge=0)

    stats: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_timeline(self) -> MatchRow:
        if self.game_start and self.game_end and self.game_end < self.game_start:
            msg = "game_end must not be before game_start."
            raise ValueError(msg)
        return self

    @property
    def resolved_duration(self) -> int | None:
        """Explicit duration, or the start/end difference when only those are known."""
        if self.game_duration:
            return self.game_duration
        if self.game_start and self.game_end:
            seconds = int((self.game_end - self.game_start).total_seconds())
            return seconds or None
        return None

    def match_fields(self) -> dict[str, Any]:
        """Fields for the `Match` model."""
        return {
            "match_type": self.match_type.value,
            "riot_match_id": self.riot_match_id,
            "game_start": self.game_start,
            "game_end": self.game_end,
            "game_duration": self.resolved_duration,
            "victory": self.victory,
            "our_side": self.our_side.value if self.our_side else "",
            "opponent_name": self.opponent_name,
            "our_score": self.our_score,
            "opponent_score": self.opponent_score,
        }
