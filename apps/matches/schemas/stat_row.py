# apps/matches/schemas/stat_row.py
# ================================================================================
"""
Defines StatRow, the validated shape of one player's scoreboard line inside an
imported match.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from apps.players.conf import PlayerRole


class StatRow(BaseModel):
    """
    A data contract for one player's raw counters in one match.

    The player is identified either by `player_id` or, for hand-written
    imports, by `summoner_name` within the importing organization.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    player_id: UUID | None = None
    summoner_name: str | None = Field(default=None, min_length=1, max_length=100)
    champion: str = Field(min_length=1, max_length=64)
    role: PlayerRole | None = None

    kills: int = Field(default=0, ge=0)
    deaths: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    double_kills: int = Field(default=0, ge=0)
    triple_kills: int = Field(default=0, ge=0)
    quadra_kills: int = Field(default=0, ge=0)
    penta_kills: int = Field(default=0, ge=0)

    cs: int = Field(default=0, ge=0)
    gold_earned: int | None = Field(default=None, ge=0)
    damage_dealt_champions: int | None = Field(default=None, ge=0)
    damage_dealt_total: int | None = Field(default=None, ge=0)
    damage_taken: int | None = Field(default=None, ge=0)
    damage_share: float | None = Field(default=None, ge=0, le=1)
    kill_participation: float | None = Field(default=None, ge=0, le=1)

    vision_score: int | None = Field(default=None, ge=0)
    wards_placed: int | None = Field(default=None, ge=0)
    wards_destroyed: int | None = Field(default=None, ge=0)
    control_wards_purchased: int | None = Field(default=None, ge=0)

    @field_validator("kills", "deaths", "assists", "cs", mode="before")
    @classmethod
    def _none_as_zero(cls, v: Any) -> Any:
        """Absent counters are recorded as zero rather than rejected."""
        return 0 if v is None else v

    @model_validator(mode="after")
    def _require_player_reference(self) -> StatRow:
        if self.player_id is None and not self.summoner_name:
            msg = "Either player_id or summoner_name is required."
            raise ValueError(msg)
        return self

    def stat_fields(self) -> dict[str, Any]:
        """Fields that map one-to-one onto `PlayerMatchStat`."""
        data = self.model_dump(exclude={"player_id", "summoner_name", "role"})
        data["role"] = self.role.value if self.role else ""
        return data
