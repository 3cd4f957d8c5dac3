"""Core configuration, constants, and Pydantic models for the entire project."""

from __future__ import annotations

from typing import Final

from django.db import models
from pydantic import BaseModel, ConfigDict

# ─── Constants ──────────────────────────────────────────────────────────────────

SLUG_MAX_LENGTH: Final[int] = 100


# ─── Django Model Enums ────────────────────────────────────────────────────────


class Region(models.TextChoices):
    """League of Legends server regions an organization can compete in."""

    BR = "BR", "Brazil"
    NA = "NA", "North America"
    EUW = "EUW", "Europe West"
    EUNE = "EUNE", "Europe Nordic & East"
    KR = "KR", "Korea"
    JP = "JP", "Japan"
    OCE = "OCE", "Oceania"
    LAN = "LAN", "Latin America North"
    LAS = "LAS", "Latin America South"
    RU = "RU", "Russia"
    TR = "TR", "Turkey"


# ─── Base Pydantic Models ───────────────────────────────────────────────────────


class FrozenModel(BaseModel):
    """Base Pydantic model for immutable, validated parameter objects."""

    model_config = ConfigDict(frozen=True, extra="forbid")
