"""Core data types and type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

# ─── Import Result Types ─────────────────────────────


class ImportResult(TypedDict):
    """Counts produced by a match import run."""

    created: int
    skipped: int
    stats_created: int
    stats_skipped: int


# ─── Factory Functions ──────────────────────


def new_import_result(
    *,
    created: int = 0,
    skipped: int = 0,
    stats_created: int = 0,
    stats_skipped: int = 0,
) -> ImportResult:
    """Create a new ImportResult with validation."""
    if any(v < 0 for v in (created, skipped, stats_created, stats_skipped)):
        msg = "Import counts cannot be negative"
        raise ValueError(msg)
    return ImportResult(
        created=created,
        skipped=skipped,
        stats_created=stats_created,
        stats_skipped=stats_skipped,
    )


# ─── Result Aggregation ─────────────────────


@dataclass(slots=True)
class ResultAggregator:
    """Helper for aggregating multiple ImportResults."""

    created: int = field(default=0)
    skipped: int = field(default=0)
    stats_created: int = field(default=0)
    stats_skipped: int = field(default=0)

    def add(self, result: ImportResult) -> None:
        """Add a result to the aggregation."""
        self.created += result.get("created", 0)
        self.skipped += result.get("skipped", 0)
        self.stats_created += result.get("stats_created", 0)
        self.stats_skipped += result.get("stats_skipped", 0)

    def to_dict(self) -> ImportResult:
        """Convert to ImportResult dictionary."""
        return new_import_result(
            created=self.created,
            skipped=self.skipped,
            stats_created=self.stats_created,
            stats_skipped=self.stats_skipped,
        )
