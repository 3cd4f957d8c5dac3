# ===============================================================================
# apps/matches/services/match_import_handler.py
# ===============================================================================
from __future__ import annotations

from itertools import islice
from typing import TYPE_CHECKING, Any, Final

import structlog
from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.utils import IntegrityError
from pydantic import ValidationError

from apps.core.datatype import ImportResult, ResultAggregator, new_import_result
from apps.core.models import Organization
from apps.matches.models import Match, PlayerMatchStat
from apps.matches.schemas.match_row import MatchRow
from apps.matches.schemas.stat_row import StatRow
from apps.players.models import Player

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Mapping
    from uuid import UUID

# -------------------------------------------------------------------------------
# Logger
# -------------------------------------------------------------------------------
log: Final = structlog.get_logger(__name__).bind(handler="MatchImportHandler")


class MatchImportHandler:
    """
    Validates raw match payloads and persists each match together with its
    player stats in a single transaction.

    Saving a stat computes its derived fields and folds it into the player's
    champion pool, so an imported match is immediately visible to analytics.
    Matches whose `riot_match_id` already exists are skipped; stored matches
    are never overwritten.
    """

    # ---------------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------------
    def __init__(self, organization_id: UUID | str) -> None:
        self.organization_id = organization_id
        self._players_by_id: dict[str, Player] = {}
        self._players_by_name: dict[str, Player] = {}

    # ---------------------------------------------------------------------------
    # Public async entry-point
    # ---------------------------------------------------------------------------
    async def import_async(
        self,
        rows: Iterable[Mapping[str, Any]],
        *,
        chunk_size: int = 100,
    ) -> ImportResult:
        """Imports a stream of raw matches chunk by chunk in a sync thread."""
        total = ResultAggregator()
        rows_iter = iter(rows)
        while chunk := list(islice(rows_iter, chunk_size)):
            result = await sync_to_async(self.import_rows, thread_sensitive=True)(chunk)
            total.add(result)
        return total.to_dict()

    # ---------------------------------------------------------------------------
    # Sync implementation
    # ---------------------------------------------------------------------------
    def import_rows(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        if not Organization.objects.filter(pk=self.organization_id).exists():
            msg = f"Organization {self.organization_id} does not exist."
            raise Organization.DoesNotExist(msg)
        self._load_roster()

        result = new_import_result()
        for idx, raw in enumerate(rows):
            try:
                row = MatchRow.model_validate(raw)
            except ValidationError as e:
                result["skipped"] += 1
                log.warning("Match row validation failed", idx=idx, err=e.errors())
                continue

            if row.riot_match_id and Match.objects.filter(riot_match_id=row.riot_match_id).exists():
                result["skipped"] += 1
                log.info("Match already imported", riot_match_id=row.riot_match_id)
                continue

            created, skipped = self._import_match(row)
            result["created"] += 1
            result["stats_created"] += created
            result["stats_skipped"] += skipped

        log.info("Match import finished", organization_id=str(self.organization_id), **result)
        return result

    def _load_roster(self) -> None:
        players = list(Player.objects.for_organization(self.organization_id))
        self._players_by_id = {str(p.pk): p for p in players}
        self._players_by_name = {p.summoner_name.casefold(): p for p in players}

    def _resolve_player(self, stat: StatRow) -> Player | None:
        if stat.player_id is not None:
            return self._players_by_id.get(str(stat.player_id))
        return self._players_by_name.get((stat.summoner_name or "").casefold())

    def _import_match(self, row: MatchRow) -> tuple[int, int]:
        """Creates one match and its stats; returns (stats created, stats skipped)."""
        created = skipped = 0
        try:
            with transaction.atomic():
                match = Match.objects.create(organization_id=self.organization_id, **row.match_fields())
                seen: set[str] = set()
                for idx, raw in enumerate(row.stats):
                    try:
                        stat_row = StatRow.model_validate(raw)
                    except ValidationError as e:
                        skipped += 1
                        log.warning("Stat row validation failed", match_id=str(match.pk), idx=idx, err=e.errors())
                        continue

                    player = self._resolve_player(stat_row)
                    if player is None:
                        skipped += 1
                        log.warning(
                            "Stat row references unknown player",
                            match_id=str(match.pk),
                            player_id=str(stat_row.player_id) if stat_row.player_id else None,
                            summoner_name=stat_row.summoner_name,
                        )
                        continue
                    if str(player.pk) in seen:
                        skipped += 1
                        log.warning("Duplicate player in match", match_id=str(match.pk), player_id=str(player.pk))
                        continue
                    seen.add(str(player.pk))

                    fields = stat_row.stat_fields()
                    if not fields["role"]:
                        fields["role"] = player.role
                    PlayerMatchStat(match=match, player=player, **fields).save()
                    created += 1
        except IntegrityError as e:
            log.exception("Integrity error during match import.", exc_info=e)
            raise
        return created, skipped
