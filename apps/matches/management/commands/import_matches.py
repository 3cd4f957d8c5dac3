# apps/matches/management/commands/import_matches.py
# ================================================================================
import asyncio
from pathlib import Path

import orjson
from django.core.management.base import BaseCommand, CommandError

from apps.core.models import Organization
from apps.matches.services.match_import_handler import MatchImportHandler


class Command(BaseCommand):
    """
    Imports completed matches and their player stats from a JSON file.

    The file holds either a list of match objects or an object with a
    `matches` list. Each match carries its scoreboard under `stats`.
    """

    help = "Imports matches with player stats for one organization from a JSON file."

    def add_arguments(self, parser):
        """Adds command-line arguments."""
        parser.add_argument("path", type=str, help="Path to the JSON file to import.")
        parser.add_argument(
            "--organization",
            required=True,
            help="UUID of the organization that owns the matches.",
        )
        parser.add_argument(
            "--chunk-size",
            type=int,
            default=100,
            help="Number of matches handled per database round-trip.",
        )

    def handle(self, *args, **options):
        """Entry point for the command."""
        rows = self.load_rows(Path(options["path"]))
        self.stdout.write(self.style.SUCCESS(f"► Importing {len(rows)} matches..."))

        handler = MatchImportHandler(options["organization"])
        try:
            result = asyncio.run(handler.import_async(rows, chunk_size=options["chunk_size"]))
        except Organization.DoesNotExist as e:
            raise CommandError(str(e)) from e
        except Exception as e:
            msg = f"An unexpected error occurred: {e}"
            raise CommandError(msg) from e

        result_json = orjson.dumps(result, option=orjson.OPT_INDENT_2).decode()
        self.stdout.write(self.style.SUCCESS("✓ Command finished. Result:"))
        self.stdout.write(result_json)

    def load_rows(self, path: Path) -> list[dict]:
        """Reads and decodes the import file."""
        try:
            data = orjson.loads(path.read_bytes())
        except OSError as e:
            msg = f"Cannot read {path}: {e}"
            raise CommandError(msg) from e
        except orjson.JSONDecodeError as e:
            msg = f"{path} is not valid JSON: {e}"
            raise CommandError(msg) from e

        if isinstance(data, dict):
            data = data.get("matches")
        if not isinstance(data, list):
            msg = "Expected a list of matches or an object with a 'matches' list."
            raise CommandError(msg)
        return data
