# apps/players/management/commands/rebuild_champion_pools.py
# ================================================================================
from django.core.management.base import BaseCommand, CommandError

from apps.core.models import Organization
from apps.players.services.champion_pool import ChampionPoolTracker


class Command(BaseCommand):
    """
    Recomputes champion pool aggregates from the full match history.

    Pools are normally maintained incrementally as stats are created; this
    command repairs them after manual data fixes.
    """

    help = "Rebuilds champion pool entries from stored match stats."

    def add_arguments(self, parser):
        """Adds command-line arguments."""
        parser.add_argument(
            "--organization",
            action="append",
            dest="organizations",
            help="Organization UUID to rebuild. Repeatable; defaults to every organization.",
        )

    def handle(self, *args, **options):
        """Entry point for the command."""
        org_ids = options.get("organizations") or list(Organization.objects.values_list("id", flat=True))
        if not org_ids:
            self.stdout.write(self.style.WARNING("No organizations found. Nothing to rebuild."))
            return

        tracker = ChampionPoolTracker()
        total = 0
        for org_id in org_ids:
            if not Organization.objects.filter(pk=org_id).exists():
                msg = f"Organization {org_id} does not exist."
                raise CommandError(msg)
            count = tracker.rebuild_all(org_id)
            total += count
            self.stdout.write(f"  {org_id}: {count} entries")

        self.stdout.write(self.style.SUCCESS(f"✓ Rebuilt {total} champion pool entries."))
