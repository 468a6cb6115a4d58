"""
Management command: clear_roster

Day-end reset, meant for cron. Without --date, clears every roster older
than today; with --date, clears just that day.
"""
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from core.exceptions import ValidationFailed
from core.models import RosterEntry
from core.services.roster_manager import RosterManager
from core.utils.http import parse_date


class Command(BaseCommand):
    help = 'Clear the staff roster of a given day (default: all days before today)'

    def add_arguments(self, parser):
        parser.add_argument('--date', type=str, default=None, help='YYYY-MM-DD')

    def handle(self, *args, **options):
        try:
            day = parse_date(options['date'])
        except ValidationFailed as exc:
            raise CommandError(exc.message)

        if day is not None:
            days = [day]
        else:
            today = timezone.localdate()
            days = list(
                RosterEntry.objects.filter(roster_date__lt=today)
                .values_list('roster_date', flat=True).distinct()
            )

        total = 0
        for roster_date in sorted(days):
            manager = RosterManager(roster_date)
            if not manager.check_contiguity():
                self.stdout.write(self.style.WARNING(f"  {roster_date}: positions were not contiguous"))
            removed = manager.clear_roster()
            total += removed
            self.stdout.write(f'  {roster_date}: removed {removed} entr{"y" if removed == 1 else "ies"}')

        self.stdout.write(self.style.SUCCESS(f'Done. {total} roster entr{"y" if total == 1 else "ies"} removed.'))
