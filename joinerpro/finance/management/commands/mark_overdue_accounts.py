"""
Management command to flag pending ledger rows whose due date has passed
"""
from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from joinerpro.core.utils import create_audit_log
from joinerpro.finance.services import LEDGER_KINDS, mark_overdue


class Command(BaseCommand):
    help = "Marks pending payables/receivables due before today (or --date) as overdue"

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=str,
            help='Reference date in YYYY-MM-DD format (defaults to today)',
        )
        parser.add_argument(
            '--kind',
            choices=sorted(LEDGER_KINDS),
            help='Only process one ledger kind',
        )

    def handle(self, *args, **options):
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['date']}")
        else:
            today = timezone.localdate()

        kinds = [options['kind']] if options['kind'] else sorted(LEDGER_KINDS)
        for kind in kinds:
            updated = mark_overdue(kind, today)
            if updated:
                create_audit_log(
                    action='mark_overdue',
                    model_name=LEDGER_KINDS[kind].__name__,
                    object_id=today.isoformat(),
                    changes={'updated': updated},
                )
            self.stdout.write(f"{kind}: {updated} account(s) marked overdue")

        self.stdout.write(self.style.SUCCESS("Done."))
