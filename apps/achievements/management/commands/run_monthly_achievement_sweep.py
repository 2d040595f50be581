"""
Management command for the month-end achievement sweep.

Re-evaluates the ``month_end`` achievements for every active user, so
users who never triggered a live check during the month are still
considered. Schedule it once per month boundary (e.g. cron on the 1st).

The judged month is the one that just ended when run on the 1st, the
current month on any other day, or the month given with ``--month``.

Usage:
    python manage.py run_monthly_achievement_sweep
    python manage.py run_monthly_achievement_sweep --dry-run
    python manage.py run_monthly_achievement_sweep --month 2024-05
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError
from apps.achievements.engine import month_end_reference, run_monthly_achievement_sweep


class Command(BaseCommand):
    help = 'Evaluate month_end achievements for every active user'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be unlocked without making changes',
        )
        parser.add_argument(
            '--month',
            help='Month to judge as YYYY-MM (default: the month that just ended on the 1st, else the current one)',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        month = None
        if options['month']:
            try:
                month = datetime.strptime(options['month'], '%Y-%m').date()
            except ValueError:
                raise CommandError(f"Invalid --month '{options['month']}', expected YYYY-MM")
        reference = month or month_end_reference()

        self.stdout.write(f'Judging {reference:%Y-%m}')
        results = run_monthly_achievement_sweep(dry_run=dry_run, month=reference)

        if not results:
            self.stdout.write(
                self.style.SUCCESS('No new month-end achievements.')
            )
            return

        self.stdout.write(f'\n{len(results)} user(s) with month-end achievements:\n')
        for user, achievements in results.items():
            titles = ', '.join(f'{a.emoji} {a.title}' for a in achievements)
            self.stdout.write(f'  - {user.email}: {titles}')

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Unlocked achievements for {len(results)} user(s)!')
        )
