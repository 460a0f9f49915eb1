"""
Management command to recalculate travel cash box balances.

Walks each employee's chain of visible boxes and rewrites opening and
closing balances.

Usage:
    python manage.py recalculate_balances
    python manage.py recalculate_balances --employee 12
    python manage.py recalculate_balances --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.travel.services import recalculate_balances


class DryRunRollback(Exception):
    pass


class Command(BaseCommand):
    help = 'Recalculate opening and closing balances of travel cash boxes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--employee',
            type=int,
            help='Only recalculate the boxes of this employee ID',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the resulting balances without saving them',
        )

    def handle(self, *args, **options):
        employee_id = options.get('employee')
        dry_run = options['dry_run']

        try:
            with transaction.atomic():
                result = recalculate_balances(employee_id=employee_id)
                if dry_run:
                    raise DryRunRollback()
        except DryRunRollback:
            pass

        if not result.boxes and not result.failures:
            self.stdout.write(self.style.SUCCESS('No boxes to recalculate.'))
            return

        for box in result.boxes:
            self.stdout.write(
                f'  - Employee {box.employee_id} | Box {box.box_number} | '
                f'opening {box.opening_balance} | closing {box.closing_balance}'
            )

        for failure in result.failures:
            self.stdout.write(
                self.style.ERROR(f'  ! Employee {failure.employee_id}: {failure.error}')
            )

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes saved.'))
            return

        self.stdout.write(
            self.style.SUCCESS(f'\nRecalculated {len(result.boxes)} box(es).')
        )
