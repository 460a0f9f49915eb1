import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command

from apps.travel.models import TravelCashBox
from .helpers import entry


@pytest.mark.django_db
class TestRecalculateBalancesCommand:

    def _tamper(self, box):
        TravelCashBox.objects.filter(pk=box.pk).update(opening_balance=Decimal('0'))

    def test_recalculates(self, employee, make_box):
        make_box(employee, entries=[entry(credit='100')])
        second = make_box(employee)
        self._tamper(second)
        out = StringIO()

        call_command('recalculate_balances', stdout=out)

        second.refresh_from_db()
        assert second.opening_balance == Decimal('100.00')
        assert 'Recalculated 2 box(es)' in out.getvalue()

    def test_dry_run_saves_nothing(self, employee, make_box):
        make_box(employee, entries=[entry(credit='100')])
        second = make_box(employee)
        self._tamper(second)
        out = StringIO()

        call_command('recalculate_balances', '--dry-run', stdout=out)

        second.refresh_from_db()
        assert second.opening_balance == Decimal('0.00')
        assert 'opening 100.00' in out.getvalue()
        assert 'No changes saved' in out.getvalue()

    def test_single_employee(self, employee, other_employee, make_box):
        make_box(employee, entries=[entry(credit='1')])
        make_box(other_employee, entries=[entry(credit='2')])
        out = StringIO()

        call_command('recalculate_balances', '--employee', str(other_employee.id), stdout=out)

        assert f'Employee {other_employee.id}' in out.getvalue()
        assert f'Employee {employee.id} ' not in out.getvalue()

    def test_nothing_to_do(self, db):
        out = StringIO()

        call_command('recalculate_balances', stdout=out)

        assert 'No boxes to recalculate' in out.getvalue()
