"""
Service layer unit tests for travel app.

Tests cover:
- Balance chain reconciliation
- Box numbering
- Box lifecycle (entries, visibility)
- Advances (apply, unapply, locking)
- Statistics
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from django.db import DatabaseError

from apps.travel.models import TravelCashBox, LedgerEntry
from apps.travel.services import balances
from apps.travel.services import (
    compute_box_totals,
    recalculate_balances,
    assign_next_box_number,
    update_box,
    replace_entries,
    toggle_box_visibility,
    create_advance,
    update_advance,
    apply_advance,
    unapply_advance,
    hide_advance,
    get_travel_statistics,
)
from apps.travel.services.exceptions import (
    EmployeeNotFoundError,
    BoxNotFoundError,
    AdvanceLockedError,
    AdvanceNotAppliedError,
    AdvanceHiddenError,
    AdvanceEmployeeMismatchError,
)
from .helpers import entry


def chain(employee):
    return list(
        TravelCashBox.objects
        .filter(employee=employee, is_hidden=False)
        .order_by('box_number', 'created_at', 'id')
    )


# =============================================================================
# Balance Reconciliation Tests
# =============================================================================

@pytest.mark.django_db
class TestBalanceChain:
    """Tests for balances.py service functions."""

    def test_first_box_closes_at_seventy_and_second_opens_there(self, employee, make_box):
        """Box 1: 0 + 100 - 30 = 70; box 2 opens at 70."""
        first = make_box(employee, entries=[entry(credit='100'), entry(debit='30')])
        second = make_box(employee)

        assert first.box_number == 1
        assert first.opening_balance == Decimal('0.00')
        assert first.closing_balance == Decimal('70.00')
        assert second.box_number == 2
        assert second.opening_balance == Decimal('70.00')

    def test_linked_advance_counts_as_credit(self, employee, make_box, make_advance):
        """Closing = opening + 200 + 80 - 50."""
        first = make_box(employee, opening_balance=Decimal('10.00'))
        box = make_box(employee, entries=[entry(credit='200'), entry(debit='50')])
        apply_advance(advance=make_advance(employee, '80'), box=box)

        box.refresh_from_db()
        first.refresh_from_db()
        assert box.opening_balance == first.closing_balance == Decimal('10.00')
        assert box.closing_balance == box.opening_balance + Decimal('200') + Decimal('80') - Decimal('50')

    def test_adjacent_boxes_chain(self, employee, other_employee, make_box):
        make_box(employee, entries=[entry(credit='150.25')])
        make_box(employee, entries=[entry(debit='40.10'), entry(credit='5')])
        make_box(employee, entries=[entry(debit='300')])
        make_box(other_employee, entries=[entry(credit='12')])

        recalculate_balances()

        for owner in (employee, other_employee):
            boxes = chain(owner)
            for previous, current in zip(boxes, boxes[1:]):
                assert current.opening_balance == previous.closing_balance

    def test_closing_matches_formula_for_every_box(self, employee, make_box, make_advance):
        make_box(employee, entries=[entry(credit='0.10'), entry(credit='0.20')])
        box = make_box(employee, entries=[entry(debit='1000.01'), entry(credit='999.99')])
        apply_advance(advance=make_advance(employee, '33.33'), box=box)

        for current in chain(employee):
            totals = compute_box_totals(current)
            assert current.closing_balance == (
                current.opening_balance + totals.credits + totals.advances - totals.debits
            )

    def test_entries_without_amounts_count_as_zero(self, employee, make_box):
        box = make_box(employee, entries=[entry(), entry(credit='10')])

        assert box.entries.count() == 2
        assert box.closing_balance == Decimal('10.00')

    def test_recalculate_repairs_tampered_balances(self, employee, make_box):
        make_box(employee, entries=[entry(credit='100')])
        second = make_box(employee, entries=[entry(debit='25')])
        TravelCashBox.objects.filter(pk=second.pk).update(
            opening_balance=Decimal('0'), closing_balance=Decimal('999')
        )

        result = recalculate_balances(employee_id=employee.pk)

        second.refresh_from_db()
        assert second.opening_balance == Decimal('100.00')
        assert second.closing_balance == Decimal('75.00')
        assert [b.box_number for b in result.boxes] == [1, 2]
        assert result.failures == []

    def test_first_box_keeps_manual_opening(self, employee, make_box):
        first = make_box(employee, opening_balance=Decimal('500.00'), entries=[entry(debit='20')])
        second = make_box(employee, opening_balance=Decimal('999.00'))

        assert first.opening_balance == Decimal('500.00')
        assert first.closing_balance == Decimal('480.00')
        assert second.opening_balance == Decimal('480.00')

    def test_hidden_box_leaves_chain(self, employee, make_box):
        first = make_box(employee, entries=[entry(credit='100')])
        middle = make_box(employee, entries=[entry(credit='50')])
        last = make_box(employee)

        toggle_box_visibility(box=middle)

        last.refresh_from_db()
        assert last.opening_balance == first.closing_balance == Decimal('100.00')

    def test_equal_numbers_fall_back_to_creation_order(self, employee, make_box):
        first = make_box(employee, entries=[entry(credit='10')])
        second = make_box(employee, entries=[entry(credit='5')])
        TravelCashBox.objects.filter(pk=second.pk).update(box_number=first.box_number)

        recalculate_balances(employee_id=employee.pk)

        second.refresh_from_db()
        assert second.opening_balance == Decimal('10.00')
        assert second.closing_balance == Decimal('15.00')

    def test_employee_without_boxes_is_noop(self, employee):
        result = recalculate_balances(employee_id=employee.pk)

        assert result.boxes == []
        assert result.failures == []

    def test_storage_failure_is_reported_per_employee(self, employee, other_employee, make_box):
        make_box(employee, entries=[entry(credit='10')])
        make_box(other_employee, entries=[entry(credit='20')])
        original = balances.recalculate_employee_chain

        def flaky(*, employee_id):
            if employee_id == employee.pk:
                raise DatabaseError('disk full')
            return original(employee_id=employee_id)

        with patch(
            'apps.travel.services.balances.recalculate_employee_chain',
            side_effect=flaky
        ):
            result = recalculate_balances()

        assert [f.employee_id for f in result.failures] == [employee.pk]
        assert 'disk full' in result.failures[0].error
        assert [b.employee_id for b in result.boxes] == [other_employee.pk]


@pytest.mark.django_db
class TestNextBoxNumber:

    def test_employee_without_boxes(self, employee):
        numbering = assign_next_box_number(employee_id=employee.pk)

        assert numbering.next_number == 1
        assert numbering.opening_balance == Decimal('0.00')

    def test_follows_latest_box(self, employee, make_box):
        make_box(employee, entries=[entry(credit='100')])
        make_box(employee, entries=[entry(debit='12.50')])

        numbering = assign_next_box_number(employee_id=employee.pk)

        assert numbering.next_number == 3
        assert numbering.opening_balance == Decimal('87.50')

    def test_hidden_numbers_are_not_reused(self, employee, make_box):
        make_box(employee, entries=[entry(credit='100')])
        hidden = make_box(employee, entries=[entry(credit='50')])
        toggle_box_visibility(box=hidden)

        numbering = assign_next_box_number(employee_id=employee.pk)

        assert numbering.next_number == 3
        assert numbering.opening_balance == Decimal('100.00')

    def test_unknown_employee(self, db):
        with pytest.raises(EmployeeNotFoundError):
            assign_next_box_number(employee_id=9999)


# =============================================================================
# Box Lifecycle Tests
# =============================================================================

@pytest.mark.django_db
class TestBoxManagement:

    def test_create_box_stores_entries_in_order(self, employee, make_box, vehicle):
        box = make_box(
            employee,
            vehicle=vehicle,
            note='Visita técnica',
            entries=[entry(credit='1', document_number='NF-1'), entry(debit='2', document_number='NF-2')],
        )

        assert box.vehicle == vehicle
        assert box.note == 'Visita técnica'
        assert list(box.entries.values_list('document_number', 'position')) == [('NF-1', 0), ('NF-2', 1)]

    def test_replace_entries_is_wholesale(self, employee, make_box):
        box = make_box(employee, entries=[entry(credit='100'), entry(credit='1')])
        old_ids = set(box.entries.values_list('id', flat=True))

        box = replace_entries(box=box, entries=[entry(debit='40')])

        assert box.entries.count() == 1
        assert not LedgerEntry.objects.filter(id__in=old_ids).exists()
        assert box.closing_balance == Decimal('-40.00')

    def test_replace_entries_moves_following_boxes(self, employee, make_box):
        first = make_box(employee, entries=[entry(credit='100')])
        second = make_box(employee)

        replace_entries(box=first, entries=[entry(credit='60')])

        second.refresh_from_db()
        assert second.opening_balance == Decimal('60.00')

    def test_update_box_ignores_immutable_fields(self, employee, other_employee, make_box):
        box = make_box(employee)

        box = update_box(
            box=box,
            destination='Vitória',
            employee=other_employee,
            box_number=42,
            opening_balance=Decimal('1000'),
        )

        assert box.destination == 'Vitória'
        assert box.employee == employee
        assert box.box_number == 1
        assert box.opening_balance == Decimal('0.00')

    def test_update_box_replaces_entries(self, employee, make_box):
        box = make_box(employee, entries=[entry(credit='100')])

        box = update_box(box=box, destination='Ouro Preto', entries=[entry(debit='15')])

        assert box.destination == 'Ouro Preto'
        assert box.entries.count() == 1
        assert box.closing_balance == Decimal('-15.00')

    def test_update_box_rolls_back_when_entries_fail(self, employee, make_box):
        box = make_box(employee, destination='Vitória', entries=[entry(credit='100')])

        with patch.object(
            LedgerEntry.objects, 'bulk_create', side_effect=DatabaseError('disk full')
        ):
            with pytest.raises(DatabaseError):
                update_box(box=box, destination='Ouro Preto', entries=[entry(debit='15')])

        box.refresh_from_db()
        assert box.destination == 'Vitória'
        assert box.entries.count() == 1
        assert box.closing_balance == Decimal('100.00')

    def test_toggle_visibility_restores_into_chain(self, employee, make_box):
        first = make_box(employee, entries=[entry(credit='30')])
        last = make_box(employee)

        toggle_box_visibility(box=first)
        toggle_box_visibility(box=first)

        last.refresh_from_db()
        assert last.opening_balance == Decimal('30.00')


# =============================================================================
# Advance Tests
# =============================================================================

@pytest.mark.django_db
class TestAdvances:

    def test_create_advance_is_unlinked(self, user, employee):
        advance = create_advance(
            created_by=user,
            employee=employee,
            date=date(2024, 3, 2),
            amount=Decimal('80.00'),
        )

        assert advance.box is None
        assert advance.is_applied is False

    def test_cannot_apply_to_other_employee_box(self, employee, other_employee, make_box, make_advance):
        box = make_box(other_employee)
        advance = make_advance(employee, '50')

        with pytest.raises(AdvanceEmployeeMismatchError):
            apply_advance(advance=advance, box=box)

        advance.refresh_from_db()
        assert advance.box is None

    def test_cannot_apply_twice(self, employee, make_box, make_advance):
        first = make_box(employee)
        second = make_box(employee)
        advance = make_advance(employee, '50')
        apply_advance(advance=advance, box=first)

        with pytest.raises(AdvanceLockedError):
            apply_advance(advance=advance, box=second)

    def test_cannot_apply_hidden_advance(self, employee, make_box, make_advance):
        box = make_box(employee)
        advance = make_advance(employee, '50', is_hidden=True)

        with pytest.raises(AdvanceHiddenError):
            apply_advance(advance=advance, box=box)

    def test_cannot_apply_to_hidden_box(self, employee, make_box, make_advance):
        box = make_box(employee)
        toggle_box_visibility(box=box)
        box.refresh_from_db()

        with pytest.raises(BoxNotFoundError):
            apply_advance(advance=make_advance(employee, '50'), box=box)

    def test_linked_advance_is_locked(self, employee, make_box, make_advance):
        advance = make_advance(employee, '50')
        apply_advance(advance=advance, box=make_box(employee))

        with pytest.raises(AdvanceLockedError):
            update_advance(advance=advance, amount=Decimal('10'))
        with pytest.raises(AdvanceLockedError):
            hide_advance(advance=advance)

    def test_unapply_recalculates(self, employee, make_box, make_advance):
        box = make_box(employee, entries=[entry(credit='10')])
        advance = make_advance(employee, '50')
        apply_advance(advance=advance, box=box)
        box.refresh_from_db()
        assert box.closing_balance == Decimal('60.00')

        advance = unapply_advance(advance=advance)

        box.refresh_from_db()
        assert advance.box is None
        assert box.closing_balance == Decimal('10.00')

    def test_unapply_unlinked(self, employee, make_advance):
        with pytest.raises(AdvanceNotAppliedError):
            unapply_advance(advance=make_advance(employee, '5'))

    def test_update_and_hide_unlinked(self, employee, make_advance):
        advance = make_advance(employee, '5')

        advance = update_advance(advance=advance, amount=Decimal('7.50'), note='Pedágio')
        assert advance.amount == Decimal('7.50')

        advance = hide_advance(advance=advance)
        assert advance.is_hidden is True


# =============================================================================
# Statistics Tests
# =============================================================================

@pytest.mark.django_db
class TestStatistics:

    def test_totals_and_destinations(self, employee, other_employee, make_box, make_advance):
        box = make_box(
            employee,
            destination='Vitória',
            entries=[entry(credit='200', date=date(2024, 3, 5)), entry(debit='50', date=date(2024, 2, 10))],
        )
        apply_advance(advance=make_advance(employee, '80', date=date(2024, 3, 6)), box=box)
        make_box(other_employee, destination='Vitória', entries=[entry(debit='20', date=date(2024, 3, 7))])
        make_box(other_employee, destination='Ipatinga')

        stats = get_travel_statistics(
            queryset=TravelCashBox.objects.filter(is_hidden=False),
            today=date(2024, 3, 20),
        )

        assert stats['box_count'] == 3
        assert stats['total_credits'] == Decimal('200.00')
        assert stats['total_debits'] == Decimal('70.00')
        assert stats['total_advances'] == Decimal('80.00')
        assert stats['balance'] == Decimal('210.00')
        assert stats['month_credits'] == Decimal('200.00')
        assert stats['month_debits'] == Decimal('20.00')
        assert stats['month_balance'] == Decimal('260.00')
        assert [d['destination'] for d in stats['destinations']] == ['Vitória', 'Ipatinga']
        assert stats['destinations'][0]['count'] == 2

    def test_empty(self, db):
        stats = get_travel_statistics(queryset=TravelCashBox.objects.none())

        assert stats['box_count'] == 0
        assert stats['balance'] == Decimal('0.00')
        assert stats['destinations'] == []
