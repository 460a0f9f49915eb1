"""
Advance (adiantamento) operations.

An advance belongs to one employee and may be linked to at most one box
of that same employee. While linked it is locked: it cannot be edited or
hidden until it is unapplied.
"""

import logging
from datetime import date as date_type
from decimal import Decimal

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.registry.models import Employee
from ..models import Advance, TravelCashBox
from .balances import lock_employee, recalculate_employee_chain
from .exceptions import (
    AdvanceNotFoundError,
    AdvanceLockedError,
    AdvanceNotAppliedError,
    AdvanceHiddenError,
    AdvanceEmployeeMismatchError,
    BoxNotFoundError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('date', 'amount', 'note', 'employee')


def _locked_advance(advance_id: int) -> Advance:
    try:
        return Advance.objects.select_for_update().get(pk=advance_id)
    except Advance.DoesNotExist:
        raise AdvanceNotFoundError(f"Advance {advance_id} not found")


@transaction.atomic
def create_advance(
    *,
    created_by: User,
    employee: Employee,
    date: date_type,
    amount: Decimal,
    note: str = ''
) -> Advance:
    """Register an advance. New advances are not linked to any box."""
    advance = Advance.objects.create(
        created_by=created_by,
        employee=employee,
        date=date,
        amount=amount,
        note=note,
    )
    logger.info("Created advance %s of %s for employee %s", advance.pk, amount, employee.pk)
    return advance


@transaction.atomic
def update_advance(*, advance: Advance, **fields) -> Advance:
    """
    Edit an unlinked advance.

    Raises:
        AdvanceLockedError: If the advance is linked to a box
    """
    advance = _locked_advance(advance.pk)

    if advance.is_applied:
        raise AdvanceLockedError(
            f"Advance {advance.pk} is applied to box {advance.box_id}; unapply it first"
        )

    changed = []
    for name in UPDATABLE_FIELDS:
        if name in fields:
            setattr(advance, name, fields[name])
            changed.append(name)

    if changed:
        advance.save(update_fields=changed + ['updated_at'])
    return advance


@transaction.atomic
def apply_advance(*, advance: Advance, box: TravelCashBox) -> Advance:
    """
    Link an advance to a box of the same employee and recalculate.

    Raises:
        AdvanceHiddenError: If the advance is hidden
        AdvanceLockedError: If the advance is already linked
        AdvanceEmployeeMismatchError: If the box belongs to another employee
        BoxNotFoundError: If the box is hidden
    """
    lock_employee(advance.employee_id)
    advance = _locked_advance(advance.pk)

    if advance.is_hidden:
        raise AdvanceHiddenError(f"Advance {advance.pk} is hidden")

    if advance.is_applied:
        raise AdvanceLockedError(
            f"Advance {advance.pk} is already applied to box {advance.box_id}"
        )

    if box.employee_id != advance.employee_id:
        raise AdvanceEmployeeMismatchError(
            "An advance can only be applied to a box of the same employee"
        )

    if box.is_hidden:
        raise BoxNotFoundError(f"Travel cash box {box.pk} is hidden")

    advance.box = box
    advance.save(update_fields=['box', 'updated_at'])

    recalculate_employee_chain(employee_id=advance.employee_id)

    logger.info("Applied advance %s to box %s", advance.pk, box.pk)
    return advance


@transaction.atomic
def unapply_advance(*, advance: Advance) -> Advance:
    """
    Unlink an advance from its box and recalculate.

    Raises:
        AdvanceNotAppliedError: If the advance is not linked
    """
    lock_employee(advance.employee_id)
    advance = _locked_advance(advance.pk)

    if not advance.is_applied:
        raise AdvanceNotAppliedError(f"Advance {advance.pk} is not applied to any box")

    box_id = advance.box_id
    advance.box = None
    advance.save(update_fields=['box', 'updated_at'])

    recalculate_employee_chain(employee_id=advance.employee_id)

    logger.info("Unapplied advance %s from box %s", advance.pk, box_id)
    return advance


@transaction.atomic
def hide_advance(*, advance: Advance) -> Advance:
    """
    Soft delete an advance.

    Raises:
        AdvanceLockedError: If the advance is linked to a box
    """
    advance = _locked_advance(advance.pk)

    if advance.is_applied:
        raise AdvanceLockedError(
            f"Advance {advance.pk} is applied to box {advance.box_id}; unapply it first"
        )

    advance.is_hidden = True
    advance.save(update_fields=['is_hidden', 'updated_at'])
    return advance
