"""Travel cash box lifecycle operations."""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.registry.models import Company, Employee, Vehicle
from ..models import TravelCashBox, LedgerEntry
from .balances import (
    assign_next_box_number,
    lock_employee,
    recalculate_employee_chain,
)
from .exceptions import BoxNotFoundError, EmployeeNotFoundError

User = get_user_model()

logger = logging.getLogger(__name__)

ENTRY_FIELDS = (
    'date',
    'document_number',
    'description',
    'cost_type',
    'counterparty',
    'credit',
    'debit',
)

# Box number, opening balance and employee are fixed at creation.
UPDATABLE_FIELDS = ('destination', 'date', 'company', 'vehicle', 'note')


def _build_entries(box: TravelCashBox, entries: Iterable[Dict[str, Any]]) -> List[LedgerEntry]:
    rows = []
    for position, data in enumerate(entries):
        values = {name: data.get(name) for name in ENTRY_FIELDS}
        for name in ('document_number', 'description', 'cost_type', 'counterparty'):
            values[name] = values[name] or ''
        rows.append(LedgerEntry(box=box, position=position, **values))
    return rows


def get_box_by_id(box_id: int) -> TravelCashBox:
    """
    Raises:
        BoxNotFoundError: If no box has the id
    """
    try:
        return (
            TravelCashBox.objects
            .select_related('employee', 'company', 'vehicle', 'created_by')
            .get(pk=box_id)
        )
    except (TravelCashBox.DoesNotExist, ValueError):
        raise BoxNotFoundError(f"Travel cash box {box_id} not found")


@transaction.atomic
def create_box(
    *,
    created_by: User,
    employee: Employee,
    company: Company,
    destination: str,
    date: date_type,
    vehicle: Optional[Vehicle] = None,
    note: str = '',
    opening_balance: Optional[Decimal] = None,
    entries: Iterable[Dict[str, Any]] = ()
) -> TravelCashBox:
    """
    Create a box at the end of the employee's chain.

    This operation:
    1. Locks the employee so numbering and balances cannot interleave
    2. Assigns the next box number and carried-forward opening balance
    3. Honours ``opening_balance`` only when the employee has no visible
       box yet (manual starting balance)
    4. Inserts the ledger entries
    5. Recalculates the employee's chain

    Args:
        created_by: User creating the box
        employee: Owner of the box
        company: Company the trip is billed to
        destination: Trip destination
        date: Trip date
        vehicle: Optional vehicle used
        note: Free-text note
        opening_balance: Manual opening balance for a first box
        entries: Iterable of dicts with ledger entry fields

    Returns:
        The created TravelCashBox with its balances computed

    Raises:
        EmployeeNotFoundError: If the employee does not exist
    """
    if lock_employee(employee.pk) is None:
        raise EmployeeNotFoundError(f"Employee {employee.pk} not found")

    numbering = assign_next_box_number(employee_id=employee.pk)

    opening = numbering.opening_balance
    is_first = not TravelCashBox.objects.filter(employee=employee, is_hidden=False).exists()
    if is_first and opening_balance is not None:
        opening = opening_balance

    box = TravelCashBox.objects.create(
        box_number=numbering.next_number,
        date=date,
        destination=destination,
        opening_balance=opening,
        closing_balance=opening,
        employee=employee,
        company=company,
        vehicle=vehicle,
        note=note,
        created_by=created_by,
    )

    LedgerEntry.objects.bulk_create(_build_entries(box, entries))

    recalculate_employee_chain(employee_id=employee.pk)
    box.refresh_from_db()

    logger.info(
        "Created travel cash box %s (number %s) for employee %s",
        box.pk, box.box_number, employee.pk
    )
    return box


@transaction.atomic
def update_box(
    *,
    box: TravelCashBox,
    entries: Optional[Iterable[Dict[str, Any]]] = None,
    **fields
) -> TravelCashBox:
    """
    Edit the descriptive fields of a box.

    Unknown keys and the immutable fields (employee, box number, opening
    balance) are ignored. When ``entries`` is given it replaces every
    entry of the box; the field edit and the new entries commit together.
    """
    lock_employee(box.employee_id)
    box = TravelCashBox.objects.select_for_update().get(pk=box.pk)

    changed = []
    for name in UPDATABLE_FIELDS:
        if name in fields:
            setattr(box, name, fields[name])
            changed.append(name)

    if changed:
        box.save(update_fields=changed + ['updated_at'])

    if entries is not None:
        box = replace_entries(box=box, entries=entries)

    return box


@transaction.atomic
def replace_entries(*, box: TravelCashBox, entries: Iterable[Dict[str, Any]]) -> TravelCashBox:
    """
    Replace all ledger entries of a box, then recalculate the chain.

    The delete and the re-insert commit together.
    """
    lock_employee(box.employee_id)

    LedgerEntry.objects.filter(box=box).delete()
    rows = LedgerEntry.objects.bulk_create(_build_entries(box, entries))

    recalculate_employee_chain(employee_id=box.employee_id)
    box.refresh_from_db()

    logger.info("Replaced entries of box %s with %d row(s)", box.pk, len(rows))
    return box


@transaction.atomic
def toggle_box_visibility(*, box: TravelCashBox) -> TravelCashBox:
    """
    Hide a visible box or show a hidden one.

    Hidden boxes leave the employee's chain, so the chain is recalculated.
    """
    lock_employee(box.employee_id)

    box = TravelCashBox.objects.select_for_update().get(pk=box.pk)
    box.is_hidden = not box.is_hidden
    box.save(update_fields=['is_hidden', 'updated_at'])

    recalculate_employee_chain(employee_id=box.employee_id)
    box.refresh_from_db()

    logger.info(
        "Travel cash box %s is now %s",
        box.pk, 'hidden' if box.is_hidden else 'visible'
    )
    return box
