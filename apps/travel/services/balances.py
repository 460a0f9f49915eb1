"""
Ledger balance reconciliation.

Every employee owns a chain of travel cash boxes ordered by box number.
The first visible box keeps its stored opening balance (zero, or the
manual value given when it was created); each later box opens with the
closing balance of the one before it. A box closes at

    opening + credits + linked advances - debits

Advances count on the credit side. The list views, statistics and the
settlement document use the same convention.

Each employee chain is recalculated inside one transaction while holding
a row lock on the employee, so concurrent writers for the same employee
are serialized.
"""

import logging
from decimal import Decimal
from typing import List, NamedTuple, Optional

from django.db import transaction, DatabaseError

from apps.registry.models import Employee
from ..models import TravelCashBox
from .exceptions import EmployeeNotFoundError

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

# Box numbers are server assigned; creation time breaks accidental ties.
BOX_ORDER = ('box_number', 'created_at', 'id')


class BoxTotals(NamedTuple):
    credits: Decimal
    debits: Decimal
    advances: Decimal

    def closing(self, opening: Decimal) -> Decimal:
        return opening + self.credits + self.advances - self.debits


class BoxBalance(NamedTuple):
    box_id: int
    box_number: int
    employee_id: int
    opening_balance: Decimal
    credits: Decimal
    debits: Decimal
    advances: Decimal
    closing_balance: Decimal


class RecalculationFailure(NamedTuple):
    employee_id: int
    error: str


class RecalculationResult(NamedTuple):
    boxes: List[BoxBalance]
    failures: List[RecalculationFailure]


class NextBoxNumber(NamedTuple):
    next_number: int
    opening_balance: Decimal


def compute_box_totals(box: TravelCashBox) -> BoxTotals:
    """
    Sum a box's entries and linked advances.

    Works on prefetched ``entries`` / ``advances`` when available. Entries
    without a credit or debit value count as zero.

    Example:
        >>> totals = compute_box_totals(box)
        >>> totals.closing(box.opening_balance)
        Decimal('70.00')
    """
    credits = ZERO
    debits = ZERO
    for entry in box.entries.all():
        if entry.credit is not None:
            credits += entry.credit
        if entry.debit is not None:
            debits += entry.debit

    advances = sum((advance.amount for advance in box.advances.all()), ZERO)

    return BoxTotals(credits=credits, debits=debits, advances=advances)


def lock_employee(employee_id: int) -> Optional[Employee]:
    """
    Take the per-employee row lock. Must run inside a transaction.

    Returns None when the employee does not exist.
    """
    return Employee.objects.select_for_update().filter(pk=employee_id).first()


@transaction.atomic
def recalculate_employee_chain(*, employee_id: int) -> List[BoxBalance]:
    """
    Recalculate every visible box of one employee.

    Runs as a single atomic read-modify-write under the employee lock;
    storage errors propagate to the caller and roll the chain back.
    Employees without boxes (or unknown ids) are a no-op.
    """
    if lock_employee(employee_id) is None:
        return []

    boxes = (
        TravelCashBox.objects
        .filter(employee_id=employee_id, is_hidden=False)
        .order_by(*BOX_ORDER)
        .prefetch_related('entries', 'advances')
    )

    results = []
    previous_closing = None

    for box in boxes:
        if previous_closing is None:
            opening = box.opening_balance
        else:
            opening = previous_closing

        totals = compute_box_totals(box)
        closing = totals.closing(opening)

        if box.opening_balance != opening or box.closing_balance != closing:
            box.opening_balance = opening
            box.closing_balance = closing
            box.save(update_fields=['opening_balance', 'closing_balance', 'updated_at'])

        results.append(BoxBalance(
            box_id=box.pk,
            box_number=box.box_number,
            employee_id=employee_id,
            opening_balance=opening,
            credits=totals.credits,
            debits=totals.debits,
            advances=totals.advances,
            closing_balance=closing,
        ))
        previous_closing = closing

    return results


def recalculate_balances(*, employee_id: Optional[int] = None) -> RecalculationResult:
    """
    Recalculate opening and closing balances of box chains.

    Args:
        employee_id: Only recalculate this employee; every employee that
            owns visible boxes when omitted

    Returns:
        RecalculationResult with the per-box balances and one failure per
        employee whose chain could not be written. A failing employee is
        rolled back on its own; the others still run.

    Example:
        >>> result = recalculate_balances(employee_id=employee.id)
        >>> [b.closing_balance for b in result.boxes]
        [Decimal('70.00'), Decimal('120.00')]
    """
    if employee_id is not None:
        employee_ids = [employee_id]
    else:
        employee_ids = list(
            TravelCashBox.objects
            .filter(is_hidden=False)
            .order_by('employee_id')
            .values_list('employee_id', flat=True)
            .distinct()
        )

    boxes = []
    failures = []

    for current_id in employee_ids:
        try:
            boxes.extend(recalculate_employee_chain(employee_id=current_id))
        except DatabaseError as e:
            logger.exception("Balance recalculation failed for employee %s", current_id)
            failures.append(RecalculationFailure(employee_id=current_id, error=str(e)))

    logger.info(
        "Recalculated %d box(es) for %d employee(s), %d failure(s)",
        len(boxes), len(employee_ids), len(failures)
    )
    return RecalculationResult(boxes=boxes, failures=failures)


def assign_next_box_number(*, employee_id: int) -> NextBoxNumber:
    """
    Number and opening balance for the employee's next box.

    The number follows the highest number ever assigned to the employee,
    hidden boxes included, so numbers are never reused. The opening
    balance is the closing balance of the latest visible box.

    Raises:
        EmployeeNotFoundError: If the employee does not exist

    Example:
        >>> assign_next_box_number(employee_id=new_employee.id)
        NextBoxNumber(next_number=1, opening_balance=Decimal('0.00'))
    """
    if not Employee.objects.filter(pk=employee_id).exists():
        raise EmployeeNotFoundError(f"Employee {employee_id} not found")

    boxes = TravelCashBox.objects.filter(employee_id=employee_id)

    highest = boxes.order_by('-box_number').values_list('box_number', flat=True).first()

    latest_visible = (
        boxes.filter(is_hidden=False)
        .order_by(*('-' + field for field in BOX_ORDER))
        .first()
    )

    return NextBoxNumber(
        next_number=(highest or 0) + 1,
        opening_balance=latest_visible.closing_balance if latest_visible else ZERO,
    )
