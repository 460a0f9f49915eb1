"""Statistics service - travel cash box totals for the dashboard."""

from datetime import date as date_type
from typing import Optional

from django.db.models import QuerySet
from django.utils import timezone

from .balances import ZERO, compute_box_totals

TOP_DESTINATIONS = 10
NO_DESTINATION = 'Sem destino'


def get_travel_statistics(*, queryset: QuerySet, today: Optional[date_type] = None) -> dict:
    """
    Calculate totals over a set of travel cash boxes.

    Advances linked to a box count on the credit side, as in the box
    balance. Current-month figures use the entry and advance dates.

    Args:
        queryset: Boxes visible to the caller
        today: Reference day for the current month (defaults to today)

    Returns:
        Dictionary with statistics:
        - box_count: int
        - total_credits / total_debits / total_advances: Decimal
        - balance: Decimal - credits + advances - debits
        - month_credits / month_debits / month_advances / month_balance
        - destinations: top 10 destinations by box count, each with
          {destination, count, credits, debits, advances, balance}

    Example:
        >>> stats = get_travel_statistics(queryset=TravelCashBox.objects.filter(is_hidden=False))
        >>> stats['balance']
        Decimal('230.00')
    """
    today = today or timezone.localdate()

    boxes = queryset.prefetch_related('entries', 'advances')

    totals = {'credits': ZERO, 'debits': ZERO, 'advances': ZERO}
    month = {'credits': ZERO, 'debits': ZERO, 'advances': ZERO}
    destinations = {}
    box_count = 0

    def in_month(value):
        return value is not None and value.year == today.year and value.month == today.month

    for box in boxes:
        box_count += 1
        box_totals = compute_box_totals(box)

        totals['credits'] += box_totals.credits
        totals['debits'] += box_totals.debits
        totals['advances'] += box_totals.advances

        for entry in box.entries.all():
            if in_month(entry.date):
                month['credits'] += entry.credit or ZERO
                month['debits'] += entry.debit or ZERO
        for advance in box.advances.all():
            if in_month(advance.date):
                month['advances'] += advance.amount

        name = (box.destination or '').strip() or NO_DESTINATION
        stats = destinations.setdefault(name, {
            'destination': name,
            'count': 0,
            'credits': ZERO,
            'debits': ZERO,
            'advances': ZERO,
        })
        stats['count'] += 1
        stats['credits'] += box_totals.credits
        stats['debits'] += box_totals.debits
        stats['advances'] += box_totals.advances

    for stats in destinations.values():
        stats['balance'] = stats['credits'] + stats['advances'] - stats['debits']

    top = sorted(
        destinations.values(),
        key=lambda item: (-item['count'], item['destination'])
    )[:TOP_DESTINATIONS]

    return {
        'box_count': box_count,
        'total_credits': totals['credits'],
        'total_debits': totals['debits'],
        'total_advances': totals['advances'],
        'balance': totals['credits'] + totals['advances'] - totals['debits'],
        'month_credits': month['credits'],
        'month_debits': month['debits'],
        'month_advances': month['advances'],
        'month_balance': month['credits'] + month['advances'] - month['debits'],
        'destinations': top,
    }
