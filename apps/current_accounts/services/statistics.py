"""Statistics service - current account totals and per-user summary."""

from datetime import date as date_type
from typing import Optional

from django.db.models import QuerySet
from django.utils import timezone

from ..models import AccountKind
from .account_management import ZERO, compute_account_totals

TOP_COUNTERPARTIES = 5
NO_COUNTERPARTY = 'Sem fornecedor'


def get_account_statistics(*, queryset: QuerySet, today: Optional[date_type] = None) -> dict:
    """
    Calculate totals over a set of current accounts.

    Current-month figures use the entry dates.

    Returns:
        Dictionary with statistics:
        - account_count: int
        - total_credits / total_debits / balance: Decimal
        - month_credits / month_debits / month_balance: Decimal
    """
    today = today or timezone.localdate()

    account_count = 0
    credits = debits = ZERO
    month_credits = month_debits = ZERO

    for account in queryset.prefetch_related('entries'):
        account_count += 1
        for entry in account.entries.all():
            credits += entry.credit or ZERO
            debits += entry.debit or ZERO
            if entry.date.year == today.year and entry.date.month == today.month:
                month_credits += entry.credit or ZERO
                month_debits += entry.debit or ZERO

    return {
        'account_count': account_count,
        'total_credits': credits,
        'total_debits': debits,
        'balance': credits - debits,
        'month_credits': month_credits,
        'month_debits': month_debits,
        'month_balance': month_credits - month_debits,
    }


def get_account_summary(*, queryset: QuerySet) -> dict:
    """
    Break a user's visible accounts down by kind, balance sign and
    counterparty.

    Args:
        queryset: Visible accounts of one user

    Returns:
        Dictionary with:
        - account_count / total_credits / total_debits / balance
        - by_kind: one row per kind that has accounts, each with
          {kind, label, count, credits, debits, balance}
        - by_balance: {positive, negative, total} account counts; a zero
          balance counts as neither
        - top_counterparties: top 5 by summed absolute balance, each with
          {name, amount, count}

    Example:
        >>> summary = get_account_summary(queryset=user.current_accounts.filter(is_hidden=False))
        >>> summary['by_balance']
        {'positive': 2, 'negative': 1, 'total': 3}
    """
    credits = debits = ZERO
    by_kind = {}
    by_balance = {'positive': 0, 'negative': 0, 'total': 0}
    counterparties = {}

    for account in queryset.prefetch_related('entries'):
        totals = compute_account_totals(account)
        balance = totals.balance
        credits += totals.credits
        debits += totals.debits

        kind = by_kind.setdefault(account.kind, {
            'kind': account.kind,
            'label': AccountKind(account.kind).label,
            'count': 0,
            'credits': ZERO,
            'debits': ZERO,
        })
        kind['count'] += 1
        kind['credits'] += totals.credits
        kind['debits'] += totals.debits

        by_balance['total'] += 1
        if balance > 0:
            by_balance['positive'] += 1
        elif balance < 0:
            by_balance['negative'] += 1

        name = (account.counterparty or '').strip() or NO_COUNTERPARTY
        counterparty = counterparties.setdefault(name, {'name': name, 'amount': ZERO, 'count': 0})
        counterparty['amount'] += abs(balance)
        counterparty['count'] += 1

    for kind in by_kind.values():
        kind['balance'] = kind['credits'] - kind['debits']

    top = sorted(
        counterparties.values(),
        key=lambda item: (-item['amount'], item['name'])
    )[:TOP_COUNTERPARTIES]

    return {
        'account_count': by_balance['total'],
        'total_credits': credits,
        'total_debits': debits,
        'balance': credits - debits,
        'by_kind': [by_kind[kind] for kind in AccountKind.values if kind in by_kind],
        'by_balance': by_balance,
        'top_counterparties': top,
    }
