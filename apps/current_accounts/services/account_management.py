"""Current account lifecycle operations."""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.registry.models import Company, Employee
from ..models import AccountKind, CurrentAccount, AccountEntry
from .exceptions import AccountNotFoundError, EmptyEntryError

User = get_user_model()

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

ENTRY_FIELDS = ('date', 'document_number', 'note', 'credit', 'debit')

UPDATABLE_FIELDS = ('date', 'kind', 'counterparty', 'sector', 'note', 'company', 'employee')


class AccountTotals(NamedTuple):
    credits: Decimal
    debits: Decimal

    @property
    def balance(self) -> Decimal:
        return self.credits - self.debits


def compute_account_totals(account: CurrentAccount) -> AccountTotals:
    """
    Sum the credits and debits of an account.

    Iterates ``account.entries.all()`` so a prefetched queryset costs no
    extra query.
    """
    credits = ZERO
    debits = ZERO
    for entry in account.entries.all():
        credits += entry.credit or ZERO
        debits += entry.debit or ZERO
    return AccountTotals(credits=credits, debits=debits)


def _check_entry(data: Dict[str, Any]) -> None:
    if not data.get('credit') and not data.get('debit'):
        raise EmptyEntryError("An entry needs a credit or a debit amount")


def _build_entries(account: CurrentAccount, entries: Iterable[Dict[str, Any]], start: int = 0) -> List[AccountEntry]:
    rows = []
    for position, data in enumerate(entries, start=start):
        _check_entry(data)
        values = {name: data.get(name) for name in ENTRY_FIELDS}
        values['document_number'] = values['document_number'] or ''
        values['note'] = values['note'] or ''
        rows.append(AccountEntry(account=account, position=position, **values))
    return rows


def get_account_by_id(account_id: int) -> CurrentAccount:
    """
    Raises:
        AccountNotFoundError: If no account has the id
    """
    try:
        return (
            CurrentAccount.objects
            .select_related('owner', 'company', 'employee')
            .get(pk=account_id)
        )
    except (CurrentAccount.DoesNotExist, ValueError):
        raise AccountNotFoundError(f"Current account {account_id} not found")


@transaction.atomic
def create_account(
    *,
    owner: User,
    date: date_type,
    kind: str = AccountKind.PERSONAL,
    counterparty: str = '',
    sector: str = '',
    note: str = '',
    company: Optional[Company] = None,
    employee: Optional[Employee] = None,
    entries: Iterable[Dict[str, Any]] = ()
) -> CurrentAccount:
    """
    Create an account with its initial entries.

    Args:
        owner: User the account belongs to
        date: Account date
        kind: One of AccountKind
        counterparty: Supplier or customer name
        sector: Free-text sector
        note: Free-text note
        company: Optional company
        employee: Optional employee
        entries: Iterable of dicts with entry fields

    Returns:
        The created CurrentAccount

    Raises:
        EmptyEntryError: If an entry has neither credit nor debit; nothing
            is saved
    """
    account = CurrentAccount.objects.create(
        owner=owner,
        date=date,
        kind=kind,
        counterparty=counterparty,
        sector=sector,
        note=note,
        company=company,
        employee=employee,
    )
    AccountEntry.objects.bulk_create(_build_entries(account, entries))

    logger.info("Created current account %s for user %s", account.pk, owner.pk)
    return account


@transaction.atomic
def update_account(
    *,
    account: CurrentAccount,
    entries: Optional[Iterable[Dict[str, Any]]] = None,
    **fields
) -> CurrentAccount:
    """
    Edit an account; ``entries``, when given, replaces every entry.

    The owner cannot change. The field edit and the new entries commit
    together.
    """
    account = CurrentAccount.objects.select_for_update().get(pk=account.pk)

    changed = []
    for name in UPDATABLE_FIELDS:
        if name in fields:
            setattr(account, name, fields[name])
            changed.append(name)

    if changed:
        account.save(update_fields=changed + ['updated_at'])

    if entries is not None:
        account = replace_entries(account=account, entries=entries)

    return account


@transaction.atomic
def replace_entries(*, account: CurrentAccount, entries: Iterable[Dict[str, Any]]) -> CurrentAccount:
    """Replace all entries of an account; the delete and the re-insert commit together."""
    account = CurrentAccount.objects.select_for_update().get(pk=account.pk)

    rows = _build_entries(account, entries)
    AccountEntry.objects.filter(account=account).delete()
    AccountEntry.objects.bulk_create(rows)
    account.save(update_fields=['updated_at'])

    logger.info("Replaced entries of current account %s with %d row(s)", account.pk, len(rows))
    return account


@transaction.atomic
def add_entry(
    *,
    account: CurrentAccount,
    date: date_type,
    document_number: str = '',
    note: str = '',
    credit: Optional[Decimal] = None,
    debit: Optional[Decimal] = None
) -> AccountEntry:
    """
    Append one entry at the end of an account.

    Raises:
        EmptyEntryError: If neither credit nor debit is given
    """
    account = CurrentAccount.objects.select_for_update().get(pk=account.pk)

    last = account.entries.order_by('-position').values_list('position', flat=True).first()
    position = 0 if last is None else last + 1

    (entry,) = _build_entries(account, [{
        'date': date,
        'document_number': document_number,
        'note': note,
        'credit': credit,
        'debit': debit,
    }], start=position)
    entry.save()
    account.save(update_fields=['updated_at'])
    return entry


@transaction.atomic
def toggle_account_visibility(*, account: CurrentAccount) -> CurrentAccount:
    """Hide a visible account or show a hidden one."""
    account = CurrentAccount.objects.select_for_update().get(pk=account.pk)
    account.is_hidden = not account.is_hidden
    account.save(update_fields=['is_hidden', 'updated_at'])

    logger.info(
        "Current account %s is now %s",
        account.pk, 'hidden' if account.is_hidden else 'visible'
    )
    return account
