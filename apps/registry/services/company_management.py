"""Company registry operations."""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet
from django.contrib.auth import get_user_model

from ..models import Company
from .exceptions import DuplicateCompanyError

User = get_user_model()

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ('name', 'number', 'cnpj', 'city')


def _check_cnpj(cnpj: str, exclude_id: Optional[int] = None) -> None:
    if not cnpj or not cnpj.strip():
        return
    existing = Company.objects.filter(cnpj=cnpj)
    if exclude_id is not None:
        existing = existing.exclude(pk=exclude_id)
    if existing.exists():
        raise DuplicateCompanyError(f"CNPJ {cnpj} is already registered")


@transaction.atomic
def create_company(
    *,
    name: str,
    created_by: Optional[User] = None,
    number: str = '',
    cnpj: str = '',
    city: str = ''
) -> Company:
    """
    Register a company.

    Raises:
        DuplicateCompanyError: If the CNPJ is already registered
    """
    _check_cnpj(cnpj)

    company = Company.objects.create(
        name=name,
        number=number,
        cnpj=cnpj,
        city=city,
        created_by=created_by,
    )
    logger.info("Created company %s (%s)", company.pk, company.name)
    return company


@transaction.atomic
def update_company(*, company: Company, **fields) -> Company:
    """
    Update editable company fields.

    Raises:
        DuplicateCompanyError: If the new CNPJ belongs to another company
    """
    if 'cnpj' in fields:
        _check_cnpj(fields['cnpj'], exclude_id=company.pk)

    changed = []
    for name in COMPANY_FIELDS:
        if name in fields:
            setattr(company, name, fields[name])
            changed.append(name)

    if changed:
        company.save(update_fields=changed + ['updated_at'])
    return company


def search_companies(*, search: Optional[str] = None, show_hidden: bool = False) -> QuerySet:
    """Companies matching name, number or CNPJ."""
    queryset = Company.objects.all()
    if not show_hidden:
        queryset = queryset.filter(is_hidden=False)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(number__icontains=search) |
            Q(cnpj__icontains=search)
        )
    return queryset
