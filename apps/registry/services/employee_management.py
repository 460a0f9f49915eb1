"""Employee registry operations."""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import Employee
from .exceptions import DuplicateEmployeeError

logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = (
    'first_name',
    'last_name',
    'email',
    'phone',
    'sector',
    'job_title',
    'cpf',
    'city',
    'state',
    'company',
)


def _check_cpf(cpf: str, exclude_id: Optional[int] = None) -> None:
    if not cpf or not cpf.strip():
        return
    existing = Employee.objects.filter(cpf=cpf)
    if exclude_id is not None:
        existing = existing.exclude(pk=exclude_id)
    if existing.exists():
        raise DuplicateEmployeeError(f"An employee with CPF {cpf} already exists")


@transaction.atomic
def create_employee(*, first_name: str, **fields) -> Employee:
    """
    Register an employee.

    Args:
        first_name: Required first name
        **fields: Any of last_name, email, phone, sector, job_title, cpf,
            city, state, company

    Raises:
        DuplicateEmployeeError: If the CPF is already registered
    """
    _check_cpf(fields.get('cpf', ''))

    data = {name: fields[name] for name in EMPLOYEE_FIELDS if name in fields}
    data['first_name'] = first_name
    employee = Employee.objects.create(**data)

    logger.info("Created employee %s (%s)", employee.pk, employee.full_name)
    return employee


@transaction.atomic
def update_employee(*, employee: Employee, **fields) -> Employee:
    """
    Update editable employee fields.

    Raises:
        DuplicateEmployeeError: If the new CPF belongs to another employee
    """
    if 'cpf' in fields:
        _check_cpf(fields['cpf'], exclude_id=employee.pk)

    changed = []
    for name in EMPLOYEE_FIELDS:
        if name in fields:
            setattr(employee, name, fields[name])
            changed.append(name)

    if changed:
        employee.save(update_fields=changed + ['updated_at'])
    return employee


def search_employees(*, search: Optional[str] = None, show_hidden: bool = False) -> QuerySet:
    """Employees matching name, CPF or sector."""
    queryset = Employee.objects.select_related('company')
    if not show_hidden:
        queryset = queryset.filter(is_hidden=False)
    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(cpf__icontains=search) |
            Q(sector__icontains=search)
        )
    return queryset
