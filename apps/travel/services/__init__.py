"""Services for travel cash box business logic."""

from .exceptions import (
    TravelServiceError,
    BoxNotFoundError,
    EmployeeNotFoundError,
    AdvanceNotFoundError,
    AdvanceLockedError,
    AdvanceNotAppliedError,
    AdvanceHiddenError,
    AdvanceEmployeeMismatchError,
    SettlementDocumentError,
)
from .balances import (
    BoxTotals,
    BoxBalance,
    NextBoxNumber,
    RecalculationResult,
    compute_box_totals,
    recalculate_employee_chain,
    recalculate_balances,
    assign_next_box_number,
)
from .box_management import (
    get_box_by_id,
    create_box,
    update_box,
    replace_entries,
    toggle_box_visibility,
)
from .advances import (
    create_advance,
    update_advance,
    apply_advance,
    unapply_advance,
    hide_advance,
)
from .statistics import get_travel_statistics
from .settlement_document import (
    SettlementDocument,
    generate_settlement_document,
    plan_pages,
)

__all__ = [
    # Exceptions
    'TravelServiceError',
    'BoxNotFoundError',
    'EmployeeNotFoundError',
    'AdvanceNotFoundError',
    'AdvanceLockedError',
    'AdvanceNotAppliedError',
    'AdvanceHiddenError',
    'AdvanceEmployeeMismatchError',
    'SettlementDocumentError',
    # Balances
    'BoxTotals',
    'BoxBalance',
    'NextBoxNumber',
    'RecalculationResult',
    'compute_box_totals',
    'recalculate_employee_chain',
    'recalculate_balances',
    'assign_next_box_number',
    # Box Management
    'get_box_by_id',
    'create_box',
    'update_box',
    'replace_entries',
    'toggle_box_visibility',
    # Advances
    'create_advance',
    'update_advance',
    'apply_advance',
    'unapply_advance',
    'hide_advance',
    # Statistics
    'get_travel_statistics',
    # Settlement Document
    'SettlementDocument',
    'generate_settlement_document',
    'plan_pages',
]
