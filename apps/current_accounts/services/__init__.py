"""Services for current account business logic."""

from .exceptions import (
    CurrentAccountServiceError,
    AccountNotFoundError,
    EmptyEntryError,
    AccountDocumentError,
)
from .account_management import (
    AccountTotals,
    compute_account_totals,
    get_account_by_id,
    create_account,
    update_account,
    replace_entries,
    add_entry,
    toggle_account_visibility,
)
from .statistics import get_account_statistics, get_account_summary
from .account_document import (
    AccountDocument,
    generate_account_document,
)

__all__ = [
    # Exceptions
    'CurrentAccountServiceError',
    'AccountNotFoundError',
    'EmptyEntryError',
    'AccountDocumentError',
    # Account Management
    'AccountTotals',
    'compute_account_totals',
    'get_account_by_id',
    'create_account',
    'update_account',
    'replace_entries',
    'add_entry',
    'toggle_account_visibility',
    # Statistics
    'get_account_statistics',
    'get_account_summary',
    # Account Document
    'AccountDocument',
    'generate_account_document',
]
