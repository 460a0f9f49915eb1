"""Domain-specific exceptions for current account services."""


class CurrentAccountServiceError(Exception):
    """Base exception for current account services."""
    pass


class AccountNotFoundError(CurrentAccountServiceError):
    """Raised when a current account does not exist."""
    pass


class EmptyEntryError(CurrentAccountServiceError):
    """Raised when an entry carries neither a credit nor a debit."""
    pass


class AccountDocumentError(CurrentAccountServiceError):
    """Raised when the account PDF cannot be produced."""
    pass
