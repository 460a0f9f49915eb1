"""Domain-specific exceptions for travel services."""


class TravelServiceError(Exception):
    """Base exception for travel services."""
    pass


class BoxNotFoundError(TravelServiceError):
    """Raised when a travel cash box does not exist."""
    pass


class EmployeeNotFoundError(TravelServiceError):
    """Raised when the employee owning a box sequence does not exist."""
    pass


class AdvanceNotFoundError(TravelServiceError):
    """Raised when an advance does not exist."""
    pass


class AdvanceLockedError(TravelServiceError):
    """Raised when changing an advance that is linked to a box."""
    pass


class AdvanceNotAppliedError(TravelServiceError):
    """Raised when unlinking an advance that is not linked to any box."""
    pass


class AdvanceHiddenError(TravelServiceError):
    """Raised when applying a hidden advance."""
    pass


class AdvanceEmployeeMismatchError(TravelServiceError):
    """Raised when linking an advance to a box of another employee."""
    pass


class SettlementDocumentError(TravelServiceError):
    """Raised when the settlement PDF cannot be produced."""
    pass
