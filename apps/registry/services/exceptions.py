"""Domain-specific exceptions for registry services."""


class RegistryServiceError(Exception):
    """Base exception for registry services."""
    pass


class RecordNotFoundError(RegistryServiceError):
    """Raised when a company, employee or vehicle does not exist."""
    pass


class DuplicateCompanyError(RegistryServiceError):
    """Raised when another company already uses the CNPJ."""
    pass


class DuplicateEmployeeError(RegistryServiceError):
    """Raised when another employee already uses the CPF."""
    pass


class DuplicateVehicleError(RegistryServiceError):
    """Raised when another visible vehicle already uses the plate."""
    pass
