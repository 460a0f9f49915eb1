"""Services for registry business logic."""

from .exceptions import (
    RegistryServiceError,
    RecordNotFoundError,
    DuplicateCompanyError,
    DuplicateEmployeeError,
    DuplicateVehicleError,
)
from .company_management import (
    create_company,
    update_company,
    search_companies,
)
from .employee_management import (
    create_employee,
    update_employee,
    search_employees,
)
from .vehicle_management import (
    create_vehicle,
    update_vehicle,
    search_vehicles,
)
from .visibility import set_record_visibility

__all__ = [
    # Exceptions
    'RegistryServiceError',
    'RecordNotFoundError',
    'DuplicateCompanyError',
    'DuplicateEmployeeError',
    'DuplicateVehicleError',
    # Companies
    'create_company',
    'update_company',
    'search_companies',
    # Employees
    'create_employee',
    'update_employee',
    'search_employees',
    # Vehicles
    'create_vehicle',
    'update_vehicle',
    'search_vehicles',
    # Visibility
    'set_record_visibility',
]
