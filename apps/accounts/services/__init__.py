"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UnknownPageError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .password_change import change_password
from .user_management import update_user, toggle_user_visibility
from .page_permissions import (
    get_user_permissions,
    has_page_permission,
    replace_user_permissions,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UnknownPageError',
    # Services
    'register_user',
    'authenticate_user',
    'change_password',
    'update_user',
    'toggle_user_visibility',
    'get_user_permissions',
    'has_page_permission',
    'replace_user_permissions',
]
