"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    cpf: str = "",
    role: str = UserRole.USER
) -> User:
    """
    Register a new dashboard user.

    Users are created by administrators from the user management page,
    there is no self sign-up.

    Args:
        email: User's email address (login)
        password: User's password (will be hashed)
        first_name: Optional first name
        last_name: Optional last name
        cpf: Optional CPF document number
        role: ADMIN or USER

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError(f"A user with email {email} already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            cpf=cpf,
            role=role,
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered user %s with role %s", user.email, user.role)
    return user
