"""Login for dashboard users."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid email or password"


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    Emails match case-insensitively. Hidden users are treated like
    deactivated ones: the password is right but the login is refused.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account deactivated or hidden
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email.strip())
        .first()
    )

    if user is None or not user.check_password(password):
        logger.info("Rejected login for %s", email)
        raise InvalidCredentialsError(INVALID_LOGIN)

    if user.is_hidden or not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user
