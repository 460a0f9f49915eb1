"""Password change service."""

from django.db import transaction
from django.contrib.auth import get_user_model

from .exceptions import InvalidCredentialsError

User = get_user_model()


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str) -> User:
    """
    Replace the user's password after checking the current one.

    Raises:
        InvalidCredentialsError: If current_password does not match
    """
    user = User.objects.select_for_update().get(pk=user.pk)

    if not user.check_password(current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])

    return user
