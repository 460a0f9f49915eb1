"""User administration service."""

from django.db import transaction
from django.contrib.auth import get_user_model

User = get_user_model()

EDITABLE_FIELDS = ('first_name', 'last_name', 'cpf', 'role', 'is_active')


@transaction.atomic
def update_user(*, user: User, **fields) -> User:
    """
    Update the editable profile fields of a user.

    Unknown keys are ignored; email and password have their own flows.
    """
    user = User.objects.select_for_update().get(pk=user.pk)

    changed = []
    for name in EDITABLE_FIELDS:
        if name in fields:
            setattr(user, name, fields[name])
            changed.append(name)

    if changed:
        user.save(update_fields=changed + ['updated_at'])

    return user


@transaction.atomic
def toggle_user_visibility(*, user: User) -> User:
    """Hide a visible user or show a hidden one."""
    user = User.objects.select_for_update().get(pk=user.pk)
    user.is_hidden = not user.is_hidden
    user.save(update_fields=['is_hidden', 'updated_at'])
    return user
