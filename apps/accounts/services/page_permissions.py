"""
Page permission service.

Every dashboard page carries four flags per user. Users without a stored
row for a page fall back to the defaults below; administrators get every
flag on every page.
"""

from typing import Dict

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import Page, PagePermission
from .exceptions import UnknownPageError

User = get_user_model()

FLAGS = ('can_access', 'can_edit', 'can_delete', 'can_create')

CLOSED = {flag: False for flag in FLAGS}
OPEN = {flag: True for flag in FLAGS}

DEFAULT_PERMISSIONS = {
    page: dict(CLOSED) for page in Page.values
}
DEFAULT_PERMISSIONS[Page.HOME] = {**CLOSED, 'can_access': True}


def get_user_permissions(*, user: User) -> Dict[str, Dict[str, bool]]:
    """
    Return the full page -> flags map for a user.

    Example:
        >>> perms = get_user_permissions(user=user)
        >>> perms['home']['can_access']
        True
    """
    if user.is_admin:
        return {page: dict(OPEN) for page in Page.values}

    permissions = {page: dict(flags) for page, flags in DEFAULT_PERMISSIONS.items()}
    for row in PagePermission.objects.filter(user=user):
        permissions[row.page] = row.as_flags()
    return permissions


def has_page_permission(*, user: User, page: str, flag: str = 'can_access') -> bool:
    """Check a single flag without building the full map."""
    if not user or not user.is_authenticated:
        return False
    if user.is_admin:
        return True

    row = PagePermission.objects.filter(user=user, page=page).first()
    if row is None:
        return DEFAULT_PERMISSIONS.get(page, CLOSED).get(flag, False)
    return getattr(row, flag, False)


@transaction.atomic
def replace_user_permissions(
    *,
    user: User,
    permissions: Dict[str, Dict[str, bool]]
) -> Dict[str, Dict[str, bool]]:
    """
    Replace all stored permission rows of a user.

    Missing flags default to False; ``can_create`` falls back to
    ``can_edit`` when the payload omits it.

    Raises:
        UnknownPageError: If the payload names an unknown page
    """
    unknown = set(permissions) - set(Page.values)
    if unknown:
        raise UnknownPageError(f"Unknown pages: {', '.join(sorted(unknown))}")

    PagePermission.objects.filter(user=user).delete()

    rows = []
    for page, flags in permissions.items():
        can_edit = bool(flags.get('can_edit', False))
        rows.append(PagePermission(
            user=user,
            page=page,
            can_access=bool(flags.get('can_access', False)),
            can_edit=can_edit,
            can_delete=bool(flags.get('can_delete', False)),
            can_create=bool(flags.get('can_create', can_edit)),
        ))
    PagePermission.objects.bulk_create(rows)

    return get_user_permissions(user=user)
