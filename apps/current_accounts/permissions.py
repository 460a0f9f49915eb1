from apps.accounts.models import Page
from apps.accounts.services import has_page_permission


def can_see_all_accounts(user):
    """Administrators and holders of the "all accounts" page see every account."""
    return user.is_admin or has_page_permission(
        user=user,
        page=Page.CURRENT_ACCOUNTS_ALL,
        flag='can_access',
    )
