from apps.accounts.models import Page
from apps.accounts.services import has_page_permission


def can_see_all_boxes(user):
    """Administrators and holders of the "all boxes" page see every box."""
    return user.is_admin or has_page_permission(
        user=user,
        page=Page.TRAVEL_BOXES_ALL,
        flag='can_access',
    )
