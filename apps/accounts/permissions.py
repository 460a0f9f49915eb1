"""
Page-permission classes shared by every app.

Views declare the dashboard page they belong to; the flag checked depends
on the action being performed.
"""
from rest_framework.permissions import BasePermission

from .services import has_page_permission


ACTION_FLAGS = {
    'list': 'can_access',
    'retrieve': 'can_access',
    'create': 'can_create',
    'update': 'can_edit',
    'partial_update': 'can_edit',
    'destroy': 'can_delete',
}


class HasPagePermission(BasePermission):
    """
    Permission: user holds the flag of ``view.permission_page`` that the
    current action requires.

    Custom actions map to flags through ``view.page_action_flags``;
    unmapped actions require ``can_access``.

    Usage:
        class CompanyViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, HasPagePermission]
            permission_page = Page.COMPANIES
            page_action_flags = {'toggle_visibility': 'can_delete'}
    """

    message = 'You do not have permission to perform this action on this page.'

    def get_flag(self, view):
        custom = getattr(view, 'page_action_flags', {}) or {}
        action = getattr(view, 'action', None)
        if action in custom:
            return custom[action]
        return ACTION_FLAGS.get(action, 'can_access')

    def has_permission(self, request, view):
        page = getattr(view, 'permission_page', None)
        if page is None:
            return True
        return has_page_permission(
            user=request.user,
            page=page,
            flag=self.get_flag(view),
        )

