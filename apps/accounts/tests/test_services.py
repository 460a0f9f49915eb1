"""
Service layer unit tests for accounts app.
"""

import pytest

from apps.accounts.models import Page, PagePermission, UserRole
from apps.accounts.services import (
    register_user,
    authenticate_user,
    change_password,
    update_user,
    toggle_user_visibility,
    get_user_permissions,
    has_page_permission,
    replace_user_permissions,
)
from apps.accounts.services.exceptions import (
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UnknownPageError,
)


@pytest.mark.django_db
class TestUserRegistration:

    def test_register_user(self):
        user = register_user(
            email='maria@example.com',
            password='SecurePass123!',
            first_name='Maria',
            role=UserRole.ADMIN,
        )

        assert user.check_password('SecurePass123!')
        assert user.is_admin is True

    def test_register_duplicate_email_any_case(self, user):
        with pytest.raises(UserRegistrationError):
            register_user(email='TESTUSER@example.com', password='SecurePass123!')


@pytest.mark.django_db
class TestAuthentication:

    def test_authenticate_sets_last_login(self, user):
        assert user.last_login is None
        authenticated = authenticate_user(email=user.email, password='TestPass123!')
        assert authenticated.last_login is not None

    def test_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='nope')

    def test_inactive(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')


@pytest.mark.django_db
class TestUserManagement:

    def test_change_password(self, user):
        change_password(user=user, current_password='TestPass123!', new_password='Another123!')
        user.refresh_from_db()
        assert user.check_password('Another123!')

    def test_change_password_wrong_current(self, user):
        with pytest.raises(InvalidCredentialsError):
            change_password(user=user, current_password='bad', new_password='Another123!')

    def test_update_ignores_unknown_fields(self, user):
        updated = update_user(user=user, first_name='Novo', email='hack@example.com')
        assert updated.first_name == 'Novo'
        assert updated.email == 'testuser@example.com'

    def test_toggle_visibility_twice(self, user):
        assert toggle_user_visibility(user=user).is_hidden is True
        assert toggle_user_visibility(user=user).is_hidden is False


@pytest.mark.django_db
class TestPagePermissions:

    def test_defaults(self, user):
        permissions = get_user_permissions(user=user)

        assert set(permissions) == set(Page.values)
        assert permissions['home'] == {
            'can_access': True,
            'can_edit': False,
            'can_delete': False,
            'can_create': False,
        }

    def test_has_page_permission_uses_stored_row(self, user):
        PagePermission.objects.create(user=user, page=Page.COMPANIES, can_access=True)

        assert has_page_permission(user=user, page=Page.COMPANIES) is True
        assert has_page_permission(user=user, page=Page.COMPANIES, flag='can_delete') is False
        assert has_page_permission(user=user, page=Page.VEHICLES) is False

    def test_admin_has_everything(self, admin_user):
        assert has_page_permission(user=admin_user, page=Page.USERS, flag='can_delete') is True

    def test_replace_removes_previous_rows(self, user):
        replace_user_permissions(user=user, permissions={
            'companies': {'can_access': True},
            'vehicles': {'can_access': True},
        })
        permissions = replace_user_permissions(user=user, permissions={
            'employees': {'can_access': True, 'can_edit': True, 'can_create': False},
        })

        assert permissions['companies']['can_access'] is False
        assert permissions['employees']['can_edit'] is True
        assert permissions['employees']['can_create'] is False
        assert PagePermission.objects.filter(user=user).count() == 1

    def test_replace_unknown_page(self, user):
        with pytest.raises(UnknownPageError):
            replace_user_permissions(user=user, permissions={'fuel_cards': {'can_access': True}})
