import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole, Page, PagePermission
from apps.registry.models import Company, Employee
from apps.current_accounts.services import create_account


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def _grant(user):
    PagePermission.objects.create(
        user=user,
        page=Page.CURRENT_ACCOUNTS,
        can_access=True,
        can_edit=True,
        can_create=True,
        can_delete=True,
    )


@pytest.fixture
def user(db):
    """Regular user with access to the current accounts page."""
    user = User.objects.create_user(
        email='clerk@example.com',
        password='TestPass123!',
        first_name='Ana',
        last_name='Lima',
    )
    _grant(user)
    return user


@pytest.fixture
def other_user(db):
    user = User.objects.create_user(
        email='other@example.com',
        password='OtherPass123!',
    )
    _grant(user)
    return user


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        role=UserRole.ADMIN,
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def authenticated_client(user):
    """API client authenticated as the regular user."""
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def company(db):
    return Company.objects.create(name='Transportes Vale', number='01')


@pytest.fixture
def employee(db, company):
    return Employee.objects.create(first_name='João', last_name='Silva', company=company)


@pytest.fixture
def make_account(user):
    """Create an account through the service layer."""
    def _make_account(entries=(), owner=None, **kwargs):
        kwargs.setdefault('date', date(2024, 3, 1))
        return create_account(owner=owner or user, entries=entries, **kwargs)
    return _make_account
