import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole, Page, PagePermission
from apps.registry.models import Company, Employee, Vehicle
from apps.travel.models import Advance
from apps.travel.services import create_box


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Regular user with access to the travel boxes page."""
    user = User.objects.create_user(
        email='traveler@example.com',
        password='TestPass123!',
        first_name='Travel',
        last_name='Clerk',
    )
    PagePermission.objects.create(
        user=user,
        page=Page.TRAVEL_BOXES,
        can_access=True,
        can_edit=True,
        can_create=True,
        can_delete=True,
    )
    return user


@pytest.fixture
def other_user(db):
    """Another regular user with the same page flags."""
    user = User.objects.create_user(
        email='other@example.com',
        password='OtherPass123!',
    )
    PagePermission.objects.create(
        user=user,
        page=Page.TRAVEL_BOXES,
        can_access=True,
        can_edit=True,
        can_create=True,
        can_delete=True,
    )
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
def other_employee(db, company):
    return Employee.objects.create(first_name='Maria', last_name='Souza', company=company)


@pytest.fixture
def vehicle(db):
    return Vehicle.objects.create(name='Carro', model='Strada', plate='ABC1D23')


@pytest.fixture
def make_box(user, company):
    """Create a box through the service layer."""
    def _make_box(employee, entries=(), created_by=None, **kwargs):
        kwargs.setdefault('destination', 'Belo Horizonte')
        kwargs.setdefault('date', date(2024, 3, 1))
        return create_box(
            created_by=created_by or user,
            employee=employee,
            company=kwargs.pop('company', company),
            entries=entries,
            **kwargs
        )
    return _make_box


@pytest.fixture
def make_advance(user):
    def _make_advance(employee, amount, **kwargs):
        kwargs.setdefault('date', date(2024, 3, 1))
        return Advance.objects.create(
            employee=employee,
            amount=Decimal(amount),
            created_by=user,
            **kwargs
        )
    return _make_advance

