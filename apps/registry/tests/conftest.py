import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole, Page, PagePermission
from apps.registry.models import Company, Employee, Vehicle


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a regular test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        first_name='Test',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a user with the ADMIN role."""
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an API client authenticated as the regular user."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(db, admin_user):
    """Return an API client authenticated as the administrator."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def grant(user):
    """Grant page flags to the regular user."""
    def _grant(page, **flags):
        return PagePermission.objects.create(user=user, page=page, **flags)
    return _grant


@pytest.fixture
def company(db):
    return Company.objects.create(name='Transportes Vale', number='01', cnpj='12.345.678/0001-90')


@pytest.fixture
def employee(db, company):
    return Employee.objects.create(
        first_name='João',
        last_name='Silva',
        cpf='123.456.789-00',
        company=company,
    )


@pytest.fixture
def vehicle(db):
    return Vehicle.objects.create(name='Carro', model='Strada', plate='ABC1D23')
