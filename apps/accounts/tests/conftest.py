import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


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
        last_name='User',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a user with the ADMIN role."""
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        first_name='Admin',
        last_name='User',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        first_name='Inactive',
        is_active=False,
    )


@pytest.fixture
def user_hidden(db):
    """Create and return a hidden user."""
    return User.objects.create_user(
        email='hidden@example.com',
        password='TestPass123!',
        first_name='Hidden',
        is_hidden=True,
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
