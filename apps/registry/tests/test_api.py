import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import Page
from apps.registry.models import Company, Employee, Vehicle


# =============================================================================
# Company Tests
# =============================================================================

@pytest.mark.django_db
class TestCompanyAPI:
    """Tests for /api/registry/companies/"""

    def test_list_requires_authentication(self, api_client):
        url = reverse('registry:company-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_requires_page_access(self, authenticated_client, company):
        url = reverse('registry:company-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_with_access(self, authenticated_client, grant, company):
        grant(Page.COMPANIES, can_access=True)
        url = reverse('registry:company-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Transportes Vale'

    def test_create_company(self, admin_client, admin_user):
        url = reverse('registry:company-list')
        response = admin_client.post(url, {
            'name': 'Mineração Rio Doce',
            'number': '02',
            'cnpj': '98.765.432/0001-10',
            'city': 'Governador Valadares',
        })

        assert response.status_code == status.HTTP_201_CREATED
        company = Company.objects.get(pk=response.data['id'])
        assert company.created_by == admin_user

    def test_create_duplicate_cnpj(self, admin_client, company):
        url = reverse('registry:company-list')
        response = admin_client.post(url, {'name': 'Outra', 'cnpj': company.cnpj})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_create_without_name(self, admin_client):
        url = reverse('registry:company-list')
        response = admin_client.post(url, {'number': '03'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data

    def test_create_requires_can_create(self, authenticated_client, grant):
        grant(Page.COMPANIES, can_access=True, can_edit=True)
        url = reverse('registry:company-list')
        response = authenticated_client.post(url, {'name': 'Nova'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_company(self, admin_client, company):
        url = reverse('registry:company-detail', kwargs={'pk': company.id})
        response = admin_client.patch(url, {'city': 'Ipatinga'})

        assert response.status_code == status.HTTP_200_OK
        company.refresh_from_db()
        assert company.city == 'Ipatinga'

    def test_destroy_hides(self, admin_client, company):
        url = reverse('registry:company-detail', kwargs={'pk': company.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        company.refresh_from_db()
        assert company.is_hidden is True
        assert Company.objects.filter(pk=company.id).exists()

    def test_destroy_missing(self, admin_client, db):
        url = reverse('registry:company-detail', kwargs={'pk': 999})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_hidden_excluded_unless_requested(self, admin_client, company):
        company.is_hidden = True
        company.save()
        url = reverse('registry:company-list')

        assert admin_client.get(url).data['count'] == 0
        assert admin_client.get(url, {'show_hidden': 'true'}).data['count'] == 1

    def test_toggle_visibility_restores(self, admin_client, company):
        company.is_hidden = True
        company.save()
        url = reverse('registry:company-toggle-visibility', kwargs={'pk': company.id})
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_hidden'] is False

    def test_search(self, admin_client, company):
        Company.objects.create(name='Outra Empresa')
        url = reverse('registry:company-list')
        response = admin_client.get(url, {'search': 'vale'})

        assert response.data['count'] == 1


# =============================================================================
# Employee Tests
# =============================================================================

@pytest.mark.django_db
class TestEmployeeAPI:
    """Tests for /api/registry/employees/"""

    def test_create_employee(self, admin_client, company):
        url = reverse('registry:employee-list')
        response = admin_client.post(url, {
            'first_name': 'Maria',
            'last_name': 'Souza',
            'cpf': '987.654.321-00',
            'company': company.id,
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['full_name'] == 'Maria Souza'
        assert response.data['company_name'] == company.name

    def test_create_duplicate_cpf(self, admin_client, employee):
        url = reverse('registry:employee-list')
        response = admin_client.post(url, {'first_name': 'Outro', 'cpf': employee.cpf})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_search_by_name(self, admin_client, employee):
        Employee.objects.create(first_name='Ana')
        url = reverse('registry:employee-list')
        response = admin_client.get(url, {'search': 'silva'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['full_name'] == 'João Silva'

    def test_destroy_hides(self, admin_client, employee):
        url = reverse('registry:employee-detail', kwargs={'pk': employee.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        employee.refresh_from_db()
        assert employee.is_hidden is True

    def test_destroy_requires_can_delete(self, authenticated_client, grant, employee):
        grant(Page.EMPLOYEES, can_access=True, can_edit=True)
        url = reverse('registry:employee-detail', kwargs={'pk': employee.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Vehicle Tests
# =============================================================================

@pytest.mark.django_db
class TestVehicleAPI:
    """Tests for /api/registry/vehicles/"""

    def test_create_vehicle_normalizes_plate(self, admin_client):
        url = reverse('registry:vehicle-list')
        response = admin_client.post(url, {'name': 'Caminhão', 'model': 'Atego', 'plate': 'xyz-1234'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['plate'] == 'XYZ1234'
        assert response.data['label'] == 'Atego - XYZ1234'

    def test_create_duplicate_plate(self, admin_client, vehicle):
        url = reverse('registry:vehicle-list')
        response = admin_client.post(url, {'name': 'Outro', 'plate': 'abc-1d23'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_with_access(self, authenticated_client, grant, vehicle):
        grant(Page.VEHICLES, can_access=True)
        url = reverse('registry:vehicle-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'][0]['label'] == 'Strada - ABC1D23'

    def test_destroy_hides(self, admin_client, vehicle):
        url = reverse('registry:vehicle-detail', kwargs={'pk': vehicle.id})
        admin_client.delete(url)

        vehicle.refresh_from_db()
        assert vehicle.is_hidden is True
        assert Vehicle.objects.count() == 1
