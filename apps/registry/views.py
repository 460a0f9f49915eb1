from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination

from apps.accounts.models import Page
from apps.accounts.permissions import HasPagePermission
from .models import Company, Employee, Vehicle
from .serializers import CompanySerializer, EmployeeSerializer, VehicleSerializer
from .services import (
    create_company,
    update_company,
    search_companies,
    create_employee,
    update_employee,
    search_employees,
    create_vehicle,
    update_vehicle,
    search_vehicles,
    set_record_visibility,
    RecordNotFoundError,
    DuplicateCompanyError,
    DuplicateEmployeeError,
    DuplicateVehicleError,
)


class RegistryPagination(PageNumberPagination):
    """Custom pagination for registry lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class HideOnDestroyMixin:
    """
    DELETE hides the record instead of removing it.

    ``toggle_visibility`` restores hidden records.
    """

    page_action_flags = {'toggle_visibility': 'can_delete'}

    def show_hidden(self):
        return (
            self.action != 'list'
            or self.request.query_params.get('show_hidden') == 'true'
        )

    def destroy(self, request, *args, **kwargs):
        """Hide a record."""
        try:
            set_record_visibility(
                model=self.queryset.model,
                record_id=kwargs.get('pk'),
                hidden=True,
            )
        except RecordNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def toggle_visibility(self, request, pk=None):
        """Hide a visible record or show a hidden one."""
        record = self.get_object()
        record = set_record_visibility(
            model=self.queryset.model,
            record_id=record.pk,
            hidden=not record.is_hidden,
        )
        return Response(self.get_serializer(record).data)


class CompanyViewSet(HideOnDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for Company CRUD operations.

    list: Get visible companies (``search``, ``show_hidden``)
    create: Register a company
    retrieve: Get a company
    update / partial_update: Edit a company
    destroy: Hide a company
    """

    queryset = Company.objects.all()
    serializer_class = CompanySerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = RegistryPagination
    permission_page = Page.COMPANIES

    def get_queryset(self):
        return search_companies(
            search=self.request.query_params.get('search'),
            show_hidden=self.show_hidden(),
        )

    def create(self, request, *args, **kwargs):
        """Register a company."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            company = create_company(created_by=request.user, **serializer.validated_data)
        except DuplicateCompanyError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CompanySerializer(company).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Edit a company."""
        company = self.get_object()
        serializer = self.get_serializer(
            company, data=request.data, partial=kwargs.pop('partial', False)
        )
        serializer.is_valid(raise_exception=True)

        try:
            company = update_company(company=company, **serializer.validated_data)
        except DuplicateCompanyError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CompanySerializer(company).data)


class EmployeeViewSet(HideOnDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for Employee CRUD operations.

    list: Get visible employees (``search``, ``show_hidden``)
    create: Register an employee
    retrieve: Get an employee
    update / partial_update: Edit an employee
    destroy: Hide an employee
    """

    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = RegistryPagination
    permission_page = Page.EMPLOYEES

    def get_queryset(self):
        return search_employees(
            search=self.request.query_params.get('search'),
            show_hidden=self.show_hidden(),
        )

    def create(self, request, *args, **kwargs):
        """Register an employee."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            employee = create_employee(**serializer.validated_data)
        except DuplicateEmployeeError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(EmployeeSerializer(employee).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Edit an employee."""
        employee = self.get_object()
        serializer = self.get_serializer(
            employee, data=request.data, partial=kwargs.pop('partial', False)
        )
        serializer.is_valid(raise_exception=True)

        try:
            employee = update_employee(employee=employee, **serializer.validated_data)
        except DuplicateEmployeeError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(EmployeeSerializer(employee).data)


class VehicleViewSet(HideOnDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for Vehicle CRUD operations.

    list: Get visible vehicles (``search``, ``show_hidden``)
    destroy: Hide a vehicle
    """

    queryset = Vehicle.objects.all()
    serializer_class = VehicleSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = RegistryPagination
    permission_page = Page.VEHICLES

    def get_queryset(self):
        return search_vehicles(
            search=self.request.query_params.get('search'),
            show_hidden=self.show_hidden(),
        )

    def create(self, request, *args, **kwargs):
        """Register a vehicle."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            vehicle = create_vehicle(**serializer.validated_data)
        except DuplicateVehicleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Edit a vehicle."""
        vehicle = self.get_object()
        serializer = self.get_serializer(
            vehicle, data=request.data, partial=kwargs.pop('partial', False)
        )
        serializer.is_valid(raise_exception=True)

        try:
            vehicle = update_vehicle(vehicle=vehicle, **serializer.validated_data)
        except DuplicateVehicleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VehicleSerializer(vehicle).data)
