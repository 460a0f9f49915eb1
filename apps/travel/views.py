from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.models import Page
from apps.accounts.permissions import HasPagePermission
from .models import TravelCashBox, Advance
from .permissions import can_see_all_boxes
from .serializers import (
    BoxFilterSerializer,
    EntriesInputSerializer,
    TravelCashBoxCreateSerializer,
    TravelCashBoxUpdateSerializer,
    NextNumberQuerySerializer,
    RecalculateInputSerializer,
    SettlementQuerySerializer,
    AdvanceFilterSerializer,
    AdvanceCreateSerializer,
    AdvanceUpdateSerializer,
    ApplyAdvanceInputSerializer,
    TravelCashBoxSerializer,
    TravelCashBoxListSerializer,
    AdvanceSerializer,
    NextBoxNumberSerializer,
    BoxBalanceSerializer,
    RecalculationFailureSerializer,
    TravelStatisticsSerializer,
)
from .services import (
    create_box,
    update_box,
    replace_entries,
    toggle_box_visibility,
    assign_next_box_number,
    recalculate_balances,
    get_travel_statistics,
    generate_settlement_document,
    create_advance,
    update_advance,
    apply_advance,
    unapply_advance,
    hide_advance,
    EmployeeNotFoundError,
    BoxNotFoundError,
    SettlementDocumentError,
    AdvanceLockedError,
    AdvanceNotAppliedError,
    AdvanceHiddenError,
    AdvanceEmployeeMismatchError,
)


class TravelPagination(PageNumberPagination):
    """Custom pagination for boxes and advances."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TravelCashBoxViewSet(viewsets.ModelViewSet):
    """
    ViewSet for travel cash boxes.

    list: Boxes visible to the user (filterable)
    create: Create a box at the end of the employee's chain
    retrieve: Box with entries and advances
    update / partial_update: Edit descriptive fields, optionally replace entries
    destroy: Hide a box
    """

    queryset = (
        TravelCashBox.objects
        .select_related('employee', 'company', 'vehicle', 'created_by')
        .prefetch_related('entries', 'advances__employee', 'advances__box')
    )
    serializer_class = TravelCashBoxSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = TravelPagination
    permission_page = Page.TRAVEL_BOXES
    page_action_flags = {
        'entries': 'can_edit',
        'toggle_visibility': 'can_delete',
        'recalculate': 'can_edit',
    }

    def get_queryset(self):
        """
        Scope boxes to the user, then apply validated filters.

        Administrators and users with the "all boxes" page see every box;
        everyone else sees the boxes they created.
        """
        queryset = super().get_queryset()
        user = self.request.user

        if not can_see_all_boxes(user):
            queryset = queryset.filter(created_by=user)

        if self.action not in ('list', 'stats'):
            return queryset

        filter_serializer = BoxFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if not params.get('show_hidden'):
            queryset = queryset.filter(is_hidden=False)
        if 'employee' in params:
            queryset = queryset.filter(employee_id=params['employee'])
        if 'company' in params:
            queryset = queryset.filter(company_id=params['company'])
        if params.get('destination'):
            queryset = queryset.filter(destination__icontains=params['destination'])
        if 'date_from' in params:
            queryset = queryset.filter(date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(date__lte=params['date_to'])

        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return TravelCashBoxListSerializer
        elif self.action == 'create':
            return TravelCashBoxCreateSerializer
        elif self.action in ('update', 'partial_update'):
            return TravelCashBoxUpdateSerializer
        return TravelCashBoxSerializer

    def _detail(self, box):
        return TravelCashBoxSerializer(self.get_queryset().get(pk=box.pk)).data

    @extend_schema(request=TravelCashBoxCreateSerializer, responses={201: TravelCashBoxSerializer})
    def create(self, request, *args, **kwargs):
        """Create a box; number and opening balance are assigned by the server."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            box = create_box(created_by=request.user, **serializer.validated_data)
        except EmployeeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self._detail(box), status=status.HTTP_201_CREATED)

    @extend_schema(request=TravelCashBoxUpdateSerializer, responses={200: TravelCashBoxSerializer})
    def update(self, request, *args, **kwargs):
        """Edit a box. Employee, number and opening balance cannot change."""
        box = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        box = update_box(box=box, **serializer.validated_data)

        return Response(self._detail(box))

    def destroy(self, request, *args, **kwargs):
        """Hide a box; it leaves the employee's balance chain."""
        box = self.get_object()
        if not box.is_hidden:
            toggle_box_visibility(box=box)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=EntriesInputSerializer, responses={200: TravelCashBoxSerializer})
    @action(detail=True, methods=['put'])
    def entries(self, request, pk=None):
        """
        Replace all ledger entries of a box.

        PUT /api/travel/boxes/{id}/entries/
        Body: {"entries": [{"date": "2024-03-01", "description": "...", "credit": "100.00"}]}
        """
        box = self.get_object()
        serializer = EntriesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        box = replace_entries(box=box, entries=serializer.validated_data['entries'])
        return Response(self._detail(box))

    @action(detail=True, methods=['post'])
    def toggle_visibility(self, request, pk=None):
        """
        Hide a visible box or show a hidden one.

        POST /api/travel/boxes/{id}/toggle_visibility/
        """
        box = self.get_object()
        box = toggle_box_visibility(box=box)
        return Response(self._detail(box))

    @extend_schema(
        parameters=[OpenApiParameter('rows_per_page', int, required=False)],
        responses={(200, 'application/pdf'): OpenApiTypes.BINARY},
    )
    @action(detail=True, methods=['get'])
    def settlement(self, request, pk=None):
        """
        Download the settlement PDF of a box.

        GET /api/travel/boxes/{id}/settlement/
        """
        box = self.get_object()
        query = SettlementQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            document = generate_settlement_document(
                box_id=box.pk,
                rows_per_page=query.validated_data.get('rows_per_page'),
            )
        except BoxNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SettlementDocumentError as e:
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = HttpResponse(document.content, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{document.filename}"'
        response['X-Page-Count'] = str(document.page_count)
        return response

    @extend_schema(
        parameters=[OpenApiParameter('employee', int, required=True)],
        responses={200: NextBoxNumberSerializer},
    )
    @action(detail=False, methods=['get'])
    def next_number(self, request):
        """
        Number and opening balance of an employee's next box.

        GET /api/travel/boxes/next_number/?employee=1
        """
        query = NextNumberQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            numbering = assign_next_box_number(employee_id=query.validated_data['employee'])
        except EmployeeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(NextBoxNumberSerializer(numbering).data)

    @extend_schema(request=RecalculateInputSerializer)
    @action(detail=False, methods=['post'])
    def recalculate(self, request):
        """
        Recalculate balance chains.

        POST /api/travel/boxes/recalculate/
        Body: {"employee": 1} (optional; every employee when omitted)
        """
        serializer = RecalculateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = recalculate_balances(employee_id=serializer.validated_data.get('employee'))

        return Response({
            'message': f'{len(result.boxes)} box(es) recalculated',
            'boxes': BoxBalanceSerializer(result.boxes, many=True).data,
            'failures': RecalculationFailureSerializer(result.failures, many=True).data,
        })

    @extend_schema(responses={200: TravelStatisticsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Totals over the boxes visible to the user.

        GET /api/travel/boxes/stats/
        """
        statistics = get_travel_statistics(queryset=self.get_queryset())
        return Response(TravelStatisticsSerializer(statistics).data)


class AdvanceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for advances.

    list: Advances visible to the user (filterable)
    create: Register an advance
    update / partial_update: Edit an unlinked advance
    destroy: Hide an unlinked advance
    apply / unapply: Link to or unlink from a box
    """

    queryset = Advance.objects.select_related('employee', 'box')
    serializer_class = AdvanceSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = TravelPagination
    permission_page = Page.TRAVEL_BOXES
    page_action_flags = {
        'apply': 'can_edit',
        'unapply': 'can_edit',
    }

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user

        if not can_see_all_boxes(user):
            queryset = queryset.filter(created_by=user)

        if self.action != 'list':
            return queryset

        filter_serializer = AdvanceFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if not params.get('show_hidden'):
            queryset = queryset.filter(is_hidden=False)
        if 'employee' in params:
            queryset = queryset.filter(employee_id=params['employee'])
        if 'box' in params:
            queryset = queryset.filter(box_id=params['box'])
        if params.get('applied') is not None:
            queryset = queryset.filter(box__isnull=not params['applied'])

        return queryset

    @extend_schema(request=AdvanceCreateSerializer, responses={201: AdvanceSerializer})
    def create(self, request, *args, **kwargs):
        """Register an advance; it starts unlinked."""
        serializer = AdvanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        advance = create_advance(created_by=request.user, **serializer.validated_data)
        return Response(AdvanceSerializer(advance).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AdvanceUpdateSerializer, responses={200: AdvanceSerializer})
    def update(self, request, *args, **kwargs):
        """Edit an advance that is not linked to a box."""
        advance = self.get_object()
        serializer = AdvanceUpdateSerializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        try:
            advance = update_advance(advance=advance, **serializer.validated_data)
        except AdvanceLockedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AdvanceSerializer(advance).data)

    def destroy(self, request, *args, **kwargs):
        """Hide an advance that is not linked to a box."""
        advance = self.get_object()

        try:
            hide_advance(advance=advance)
        except AdvanceLockedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ApplyAdvanceInputSerializer, responses={200: AdvanceSerializer})
    @action(detail=True, methods=['post'])
    def apply(self, request, pk=None):
        """
        Link an advance to a box of the same employee.

        POST /api/travel/advances/{id}/apply/
        Body: {"box": 12}
        """
        advance = self.get_object()
        serializer = ApplyAdvanceInputSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        try:
            advance = apply_advance(advance=advance, box=serializer.validated_data['box'])
        except (AdvanceLockedError, AdvanceHiddenError, AdvanceEmployeeMismatchError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except BoxNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(AdvanceSerializer(advance).data)

    @action(detail=True, methods=['post'])
    def unapply(self, request, pk=None):
        """
        Unlink an advance from its box.

        POST /api/travel/advances/{id}/unapply/
        """
        advance = self.get_object()

        try:
            advance = unapply_advance(advance=advance)
        except AdvanceNotAppliedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AdvanceSerializer(advance).data)
