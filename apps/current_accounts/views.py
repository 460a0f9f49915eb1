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
from .models import CurrentAccount
from .permissions import can_see_all_accounts
from .serializers import (
    AccountFilterSerializer,
    AccountEntryInputSerializer,
    AccountEntriesInputSerializer,
    CurrentAccountCreateSerializer,
    CurrentAccountUpdateSerializer,
    DocumentQuerySerializer,
    SummaryQuerySerializer,
    AccountEntrySerializer,
    CurrentAccountSerializer,
    CurrentAccountListSerializer,
    AccountStatisticsSerializer,
    AccountSummarySerializer,
)
from .services import (
    create_account,
    update_account,
    replace_entries,
    add_entry,
    toggle_account_visibility,
    get_account_statistics,
    get_account_summary,
    generate_account_document,
    AccountNotFoundError,
    AccountDocumentError,
    EmptyEntryError,
)


class CurrentAccountPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CurrentAccountViewSet(viewsets.ModelViewSet):
    """
    ViewSet for current accounts.

    list: Accounts visible to the user (filterable)
    create: Create an account, optionally for another user
    retrieve: Account with entries
    update / partial_update: Edit fields, optionally replace entries
    destroy: Hide an account
    """

    queryset = (
        CurrentAccount.objects
        .select_related('owner', 'company', 'employee')
        .prefetch_related('entries')
    )
    serializer_class = CurrentAccountSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = CurrentAccountPagination
    permission_page = Page.CURRENT_ACCOUNTS
    page_action_flags = {
        'entries': 'can_edit',
        'add_entry': 'can_edit',
        'toggle_visibility': 'can_delete',
    }

    def get_queryset(self):
        """
        Scope accounts to the user, then apply validated filters.

        Administrators and users with the "all accounts" page see every
        account; everyone else sees their own.
        """
        queryset = super().get_queryset()
        user = self.request.user

        if not can_see_all_accounts(user):
            queryset = queryset.filter(owner=user)

        if self.action not in ('list', 'stats'):
            return queryset

        filter_serializer = AccountFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if not params.get('show_hidden'):
            queryset = queryset.filter(is_hidden=False)
        if 'owner' in params:
            queryset = queryset.filter(owner_id=params['owner'])
        if 'kind' in params:
            queryset = queryset.filter(kind=params['kind'])
        if 'company' in params:
            queryset = queryset.filter(company_id=params['company'])
        if params.get('counterparty'):
            queryset = queryset.filter(counterparty__icontains=params['counterparty'])

        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return CurrentAccountListSerializer
        elif self.action == 'create':
            return CurrentAccountCreateSerializer
        elif self.action in ('update', 'partial_update'):
            return CurrentAccountUpdateSerializer
        return CurrentAccountSerializer

    def _detail(self, account):
        return CurrentAccountSerializer(self.get_queryset().get(pk=account.pk)).data

    @extend_schema(request=CurrentAccountCreateSerializer, responses={201: CurrentAccountSerializer})
    def create(self, request, *args, **kwargs):
        """Create an account; only users who see every account may pick another owner."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        owner = data.pop('owner', None) or request.user
        if owner.pk != request.user.pk and not can_see_all_accounts(request.user):
            return Response(
                {'error': 'You cannot create accounts for other users'},
                status=status.HTTP_403_FORBIDDEN
            )

        account = create_account(owner=owner, **data)
        return Response(self._detail(account), status=status.HTTP_201_CREATED)

    @extend_schema(request=CurrentAccountUpdateSerializer, responses={200: CurrentAccountSerializer})
    def update(self, request, *args, **kwargs):
        """Edit an account. The owner cannot change."""
        account = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        account = update_account(account=account, **serializer.validated_data)
        return Response(self._detail(account))

    def destroy(self, request, *args, **kwargs):
        """Hide an account."""
        account = self.get_object()
        if not account.is_hidden:
            toggle_account_visibility(account=account)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=AccountEntriesInputSerializer, responses={200: CurrentAccountSerializer})
    @action(detail=True, methods=['put'])
    def entries(self, request, pk=None):
        """
        Replace all entries of an account.

        PUT /api/current-accounts/accounts/{id}/entries/
        Body: {"entries": [{"date": "2024-03-01", "credit": "100.00"}]}
        """
        account = self.get_object()
        serializer = AccountEntriesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account = replace_entries(account=account, entries=serializer.validated_data['entries'])
        return Response(self._detail(account))

    @extend_schema(request=AccountEntryInputSerializer, responses={201: AccountEntrySerializer})
    @action(detail=True, methods=['post'])
    def add_entry(self, request, pk=None):
        """
        Append one entry.

        POST /api/current-accounts/accounts/{id}/add_entry/
        Body: {"date": "2024-03-01", "document_number": "NF 12", "debit": "50.00"}
        """
        account = self.get_object()
        serializer = AccountEntryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = add_entry(account=account, **serializer.validated_data)
        except EmptyEntryError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AccountEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def toggle_visibility(self, request, pk=None):
        """
        Hide a visible account or show a hidden one.

        POST /api/current-accounts/accounts/{id}/toggle_visibility/
        """
        account = self.get_object()
        account = toggle_account_visibility(account=account)
        return Response(self._detail(account))

    @extend_schema(
        parameters=[OpenApiParameter('rows_per_page', int, required=False)],
        responses={(200, 'application/pdf'): OpenApiTypes.BINARY},
    )
    @action(detail=True, methods=['get'])
    def document(self, request, pk=None):
        """
        Download the PDF term of an account.

        GET /api/current-accounts/accounts/{id}/document/
        """
        account = self.get_object()
        query = DocumentQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            document = generate_account_document(
                account_id=account.pk,
                rows_per_page=query.validated_data.get('rows_per_page'),
            )
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AccountDocumentError as e:
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = HttpResponse(document.content, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{document.filename}"'
        response['X-Page-Count'] = str(document.page_count)
        return response

    @extend_schema(responses={200: AccountStatisticsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Totals over the accounts visible to the user.

        GET /api/current-accounts/accounts/stats/
        """
        statistics = get_account_statistics(queryset=self.get_queryset())
        return Response(AccountStatisticsSerializer(statistics).data)

    @extend_schema(
        parameters=[OpenApiParameter('owner', OpenApiTypes.UUID, required=False)],
        responses={200: AccountSummarySerializer},
    )
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """
        Breakdown of one user's visible accounts.

        GET /api/current-accounts/accounts/summary/?owner=<uuid>
        Defaults to the requesting user; other owners need the "all
        accounts" page.
        """
        query = SummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        owner_id = query.validated_data.get('owner') or request.user.pk

        if owner_id != request.user.pk and not can_see_all_accounts(request.user):
            return Response(
                {'error': 'You cannot view the summary of other users'},
                status=status.HTTP_403_FORBIDDEN
            )

        queryset = CurrentAccount.objects.filter(owner_id=owner_id, is_hidden=False)
        return Response(AccountSummarySerializer(get_account_summary(queryset=queryset)).data)
