from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer
from apps.registry.models import Company, Employee
from apps.registry.serializers import CompanyMinimalSerializer, EmployeeMinimalSerializer
from .models import AccountKind, CurrentAccount, AccountEntry
from .services import compute_account_totals


# =============================================================================
# Input serializers
# =============================================================================

class AccountFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for account filtering.

    Query Parameters:
        owner (uuid): Filter by owning user
        kind (str): Filter by account kind
        company (int): Filter by company ID
        counterparty (str): Counterparty contains
        show_hidden (bool): Include hidden accounts
    """

    owner = serializers.UUIDField(required=False)
    kind = serializers.ChoiceField(choices=AccountKind.choices, required=False)
    company = serializers.IntegerField(required=False)
    counterparty = serializers.CharField(required=False, allow_blank=True)
    show_hidden = serializers.BooleanField(required=False, default=False)


class AccountEntryInputSerializer(serializers.Serializer):
    """One entry; at least one of credit and debit is required."""

    date = serializers.DateField()
    document_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    credit = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False,
        allow_null=True
    )
    debit = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False,
        allow_null=True
    )

    def validate(self, attrs):
        if not attrs.get('credit') and not attrs.get('debit'):
            raise serializers.ValidationError('Provide a credit or a debit amount')
        return attrs


class AccountEntriesInputSerializer(serializers.Serializer):
    entries = AccountEntryInputSerializer(many=True)


class CurrentAccountCreateSerializer(serializers.Serializer):
    """
    Validate input for creating an account.

    ``owner`` defaults to the requesting user.
    """

    owner = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_hidden=False),
        required=False
    )
    date = serializers.DateField()
    kind = serializers.ChoiceField(choices=AccountKind.choices, default=AccountKind.PERSONAL)
    counterparty = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    sector = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    note = serializers.CharField(required=False, allow_blank=True, default='')
    company = serializers.PrimaryKeyRelatedField(
        queryset=Company.objects.all(),
        required=False,
        allow_null=True
    )
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(),
        required=False,
        allow_null=True
    )
    entries = AccountEntryInputSerializer(many=True, required=False, default=list)


class CurrentAccountUpdateSerializer(serializers.Serializer):
    """``entries``, when present, replaces every entry of the account."""

    date = serializers.DateField(required=False)
    kind = serializers.ChoiceField(choices=AccountKind.choices, required=False)
    counterparty = serializers.CharField(max_length=200, required=False, allow_blank=True)
    sector = serializers.CharField(max_length=100, required=False, allow_blank=True)
    note = serializers.CharField(required=False, allow_blank=True)
    company = serializers.PrimaryKeyRelatedField(
        queryset=Company.objects.all(),
        required=False,
        allow_null=True
    )
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(),
        required=False,
        allow_null=True
    )
    entries = AccountEntryInputSerializer(many=True, required=False)


class DocumentQuerySerializer(serializers.Serializer):
    rows_per_page = serializers.IntegerField(required=False, min_value=1, max_value=200)


class SummaryQuerySerializer(serializers.Serializer):
    owner = serializers.UUIDField(required=False)


# =============================================================================
# Output serializers
# =============================================================================

class AccountEntrySerializer(serializers.ModelSerializer):

    class Meta:
        model = AccountEntry
        fields = ['id', 'position', 'date', 'document_number', 'note', 'credit', 'debit']
        read_only_fields = fields


class AccountTotalsMixin(serializers.Serializer):
    """Adds the credit and debit sums and the balance of an account."""

    totals = serializers.SerializerMethodField()

    def get_totals(self, obj):
        totals = compute_account_totals(obj)
        return {
            'credits': str(totals.credits),
            'debits': str(totals.debits),
            'balance': str(totals.balance),
        }


class CurrentAccountListSerializer(AccountTotalsMixin, serializers.ModelSerializer):
    """Lightweight serializer for account lists."""

    owner = UserMinimalSerializer(read_only=True)
    company = CompanyMinimalSerializer(read_only=True)
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = CurrentAccount
        fields = [
            'id',
            'date',
            'kind',
            'kind_display',
            'counterparty',
            'sector',
            'owner',
            'company',
            'totals',
            'is_hidden',
            'updated_at',
        ]
        read_only_fields = fields


class CurrentAccountSerializer(AccountTotalsMixin, serializers.ModelSerializer):
    """Account with its entries."""

    owner = UserMinimalSerializer(read_only=True)
    company = CompanyMinimalSerializer(read_only=True)
    employee = EmployeeMinimalSerializer(read_only=True)
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)
    entries = AccountEntrySerializer(many=True, read_only=True)

    class Meta:
        model = CurrentAccount
        fields = [
            'id',
            'date',
            'kind',
            'kind_display',
            'counterparty',
            'sector',
            'note',
            'owner',
            'company',
            'employee',
            'totals',
            'entries',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AccountStatisticsSerializer(serializers.Serializer):
    account_count = serializers.IntegerField()
    total_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class KindSummarySerializer(serializers.Serializer):
    kind = serializers.CharField()
    label = serializers.CharField()
    count = serializers.IntegerField()
    credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class BalanceSignSerializer(serializers.Serializer):
    positive = serializers.IntegerField()
    negative = serializers.IntegerField()
    total = serializers.IntegerField()


class CounterpartySummarySerializer(serializers.Serializer):
    name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class AccountSummarySerializer(serializers.Serializer):
    account_count = serializers.IntegerField()
    total_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    by_kind = KindSummarySerializer(many=True)
    by_balance = BalanceSignSerializer()
    top_counterparties = CounterpartySummarySerializer(many=True)
