from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.registry.models import Company, Employee, Vehicle
from apps.registry.serializers import (
    CompanyMinimalSerializer,
    EmployeeMinimalSerializer,
    VehicleMinimalSerializer,
)
from .models import TravelCashBox, LedgerEntry, Advance
from .permissions import can_see_all_boxes
from .services import compute_box_totals


# =============================================================================
# Input serializers
# =============================================================================

class BoxFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for box filtering.

    Query Parameters:
        employee (int): Filter by employee ID
        company (int): Filter by company ID
        destination (str): Destination contains
        date_from (date): Trips from this date
        date_to (date): Trips up to this date
        show_hidden (bool): Include hidden boxes
    """

    employee = serializers.IntegerField(required=False)
    company = serializers.IntegerField(required=False)
    destination = serializers.CharField(required=False, allow_blank=True)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    show_hidden = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })
        return attrs


class LedgerEntryInputSerializer(serializers.Serializer):
    """One ledger line as sent by the box form."""

    date = serializers.DateField(required=False, allow_null=True)
    document_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    cost_type = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    counterparty = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
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


class EntriesInputSerializer(serializers.Serializer):
    """
    Replace the entries of a box.

    Body:
        {"entries": [{"date": "2024-03-01", "credit": "100.00"}, ...]}
    """

    entries = LedgerEntryInputSerializer(many=True)


class TravelCashBoxCreateSerializer(serializers.Serializer):
    """Validate input for creating a box."""

    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    company = serializers.PrimaryKeyRelatedField(queryset=Company.objects.all())
    vehicle = serializers.PrimaryKeyRelatedField(
        queryset=Vehicle.objects.all(),
        required=False,
        allow_null=True
    )
    destination = serializers.CharField(max_length=200)
    date = serializers.DateField()
    note = serializers.CharField(required=False, allow_blank=True, default='')
    opening_balance = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True
    )
    entries = LedgerEntryInputSerializer(many=True, required=False, default=list)


class TravelCashBoxUpdateSerializer(serializers.Serializer):
    """
    Validate input for editing a box.

    ``entries``, when present, replaces every entry of the box.
    """

    company = serializers.PrimaryKeyRelatedField(queryset=Company.objects.all(), required=False)
    vehicle = serializers.PrimaryKeyRelatedField(
        queryset=Vehicle.objects.all(),
        required=False,
        allow_null=True
    )
    destination = serializers.CharField(max_length=200, required=False)
    date = serializers.DateField(required=False)
    note = serializers.CharField(required=False, allow_blank=True)
    entries = LedgerEntryInputSerializer(many=True, required=False)


class NextNumberQuerySerializer(serializers.Serializer):
    employee = serializers.IntegerField()


class RecalculateInputSerializer(serializers.Serializer):
    employee = serializers.IntegerField(required=False, allow_null=True)


class SettlementQuerySerializer(serializers.Serializer):
    rows_per_page = serializers.IntegerField(required=False, min_value=1, max_value=200)


class AdvanceFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for advance filtering.

    Query Parameters:
        employee (int): Filter by employee ID
        box (int): Filter by linked box ID
        applied (bool): Only linked / only unlinked advances
        show_hidden (bool): Include hidden advances
    """

    employee = serializers.IntegerField(required=False)
    box = serializers.IntegerField(required=False)
    applied = serializers.BooleanField(required=False, allow_null=True, default=None)
    show_hidden = serializers.BooleanField(required=False, default=False)


class AdvanceCreateSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    note = serializers.CharField(required=False, allow_blank=True, default='')


class AdvanceUpdateSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False)
    date = serializers.DateField(required=False)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    note = serializers.CharField(required=False, allow_blank=True)


class ApplyAdvanceInputSerializer(serializers.Serializer):
    """
    Target box of an advance.

    Only boxes the requesting user can see are accepted.
    """

    box = serializers.PrimaryKeyRelatedField(queryset=TravelCashBox.objects.all())

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None and not can_see_all_boxes(request.user):
            self.fields['box'].queryset = TravelCashBox.objects.filter(created_by=request.user)


# =============================================================================
# Output serializers
# =============================================================================

class LedgerEntrySerializer(serializers.ModelSerializer):
    """Ledger entry as stored."""

    class Meta:
        model = LedgerEntry
        fields = [
            'id',
            'position',
            'date',
            'document_number',
            'description',
            'cost_type',
            'counterparty',
            'credit',
            'debit',
        ]
        read_only_fields = fields


class AdvanceSerializer(serializers.ModelSerializer):
    """Advance with its employee and link state."""

    employee_detail = EmployeeMinimalSerializer(source='employee', read_only=True)
    box_number = serializers.IntegerField(source='box.box_number', read_only=True, default=None)
    is_applied = serializers.BooleanField(read_only=True)

    class Meta:
        model = Advance
        fields = [
            'id',
            'date',
            'amount',
            'note',
            'employee',
            'employee_detail',
            'box',
            'box_number',
            'is_applied',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BoxTotalsMixin(serializers.Serializer):
    """Adds the credit, debit and advance sums of a box."""

    totals = serializers.SerializerMethodField()

    def get_totals(self, obj):
        totals = compute_box_totals(obj)
        return {
            'credits': str(totals.credits),
            'debits': str(totals.debits),
            'advances': str(totals.advances),
        }


class TravelCashBoxListSerializer(BoxTotalsMixin, serializers.ModelSerializer):
    """Lightweight serializer for box lists."""

    employee = EmployeeMinimalSerializer(read_only=True)
    company = CompanyMinimalSerializer(read_only=True)
    vehicle = VehicleMinimalSerializer(read_only=True)

    class Meta:
        model = TravelCashBox
        fields = [
            'id',
            'box_number',
            'date',
            'destination',
            'employee',
            'company',
            'vehicle',
            'opening_balance',
            'closing_balance',
            'totals',
            'is_hidden',
            'created_at',
        ]
        read_only_fields = fields


class TravelCashBoxSerializer(BoxTotalsMixin, serializers.ModelSerializer):
    """Box with its entries and linked advances."""

    employee = EmployeeMinimalSerializer(read_only=True)
    company = CompanyMinimalSerializer(read_only=True)
    vehicle = VehicleMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    entries = LedgerEntrySerializer(many=True, read_only=True)
    advances = AdvanceSerializer(many=True, read_only=True)

    class Meta:
        model = TravelCashBox
        fields = [
            'id',
            'box_number',
            'date',
            'destination',
            'employee',
            'company',
            'vehicle',
            'note',
            'opening_balance',
            'closing_balance',
            'totals',
            'entries',
            'advances',
            'created_by',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class NextBoxNumberSerializer(serializers.Serializer):
    next_number = serializers.IntegerField()
    opening_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class BoxBalanceSerializer(serializers.Serializer):
    box_id = serializers.IntegerField()
    box_number = serializers.IntegerField()
    employee_id = serializers.IntegerField()
    opening_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    credits = serializers.DecimalField(max_digits=12, decimal_places=2)
    debits = serializers.DecimalField(max_digits=12, decimal_places=2)
    advances = serializers.DecimalField(max_digits=12, decimal_places=2)
    closing_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class RecalculationFailureSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    error = serializers.CharField()


class DestinationStatsSerializer(serializers.Serializer):
    destination = serializers.CharField()
    count = serializers.IntegerField()
    credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    advances = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class TravelStatisticsSerializer(serializers.Serializer):
    box_count = serializers.IntegerField()
    total_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_advances = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_debits = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_advances = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    destinations = DestinationStatsSerializer(many=True)
