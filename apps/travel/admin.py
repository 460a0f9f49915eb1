from django.contrib import admin
from .models import TravelCashBox, LedgerEntry, Advance


class LedgerEntryInline(admin.TabularInline):
    model = LedgerEntry
    extra = 0
    fields = ['position', 'date', 'document_number', 'counterparty', 'cost_type', 'description', 'credit', 'debit']


class AdvanceInline(admin.TabularInline):
    model = Advance
    extra = 0
    fields = ['date', 'amount', 'note', 'is_hidden']
    readonly_fields = fields
    can_delete = False


@admin.register(TravelCashBox)
class TravelCashBoxAdmin(admin.ModelAdmin):
    """
    Boxes are read-mostly here: numbering and balances belong to the
    service layer, so they are read-only.
    """

    list_display = [
        'box_number',
        'employee',
        'destination',
        'date',
        'opening_balance',
        'closing_balance',
        'is_hidden',
    ]
    list_filter = ['is_hidden', 'company', 'date']
    search_fields = ['destination', 'employee__first_name', 'employee__last_name']
    raw_id_fields = ['employee', 'company', 'vehicle', 'created_by']
    readonly_fields = ['box_number', 'opening_balance', 'closing_balance', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    inlines = [LedgerEntryInline, AdvanceInline]


@admin.register(Advance)
class AdvanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'date', 'amount', 'box', 'is_hidden']
    list_filter = ['is_hidden', 'date']
    search_fields = ['employee__first_name', 'employee__last_name', 'note']
    raw_id_fields = ['employee', 'box', 'created_by']
    readonly_fields = ['box', 'created_at', 'updated_at']
