from django.contrib import admin
from .models import CurrentAccount, AccountEntry


class AccountEntryInline(admin.TabularInline):
    model = AccountEntry
    extra = 0
    fields = ['position', 'date', 'document_number', 'note', 'credit', 'debit']


@admin.register(CurrentAccount)
class CurrentAccountAdmin(admin.ModelAdmin):
    list_display = ['id', 'counterparty', 'kind', 'owner', 'date', 'is_hidden']
    list_filter = ['is_hidden', 'kind', 'date']
    search_fields = ['counterparty', 'sector', 'note', 'owner__email']
    raw_id_fields = ['owner', 'company', 'employee']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'
    inlines = [AccountEntryInline]
