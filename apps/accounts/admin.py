from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, PagePermission


class PagePermissionInline(admin.TabularInline):
    model = PagePermission
    extra = 0
    fields = ['page', 'can_access', 'can_edit', 'can_delete', 'can_create']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for dashboard users.

    Page permissions are edited inline; hiding replaces deletion.
    """

    list_display = [
        'email',
        'first_name',
        'last_name',
        'role',
        'is_active_badge',
        'is_hidden',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_hidden',
        'is_staff',
        'created_at',
    ]

    search_fields = [
        'email',
        'first_name',
        'last_name',
        'cpf',
    ]

    ordering = ['first_name', 'last_name', 'email']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'first_name', 'last_name', 'cpf', 'password')
        }),
        ('Access', {
            'fields': ('role', 'is_active', 'is_hidden', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    inlines = [PagePermissionInline]

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Ativo</span>'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Inativo</span>'
        )
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    actions = ['hide_users', 'show_users']

    @admin.action(description='Hide selected users')
    def hide_users(self, request, queryset):
        count = queryset.filter(is_superuser=False).update(is_hidden=True)
        self.message_user(request, f'Hid {count} user(s).')

    @admin.action(description='Show selected users')
    def show_users(self, request, queryset):
        count = queryset.update(is_hidden=False)
        self.message_user(request, f'Restored {count} user(s).')
