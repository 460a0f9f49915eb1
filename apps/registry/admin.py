from django.contrib import admin
from .models import Company, Employee, Vehicle


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'number', 'cnpj', 'city', 'is_hidden', 'created_at']
    list_filter = ['is_hidden', 'city']
    search_fields = ['name', 'number', 'cnpj']
    readonly_fields = ['created_at', 'updated_at', 'created_by']


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'cpf', 'sector', 'job_title', 'company', 'is_hidden']
    list_filter = ['is_hidden', 'sector', 'state']
    search_fields = ['first_name', 'last_name', 'cpf', 'email']
    raw_id_fields = ['company']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['name', 'model', 'plate', 'is_hidden']
    list_filter = ['is_hidden']
    search_fields = ['name', 'model', 'plate']
