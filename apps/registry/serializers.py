from rest_framework import serializers

from .models import Company, Employee, Vehicle


class CompanySerializer(serializers.ModelSerializer):
    """Company output serializer."""

    class Meta:
        model = Company
        fields = [
            'id',
            'name',
            'number',
            'cnpj',
            'city',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'is_hidden', 'created_at', 'updated_at']


class CompanyMinimalSerializer(serializers.ModelSerializer):
    """Minimal company info for nested serialization."""

    class Meta:
        model = Company
        fields = ['id', 'name', 'number']
        read_only_fields = fields


class EmployeeSerializer(serializers.ModelSerializer):
    """Employee output serializer; also validates create/update input."""

    full_name = serializers.CharField(read_only=True)
    company = serializers.PrimaryKeyRelatedField(
        queryset=Company.objects.all(),
        required=False,
        allow_null=True
    )
    company_name = serializers.CharField(source='company.name', read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            'id',
            'first_name',
            'last_name',
            'full_name',
            'email',
            'phone',
            'sector',
            'job_title',
            'cpf',
            'city',
            'state',
            'company',
            'company_name',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'is_hidden', 'created_at', 'updated_at']


class EmployeeMinimalSerializer(serializers.ModelSerializer):
    """Minimal employee info for nested serialization."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Employee
        fields = ['id', 'full_name', 'cpf']
        read_only_fields = fields


class VehicleSerializer(serializers.ModelSerializer):
    """Vehicle output serializer."""

    label = serializers.CharField(read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id',
            'name',
            'model',
            'plate',
            'label',
            'is_hidden',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'is_hidden', 'created_at', 'updated_at']


class VehicleMinimalSerializer(serializers.ModelSerializer):
    """Minimal vehicle info for nested serialization."""

    label = serializers.CharField(read_only=True)

    class Meta:
        model = Vehicle
        fields = ['id', 'label']
        read_only_fields = fields
