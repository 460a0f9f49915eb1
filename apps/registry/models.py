from django.db import models


class Company(models.Model):
    """Company a trip is billed to."""

    name = models.CharField(max_length=200, db_index=True)
    number = models.CharField(max_length=20, blank=True)
    cnpj = models.CharField(max_length=18, blank=True)
    city = models.CharField(max_length=100, blank=True)
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_companies'
    )

    class Meta:
        db_table = 'companies'
        verbose_name_plural = 'companies'
        indexes = [
            models.Index(fields=['cnpj'], name='companies_cnpj_idx'),
            models.Index(fields=['is_hidden'], name='companies_hidden_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        if self.number:
            return f"{self.number} - {self.name}"
        return self.name


class Employee(models.Model):
    """Employee (colaborador) who owns travel cash boxes."""

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    sector = models.CharField(max_length=100, blank=True)
    job_title = models.CharField(max_length=100, blank=True)
    cpf = models.CharField(max_length=14, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=2, blank=True)
    company = models.ForeignKey(
        Company,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='employees'
    )
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employees'
        indexes = [
            models.Index(fields=['first_name', 'last_name'], name='employees_name_idx'),
            models.Index(fields=['cpf'], name='employees_cpf_idx'),
        ]
        ordering = ['first_name', 'last_name']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


class Vehicle(models.Model):
    """Vehicle that may be used on a trip."""

    name = models.CharField(max_length=100)
    model = models.CharField(max_length=100, blank=True)
    plate = models.CharField(max_length=10, blank=True)
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vehicles'
        indexes = [
            models.Index(fields=['plate'], name='vehicles_plate_idx'),
        ]
        ordering = ['model', 'plate']

    def __str__(self):
        return self.label

    @property
    def label(self):
        return f"{self.model or self.name} - {self.plate}".strip(' -')
