from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class TravelCashBox(models.Model):
    """
    One trip's expense envelope (caixa de viagem) for an employee.

    Box numbers run per employee. ``opening_balance`` is carried from the
    employee's previous visible box; ``closing_balance`` is a cache that
    the balance reconciliation keeps equal to
    opening + credits + linked advances - debits.
    """

    box_number = models.PositiveIntegerField()
    date = models.DateField()
    destination = models.CharField(max_length=200)
    opening_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    closing_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    employee = models.ForeignKey(
        'registry.Employee',
        on_delete=models.PROTECT,
        related_name='travel_boxes'
    )
    company = models.ForeignKey(
        'registry.Company',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='travel_boxes'
    )
    vehicle = models.ForeignKey(
        'registry.Vehicle',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='travel_boxes'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_travel_boxes'
    )
    note = models.TextField(blank=True)
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'travel_cash_boxes'
        verbose_name_plural = 'travel cash boxes'
        indexes = [
            models.Index(fields=['employee', 'box_number'], name='travel_box_employee_num_idx'),
            models.Index(fields=['is_hidden'], name='travel_box_hidden_idx'),
            models.Index(fields=['date'], name='travel_box_date_idx'),
        ]
        ordering = ['-date', '-box_number']

    def __str__(self):
        return f"Caixa {self.box_number} - {self.employee} - {self.destination}"


class LedgerEntry(models.Model):
    """Single dated line item (lançamento) of a box."""

    box = models.ForeignKey(TravelCashBox, on_delete=models.CASCADE, related_name='entries')
    position = models.PositiveIntegerField(default=0)
    date = models.DateField(null=True, blank=True)
    document_number = models.CharField(max_length=100, blank=True)
    description = models.CharField(max_length=500, blank=True)
    cost_type = models.CharField(max_length=100, blank=True)
    counterparty = models.CharField(max_length=200, blank=True)
    credit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    debit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    class Meta:
        db_table = 'travel_ledger_entries'
        verbose_name_plural = 'ledger entries'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.date} {self.description}"


class Advance(models.Model):
    """
    Cash advance (adiantamento) given to an employee.

    Independent of any box until applied; a linked advance is locked
    against edit and hiding until it is unapplied.
    """

    date = models.DateField()
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    note = models.TextField(blank=True)
    employee = models.ForeignKey(
        'registry.Employee',
        on_delete=models.PROTECT,
        related_name='advances'
    )
    box = models.ForeignKey(
        TravelCashBox,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='advances'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_advances'
    )
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'travel_advances'
        indexes = [
            models.Index(fields=['employee', 'box'], name='travel_adv_employee_box_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.employee} - {self.amount} ({self.date})"

    @property
    def is_applied(self):
        return self.box_id is not None
