from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class AccountKind(models.TextChoices):
    PERSONAL = 'PESSOAL', 'Pessoal'
    EXTRA_CASH = 'EXTRA_CAIXA', 'Extra caixa'
    REFUND = 'DEVOLUCAO', 'Devolução'
    BARTER = 'PERMUTA', 'Permuta'


class CurrentAccount(models.Model):
    """
    Running account (conta corrente) held by a dashboard user with a
    supplier or customer.

    Unlike travel boxes there is no chain: the balance of an account is
    its credits minus its debits.
    """

    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='current_accounts'
    )
    date = models.DateField()
    kind = models.CharField(max_length=20, choices=AccountKind.choices, default=AccountKind.PERSONAL)
    counterparty = models.CharField(max_length=200, blank=True)
    sector = models.CharField(max_length=100, blank=True)
    note = models.TextField(blank=True)
    company = models.ForeignKey(
        'registry.Company',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='current_accounts'
    )
    employee = models.ForeignKey(
        'registry.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='current_accounts'
    )
    is_hidden = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'current_accounts'
        indexes = [
            models.Index(fields=['owner', 'is_hidden'], name='current_acc_owner_hidden_idx'),
            models.Index(fields=['kind'], name='current_acc_kind_idx'),
            models.Index(fields=['date'], name='current_acc_date_idx'),
        ]
        ordering = ['-updated_at']

    def __str__(self):
        return f"Conta {self.pk} - {self.counterparty or self.get_kind_display()}"


class AccountEntry(models.Model):
    """Dated credit or debit line (lançamento) of an account."""

    account = models.ForeignKey(CurrentAccount, on_delete=models.CASCADE, related_name='entries')
    position = models.PositiveIntegerField(default=0)
    date = models.DateField()
    document_number = models.CharField(max_length=100, blank=True)
    note = models.CharField(max_length=500, blank=True)
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
        db_table = 'current_account_entries'
        verbose_name_plural = 'account entries'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.date} {self.document_number or self.note}"
