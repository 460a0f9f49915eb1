# Generated manually for the current_accounts app

from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('registry', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CurrentAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('kind', models.CharField(choices=[('PESSOAL', 'Pessoal'), ('EXTRA_CAIXA', 'Extra caixa'), ('DEVOLUCAO', 'Devolução'), ('PERMUTA', 'Permuta')], default='PESSOAL', max_length=20)),
                ('counterparty', models.CharField(blank=True, max_length=200)),
                ('sector', models.CharField(blank=True, max_length=100)),
                ('note', models.TextField(blank=True)),
                ('is_hidden', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='current_accounts', to='registry.company')),
                ('employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='current_accounts', to='registry.employee')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='current_accounts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'current_accounts',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['owner', 'is_hidden'], name='current_acc_owner_hidden_idx'),
                    models.Index(fields=['kind'], name='current_acc_kind_idx'),
                    models.Index(fields=['date'], name='current_acc_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AccountEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('date', models.DateField()),
                ('document_number', models.CharField(blank=True, max_length=100)),
                ('note', models.CharField(blank=True, max_length=500)),
                ('credit', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('debit', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('account', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='entries', to='current_accounts.currentaccount')),
            ],
            options={
                'db_table': 'current_account_entries',
                'verbose_name_plural': 'account entries',
                'ordering': ['position', 'id'],
            },
        ),
    ]
