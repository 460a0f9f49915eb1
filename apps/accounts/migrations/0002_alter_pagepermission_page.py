# Generated manually for the accounts app

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='pagepermission',
            name='page',
            field=models.CharField(choices=[('home', 'Início'), ('companies', 'Empresas'), ('employees', 'Colaboradores'), ('vehicles', 'Veículos'), ('users', 'Usuários'), ('travel_boxes', 'Caixa Viagem'), ('travel_boxes_all', 'Caixa Viagem (todos)'), ('current_accounts', 'Conta Corrente'), ('current_accounts_all', 'Conta Corrente (todos)')], max_length=30),
        ),
    ]
