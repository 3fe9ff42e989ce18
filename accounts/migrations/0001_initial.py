import decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('education', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('payment_type', models.CharField(choices=[('TUITION', 'Tuition'), ('DORMITORY', 'Dormitory'), ('BOOKS', 'Books'), ('UNIFORM', 'Uniform'), ('OTHER', 'Other')], default='TUITION', max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, help_text='Amount billed for the period', max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('paid_amount', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('remaining_amount', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('tuition_fee_at_payment', models.DecimalField(decimal_places=2, help_text='Fee in effect when this period was billed', max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PARTIALLY_PAID', 'Partially Paid'), ('PAID', 'Paid')], default='PENDING', max_length=20)),
                ('payment_month', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('payment_year', models.PositiveIntegerField()),
                ('due_date', models.DateField()),
                ('paid_date', models.DateField(blank=True, null=True)),
                ('payment_method', models.CharField(choices=[('CASH', 'Cash'), ('CARD', 'Card'), ('BANK_TRANSFER', 'Bank Transfer'), ('CLICK', 'Click'), ('PAYME', 'Payme'), ('OTHER', 'Other')], default='CASH', max_length=20)),
                ('invoice_number', models.CharField(db_index=True, max_length=50)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('received_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='received_payments', to=settings.AUTH_USER_MODEL)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='education.student')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='education.tenant')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-payment_year', '-payment_month', 'created_at'],
                'indexes': [
                    models.Index(fields=['tenant', 'student', 'payment_type', 'payment_year', 'payment_month'], name='payments_period_idx'),
                    models.Index(fields=['tenant', 'status'], name='payments_tenant_status_idx'),
                    models.Index(fields=['due_date'], name='payments_due_date_idx'),
                ],
                'unique_together': {('tenant', 'invoice_number')},
            },
        ),
    ]
