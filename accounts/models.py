from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from education.models import Tenant, Student, CustomUser
from decimal import Decimal


class Payment(models.Model):
    """
    One billing period (month/year) of one payment type for one student.

    tuition_fee_at_payment is a snapshot of the fee in effect when the row was
    created or last rewritten by a bulk fee change; it never follows the
    student's live monthly_tuition_fee.
    """
    PAYMENT_TYPE_CHOICES = [
        ('TUITION', 'Tuition'),
        ('DORMITORY', 'Dormitory'),
        ('BOOKS', 'Books'),
        ('UNIFORM', 'Uniform'),
        ('OTHER', 'Other'),
    ]

    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PARTIALLY_PAID', 'Partially Paid'),
        ('PAID', 'Paid'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('CASH', 'Cash'),
        ('CARD', 'Card'),
        ('BANK_TRANSFER', 'Bank Transfer'),
        ('CLICK', 'Click'),
        ('PAYME', 'Payme'),
        ('OTHER', 'Other'),
    ]

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='payments')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='payments')
    payment_type = models.CharField(max_length=20, choices=PAYMENT_TYPE_CHOICES, default='TUITION')

    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))], help_text="Amount billed for the period")
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    remaining_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    tuition_fee_at_payment = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))], help_text="Fee in effect when this period was billed")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')

    payment_month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    payment_year = models.PositiveIntegerField()
    due_date = models.DateField()
    paid_date = models.DateField(null=True, blank=True)

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='CASH')
    invoice_number = models.CharField(max_length=50, db_index=True)
    received_by = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='received_payments')
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_year', '-payment_month', 'created_at']
        unique_together = ['tenant', 'invoice_number']
        indexes = [
            models.Index(fields=['tenant', 'student', 'payment_type', 'payment_year', 'payment_month'], name='payments_period_idx'),
            models.Index(fields=['tenant', 'status'], name='payments_tenant_status_idx'),
            models.Index(fields=['due_date'], name='payments_due_date_idx'),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.student.student_code} - {self.payment_month:02d}/{self.payment_year} ({self.status})"

    def save(self, *args, **kwargs):
        # Auto-generate invoice number if not provided
        if not self.invoice_number:
            self.invoice_number = self.generate_invoice_number()
        super().save(*args, **kwargs)

    def generate_invoice_number(self):
        """Generate the next invoice number of the tenant for the billing year"""
        prefix = f"INV-{self.payment_year}-"
        last_payment = Payment.objects.filter(
            tenant_id=self.tenant_id,
            invoice_number__startswith=prefix
        ).order_by('-invoice_number').first()

        if last_payment:
            try:
                new_num = int(last_payment.invoice_number.split('-')[-1]) + 1
            except (ValueError, IndexError):
                new_num = 1
        else:
            new_num = 1

        return f"{prefix}{new_num:06d}"

    def is_consistent(self):
        """Paid and remaining amounts add up to the snapshot fee"""
        return (
            self.remaining_amount >= 0
            and self.paid_amount + self.remaining_amount == self.tuition_fee_at_payment
        )

    @staticmethod
    def status_for(paid_amount, billed_amount):
        """Status implied by how much of billed_amount is paid"""
        if paid_amount >= billed_amount:
            return 'PAID'
        if paid_amount > 0:
            return 'PARTIALLY_PAID'
        return 'PENDING'
