from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'student', 'payment_type', 'payment_month', 'payment_year', 'amount', 'paid_amount', 'remaining_amount', 'status', 'due_date']
    list_filter = ['tenant', 'payment_type', 'status', 'payment_method', 'payment_year']
    search_fields = ['invoice_number', 'student__student_code', 'student__full_name']
    readonly_fields = ['invoice_number', 'tuition_fee_at_payment', 'created_at', 'updated_at']
