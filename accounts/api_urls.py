"""
API URL patterns for tuition and payment endpoints
"""
from django.urls import path
from . import api_views

urlpatterns = [
    # Tuition
    path('admin/students/bulk-update-tuition/', api_views.api_bulk_update_tuition, name='api_bulk_update_tuition'),
    path('students/<int:student_id>/payment-overview/', api_views.api_student_payment_overview, name='api_student_payment_overview'),
    path('students/<int:student_id>/payment-leave/', api_views.api_student_payment_leave, name='api_student_payment_leave'),

    # Payments
    path('admin/payments/multi-month/', api_views.api_multi_month_payment, name='api_multi_month_payment'),
    path('admin/payments/<int:payment_id>/partial/', api_views.api_add_partial_payment, name='api_add_partial_payment'),
]
