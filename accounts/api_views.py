"""
API Views for tuition and payment endpoints
Returns JSON responses for frontend consumption
All endpoints filter by the caller's tenant
"""
import logging

from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.utils import timezone
from django.utils.translation import gettext as _
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from education.decorators import api_permission_required
from education.models import Student, StudentPaymentLeave
from .exceptions import PaymentNotFound, TuitionValidationError
from .models import Payment
from .services.billing import add_partial_payment, record_multi_month_payment
from .services.progress import build_monthly_overview
from .services.tuition import bulk_update_tuition, parse_effective_date
from .utils import handle_api_error, parse_json_body

logger = logging.getLogger(__name__)

OVERVIEW_ROLES = ('ADMIN', 'SUPER_ADMIN', 'MODERATOR')


def get_tenant_student(request, student_id):
    """Student of the caller's tenant; super admins (no tenant) may read any student"""
    students = Student.objects.select_related('tenant')
    if request.tenant is not None:
        students = students.filter(tenant=request.tenant)
    try:
        return students.get(pk=student_id)
    except Student.DoesNotExist:
        raise PaymentNotFound(_('Student not found'))


def parse_int(value, field, low=None, high=None):
    if isinstance(value, bool):
        raise TuitionValidationError(_('Invalid value for %(field)s') % {'field': field})
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise TuitionValidationError(_('Invalid value for %(field)s') % {'field': field})
    if (low is not None and value < low) or (high is not None and value > high):
        raise TuitionValidationError(_('Invalid value for %(field)s') % {'field': field})
    return value


@csrf_exempt
@require_http_methods(["POST"])
@api_permission_required('students', 'UPDATE')
def api_bulk_update_tuition(request):
    """Set a new monthly tuition fee for several students at once"""
    try:
        data = parse_json_body(request)
        result = bulk_update_tuition(
            request.tenant,
            data.get('studentIds'),
            data.get('newTuitionFee'),
            effective_date=data.get('effectiveDate'),
        )
        return JsonResponse({
            'success': True,
            'message': _('Tuition fee updated for %(count)d student(s)') % {'count': result.updated_count},
            'updatedCount': result.updated_count,
        })
    except Exception as e:
        return handle_api_error(e, request, action='bulk_update_tuition')


@require_http_methods(["GET"])
@api_permission_required('payments', 'READ', tenant_required=False)
def api_student_payment_overview(request, student_id):
    """Twelve-month tuition status grid of one student"""
    if request.user.role not in OVERVIEW_ROLES and not request.user.is_super_admin():
        return JsonResponse({'error': _('You do not have permission to perform this action')}, status=403)

    try:
        student = get_tenant_student(request, student_id)
        year = request.GET.get('year')
        year = parse_int(year, 'year', 1900, 9999) if year else timezone.localdate().year

        return JsonResponse({
            'success': True,
            'monthlyStatuses': build_monthly_overview(student, year),
            'enrollmentDate': student.enrollment_date.isoformat(),
        })
    except Exception as e:
        return handle_api_error(e, request, action='payment_overview')


@csrf_exempt
@require_http_methods(["POST"])
@api_permission_required('payments', 'CREATE')
def api_multi_month_payment(request):
    """Record one payment covering several consecutive months"""
    try:
        data = parse_json_body(request)
        student = get_tenant_student(request, parse_int(data.get('studentId'), 'studentId'))

        payment_method = data.get('paymentMethod') or 'CASH'
        if payment_method not in dict(Payment.PAYMENT_METHOD_CHOICES):
            raise TuitionValidationError(_('Invalid payment method'))

        result = record_multi_month_payment(
            student,
            data.get('startMonth'),
            data.get('startYear'),
            data.get('monthsCount'),
            payment_amount=data.get('paymentAmount'),
            payment_method=payment_method,
            paid_date=parse_effective_date(data.get('paidDate')),
            received_by=request.user,
        )
        return JsonResponse({
            'success': True,
            'message': _('%(count)d month(s) recorded') % {'count': len(result.created) + len(result.updated)},
            'createdCount': len(result.created),
            'updatedCount': len(result.updated),
            'totalAmount': float(result.total_amount),
            'paidAmount': float(result.paid_amount),
            'paymentIds': [p.id for p in result.created + result.updated],
        }, status=201)
    except Exception as e:
        return handle_api_error(e, request, action='multi_month_payment')


@csrf_exempt
@require_http_methods(["POST"])
@api_permission_required('payments', 'UPDATE')
def api_add_partial_payment(request, payment_id):
    """Record an instalment against an existing billing row"""
    try:
        data = parse_json_body(request)
        try:
            payment = Payment.objects.get(pk=payment_id, tenant=request.tenant)
        except Payment.DoesNotExist:
            raise PaymentNotFound(_('Payment not found'))

        payment_method = data.get('paymentMethod')
        if payment_method and payment_method not in dict(Payment.PAYMENT_METHOD_CHOICES):
            raise TuitionValidationError(_('Invalid payment method'))

        payment = add_partial_payment(
            payment,
            data.get('amount'),
            payment_method=payment_method,
            notes=data.get('notes'),
            received_by=request.user,
        )
        return JsonResponse({
            'success': True,
            'payment': {
                'id': payment.id,
                'invoiceNumber': payment.invoice_number,
                'amount': float(payment.amount),
                'paidAmount': float(payment.paid_amount),
                'remainingAmount': float(payment.remaining_amount),
                'status': payment.status,
                'paidDate': payment.paid_date.isoformat() if payment.paid_date else None,
            },
        })
    except Exception as e:
        return handle_api_error(e, request, action='partial_payment')


@csrf_exempt
@require_http_methods(["POST", "DELETE"])
@api_permission_required('payments', 'UPDATE')
def api_student_payment_leave(request, student_id):
    """Mark (POST) or unmark (DELETE) a leave month for a student"""
    try:
        student = get_tenant_student(request, student_id)
        data = parse_json_body(request)
        month = parse_int(data.get('month'), 'month', 1, 12)
        year = parse_int(data.get('year'), 'year', 1900, 9999)

        if request.method == 'DELETE':
            deleted, _rows = StudentPaymentLeave.objects.filter(student=student, month=month, year=year).delete()
            if not deleted:
                raise PaymentNotFound(_('Leave not found'))
            logger.info(f"Removed leave {month:02d}/{year} for student {student.pk}")
            return JsonResponse({'success': True})

        try:
            with transaction.atomic():
                leave = StudentPaymentLeave.objects.create(
                    student=student,
                    month=month,
                    year=year,
                    reason=data.get('reason') or None,
                    created_by=request.user,
                )
        except IntegrityError:
            raise TuitionValidationError(_('This month is already marked as leave'))

        logger.info(f"Marked leave {month:02d}/{year} for student {student.pk}")
        return JsonResponse({
            'success': True,
            'leave': {'id': leave.id, 'month': leave.month, 'year': leave.year, 'reason': leave.reason},
        }, status=201)
    except Exception as e:
        return handle_api_error(e, request, action='payment_leave')
