"""
Monthly tuition progress and status classification.

The required amount of a month is always the fee snapshot stored on the
month's Payment rows, so percentages of past months stay stable after the
student's fee changes.
"""
import calendar
from collections import namedtuple
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone
from django.utils.dates import MONTHS

from accounts.models import Payment


MonthlyProgress = namedtuple('MonthlyProgress', [
    'total_paid',
    'monthly_tuition_fee',
    'percentage_paid',
    'is_fully_paid',
    'payment_count',
    'payment_id',
])

MonthStatus = namedtuple('MonthStatus', ['status', 'is_overdue', 'is_pending'])

COMPLETED = 'completed'
OVERDUE = 'overdue'
PARTIALLY_PAID = 'partially_paid'
PENDING = 'pending'
NOT_DUE = 'not_due'

MONTH_STATUSES = (COMPLETED, OVERDUE, PARTIALLY_PAID, PENDING, NOT_DUE)


def calculate_percentage(total_paid, fee):
    """Whole-number share of fee covered by total_paid, clamped to 0..100; 0 for a zero fee"""
    if fee is None or fee <= 0:
        return 0
    percentage = Decimal(total_paid) / Decimal(fee) * 100
    percentage = max(Decimal('0'), min(Decimal('100'), percentage))
    return int(percentage.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_monthly_payment_progress(student_id, tenant_id, month, year):
    """
    Compute how much of a month's tuition a student has paid.

    Args:
        student_id: Student primary key
        tenant_id: Tenant primary key the student must belong to
        month: 1-12
        year: four-digit year

    Returns:
        MonthlyProgress, or None when no tuition row exists for the period
    """
    payments = Payment.objects.filter(
        tenant_id=tenant_id,
        student_id=student_id,
        payment_type='TUITION',
        payment_month=month,
        payment_year=year,
    ).order_by('created_at', 'pk')

    first = payments.values('id', 'tuition_fee_at_payment').first()
    if first is None:
        return None

    aggregate = payments.aggregate(total=Sum('paid_amount'))
    total_paid = aggregate['total'] or Decimal('0.00')
    fee = first['tuition_fee_at_payment']

    return MonthlyProgress(
        total_paid=total_paid,
        monthly_tuition_fee=fee,
        percentage_paid=calculate_percentage(total_paid, fee),
        is_fully_paid=total_paid >= fee,
        payment_count=payments.count(),
        payment_id=first['id'],
    )


def get_due_date(student, month, year):
    """Due date of a billing period: the student's due day, clamped to the month length"""
    due_day = student.payment_due_day or settings.DEFAULT_PAYMENT_DUE_DAY
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def classify_month(progress, due_date, today):
    """
    Give one billing period exactly one status.

    Checked in order: completed, overdue, partially_paid, pending. Periods
    without a billing record are not_due.
    """
    if progress is None:
        return MonthStatus(NOT_DUE, False, False)

    is_overdue = today > due_date and not progress.is_fully_paid
    is_pending = not progress.is_fully_paid and not is_overdue

    if progress.is_fully_paid:
        status = COMPLETED
    elif is_overdue:
        status = OVERDUE
    elif progress.total_paid > 0:
        status = PARTIALLY_PAID
    elif is_pending:
        status = PENDING
    else:
        status = NOT_DUE

    return MonthStatus(status, is_overdue, is_pending)


def _empty_month(month, year, is_not_applicable=False, is_leave=False, leave_reason=None):
    return {
        'month': month,
        'year': year,
        'monthName': str(MONTHS[month]),
        'totalPaid': 0,
        'requiredAmount': 0,
        'percentagePaid': 0,
        'isFullyPaid': False,
        'isPending': False,
        'isOverdue': False,
        'hasPayment': False,
        'paymentId': None,
        'status': NOT_DUE,
        'isNotApplicable': is_not_applicable,
        'isLeave': is_leave,
        'leaveReason': leave_reason,
    }


def build_monthly_overview(student, year, today=None):
    """
    Build the twelve-month payment grid of a student for one year.

    Months before the enrollment month are marked not applicable, leave months
    are marked as leave, both without reading payments. Every other month
    costs one progress calculation.

    Returns:
        list of 12 dicts ordered by month
    """
    if today is None:
        today = timezone.localdate()

    enrollment_month_start = date(student.enrollment_date.year, student.enrollment_date.month, 1)
    leaves = dict(student.payment_leaves.filter(year=year).values_list('month', 'reason'))

    monthly_statuses = []
    for month in range(1, 13):
        if date(year, month, 1) < enrollment_month_start:
            monthly_statuses.append(_empty_month(month, year, is_not_applicable=True))
            continue

        if month in leaves:
            monthly_statuses.append(_empty_month(month, year, is_leave=True, leave_reason=leaves[month]))
            continue

        progress = calculate_monthly_payment_progress(student.pk, student.tenant_id, month, year)
        if progress is None:
            monthly_statuses.append(_empty_month(month, year))
            continue

        month_status = classify_month(progress, get_due_date(student, month, year), today)
        entry = _empty_month(month, year)
        entry.update({
            'totalPaid': float(progress.total_paid),
            'requiredAmount': float(progress.monthly_tuition_fee),
            'percentagePaid': progress.percentage_paid,
            'isFullyPaid': progress.is_fully_paid,
            'isPending': month_status.is_pending,
            'isOverdue': month_status.is_overdue,
            'hasPayment': progress.payment_count > 0,
            'paymentId': progress.payment_id,
            'status': month_status.status,
        })
        monthly_statuses.append(entry)

    return monthly_statuses
