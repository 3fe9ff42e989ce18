"""
Billing period generation and payment recording.

Every tuition row is created with the student's fee at that moment as its
snapshot (amount == tuition_fee_at_payment), and every recorded amount keeps
paid_amount + remaining_amount equal to the billed amount.
"""
import logging
from collections import namedtuple
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.exceptions import TuitionValidationError
from accounts.models import Payment
from accounts.services.progress import get_due_date
from accounts.services.tuition import parse_fee

logger = logging.getLogger(__name__)


MultiMonthResult = namedtuple('MultiMonthResult', ['created', 'updated', 'total_amount', 'paid_amount'])


def iter_periods(start_month, start_year, months_count):
    """Yield consecutive (month, year) pairs, rolling over December"""
    month, year = start_month, start_year
    for _i in range(months_count):
        yield month, year
        month += 1
        if month > 12:
            month = 1
            year += 1


def billing_skip_reason(student, month, year):
    """Why a period cannot be billed for student, or None when it can"""
    if not student.is_enrolled():
        return 'inactive'
    if (student.monthly_tuition_fee or Decimal('0.00')) <= Decimal('0.00'):
        return 'no_fee'
    if date(year, month, 1) < date(student.enrollment_date.year, student.enrollment_date.month, 1):
        return 'before_enrollment'
    if student.is_on_leave(month, year):
        return 'leave'
    if Payment.objects.filter(
        tenant_id=student.tenant_id,
        student=student,
        payment_type='TUITION',
        payment_month=month,
        payment_year=year,
    ).exists():
        return 'exists'
    return None


def generate_billing_period(student, month, year, created_by=None):
    """
    Create the PENDING tuition row of one billing period for a student.

    Returns:
        Payment instance, or None when the student is not active, has no fee,
        was not yet enrolled, is on leave that month, or the row already exists
    """
    if billing_skip_reason(student, month, year):
        return None

    fee = student.monthly_tuition_fee
    payment = Payment.objects.create(
        tenant_id=student.tenant_id,
        student=student,
        payment_type='TUITION',
        amount=fee,
        paid_amount=Decimal('0.00'),
        remaining_amount=fee,
        tuition_fee_at_payment=fee,
        status='PENDING',
        payment_month=month,
        payment_year=year,
        due_date=get_due_date(student, month, year),
        notes=f"Auto-generated tuition for {month:02d}/{year}" + (f" by {created_by.username}" if created_by else ''),
    )
    logger.info(f"Generated billing period {month:02d}/{year} for student {student.pk}: {payment.invoice_number}")
    return payment


def generate_payment_schedule(student, start_month, start_year, months_count=1, created_by=None):
    """Generate consecutive billing periods; returns the rows actually created"""
    created = []
    for month, year in iter_periods(start_month, start_year, months_count):
        payment = generate_billing_period(student, month, year, created_by=created_by)
        if payment:
            created.append(payment)
    return created


def add_partial_payment(payment, amount, payment_method=None, notes=None, received_by=None, today=None):
    """
    Record one instalment against an existing billing row.

    Raises:
        TuitionValidationError: non-positive amount, row already paid, or the
            instalment exceeds what is still owed
    """
    amount = parse_fee(amount)
    if amount <= 0:
        raise TuitionValidationError(_('Amount must be greater than 0'))
    if today is None:
        today = timezone.localdate()

    with transaction.atomic():
        payment = Payment.objects.select_for_update().get(pk=payment.pk)

        if payment.status == 'PAID':
            raise TuitionValidationError(_('This payment is already fully paid'))

        new_paid_amount = payment.paid_amount + amount
        if new_paid_amount > payment.amount:
            raise TuitionValidationError(
                _('Amount exceeds the total. Maximum: %(max)s') % {'max': payment.amount - payment.paid_amount}
            )

        payment.paid_amount = new_paid_amount
        payment.remaining_amount = payment.amount - new_paid_amount
        payment.status = Payment.status_for(new_paid_amount, payment.amount)
        # Keep the date of the first instalment
        payment.paid_date = payment.paid_date or today
        if payment_method:
            payment.payment_method = payment_method
        if received_by is not None:
            payment.received_by = received_by

        line = f"[{today.isoformat()}] +{amount} ({payment_method or 'N/A'})"
        if notes:
            line = f"{line}: {notes}"
        payment.notes = f"{payment.notes}\n{line}" if payment.notes else line
        payment.save()

    logger.info(
        f"Recorded {amount} against payment {payment.pk} (student {payment.student_id}): "
        f"paid={payment.paid_amount} remaining={payment.remaining_amount} status={payment.status}"
    )
    return payment


def record_multi_month_payment(student, start_month, start_year, months_count, payment_amount=None,
                               payment_method='CASH', paid_date=None, received_by=None):
    """
    Record one payment spread over several consecutive months.

    The amount fills months in order. An existing row of a month is topped up
    (at most up to what it still owes); a missing month gets a new row billed
    at the student's current fee. Paying more than the months owe is refused
    and nothing is written.

    Returns:
        MultiMonthResult(created, updated, total_amount, paid_amount)
    """
    try:
        start_month = int(start_month)
        start_year = int(start_year)
        months_count = int(months_count)
    except (TypeError, ValueError):
        raise TuitionValidationError(_('Please fill in all fields'))

    if not 1 <= start_month <= 12:
        raise TuitionValidationError(_('Start month must be between 1 and 12'))
    if not 1 <= months_count <= 12:
        raise TuitionValidationError(_('Number of months must be between 1 and 12'))

    monthly_fee = student.monthly_tuition_fee or Decimal('0.00')
    if monthly_fee <= 0:
        raise TuitionValidationError(_("The student's monthly tuition fee is not set"))

    paid_total = parse_fee(payment_amount) if payment_amount not in (None, '') else Decimal('0.00')
    remaining_payment = paid_total
    if paid_date is None:
        paid_date = timezone.localdate()

    created = []
    updated = []
    with transaction.atomic():
        for month, year in iter_periods(start_month, start_year, months_count):
            existing = Payment.objects.select_for_update().filter(
                tenant_id=student.tenant_id,
                student=student,
                payment_type='TUITION',
                payment_month=month,
                payment_year=year,
            ).order_by('created_at', 'pk').first()

            if existing:
                portion = min(remaining_payment, existing.remaining_amount)
                if portion > 0:
                    existing.paid_amount += portion
                    existing.remaining_amount = existing.amount - existing.paid_amount
                    existing.status = Payment.status_for(existing.paid_amount, existing.amount)
                    existing.paid_date = existing.paid_date or paid_date
                    existing.payment_method = payment_method
                    existing.received_by = received_by
                    existing.save()
                    updated.append(existing)
                    remaining_payment -= portion
                continue

            portion = min(remaining_payment, monthly_fee)
            status = Payment.status_for(portion, monthly_fee)
            payment = Payment.objects.create(
                tenant_id=student.tenant_id,
                student=student,
                payment_type='TUITION',
                amount=monthly_fee,
                paid_amount=portion,
                remaining_amount=monthly_fee - portion,
                tuition_fee_at_payment=monthly_fee,
                status=status,
                payment_month=month,
                payment_year=year,
                due_date=get_due_date(student, month, year),
                paid_date=paid_date if status != 'PENDING' else None,
                payment_method=payment_method,
                received_by=received_by if status != 'PENDING' else None,
            )
            created.append(payment)
            remaining_payment -= portion

        if remaining_payment > 0:
            # Rolls back the rows written above
            raise TuitionValidationError(
                _('Payment exceeds the amount due for the selected months by %(extra)s') % {'extra': remaining_payment}
            )

    total_amount = monthly_fee * months_count
    logger.info(
        f"Multi-month payment for student {student.pk}: {months_count} months from {start_month:02d}/{start_year}, "
        f"paid={paid_total} created={len(created)} updated={len(updated)}"
    )
    return MultiMonthResult(created, updated, total_amount, paid_total)
