"""
Bulk tuition fee changes
"""
import logging
from collections import namedtuple
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from django.utils.translation import gettext as _

from accounts.exceptions import TuitionValidationError
from accounts.models import Payment
from education.models import Student

logger = logging.getLogger(__name__)


BulkTuitionResult = namedtuple('BulkTuitionResult', ['updated_count', 'payments_rewritten'])

_fee_field = Student._meta.get_field('monthly_tuition_fee')
# Largest amount a max_digits/decimal_places money column can hold, e.g. 999999999999.99
MAX_FEE = Decimal(10) ** (_fee_field.max_digits - _fee_field.decimal_places) - Decimal(1).scaleb(-_fee_field.decimal_places)


def parse_fee(value):
    """
    Coerce a fee from JSON (number or numeric string) to a non-negative Decimal.

    Raises:
        TuitionValidationError: value is missing, not numeric, not finite,
            negative, or too large for the money columns
    """
    if value is None or isinstance(value, bool) or value == '':
        raise TuitionValidationError(_('Invalid tuition fee amount'))
    try:
        fee = Decimal(str(value))
        if not fee.is_finite() or fee < 0:
            raise TuitionValidationError(_('Invalid tuition fee amount'))
        fee = fee.quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError):
        raise TuitionValidationError(_('Invalid tuition fee amount'))
    if fee > MAX_FEE:
        raise TuitionValidationError(_('Invalid tuition fee amount'))
    return fee


def parse_student_ids(values):
    """
    Coerce a list of student ids to ints.

    Raises:
        TuitionValidationError: not a list, empty, or containing non-integer ids
    """
    if not isinstance(values, (list, tuple)) or len(values) == 0:
        raise TuitionValidationError(_('Select at least one student'))
    student_ids = []
    for value in values:
        if isinstance(value, bool):
            raise TuitionValidationError(_('Invalid student id: %(id)s') % {'id': value})
        try:
            student_ids.append(int(value))
        except (TypeError, ValueError):
            raise TuitionValidationError(_('Invalid student id: %(id)s') % {'id': value})
    return student_ids


def parse_effective_date(value):
    """Accept a date, datetime, ISO date or ISO datetime string, or None"""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value)
            if parsed is None:
                parsed_dt = parse_datetime(value)
                parsed = parsed_dt.date() if parsed_dt else None
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise TuitionValidationError(_('Invalid effective date'))


def bulk_update_tuition(tenant, student_ids, new_tuition_fee, effective_date=None):
    """
    Apply a new monthly tuition fee to a group of students.

    Every selected student of the tenant gets the new fee. When effective_date
    is given, PENDING tuition rows of those students billed for the effective
    month or later are rewritten to the new fee as well (amount, remaining
    amount and fee snapshot). Rewritten to a zero fee they become PAID.
    PARTIALLY_PAID and PAID rows are never touched.

    Both writes happen in one transaction.

    Args:
        tenant: Tenant the students must belong to
        student_ids: list of student ids
        new_tuition_fee: number or numeric string, >= 0
        effective_date: date or ISO string (optional)

    Returns:
        BulkTuitionResult(updated_count, payments_rewritten)

    Raises:
        TuitionValidationError: empty student list, invalid fee or date
    """
    student_ids = parse_student_ids(student_ids)
    fee = parse_fee(new_tuition_fee)
    effective_date = parse_effective_date(effective_date)

    payments_rewritten = 0
    with transaction.atomic():
        updated_count = Student.objects.filter(
            tenant=tenant,
            id__in=student_ids
        ).update(monthly_tuition_fee=fee, updated_at=timezone.now())

        if effective_date is not None:
            payments_rewritten = Payment.objects.filter(
                tenant=tenant,
                student_id__in=student_ids,
                payment_type='TUITION',
                status='PENDING',
            ).filter(
                Q(payment_year__gt=effective_date.year) |
                Q(payment_year=effective_date.year, payment_month__gte=effective_date.month)
            ).update(
                amount=fee,
                remaining_amount=fee,
                tuition_fee_at_payment=fee,
                # A zero fee leaves nothing to pay
                status=Payment.status_for(Decimal('0.00'), fee),
                updated_at=timezone.now(),
            )

    logger.info(
        f"Bulk tuition update for tenant {tenant.pk}: fee={fee} students={updated_count}/{len(student_ids)} "
        f"payments_rewritten={payments_rewritten} effective={effective_date}"
    )
    return BulkTuitionResult(updated_count, payments_rewritten)
