import json
from datetime import date
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase, RequestFactory
from django.urls import reverse

from education.models import Tenant, Student, StudentPaymentLeave, StaffPermission
from .exceptions import TuitionValidationError, PaymentNotFound
from .models import Payment
from .services.billing import (
    add_partial_payment, generate_billing_period, generate_payment_schedule, record_multi_month_payment
)
from .services.progress import (
    MONTH_STATUSES, build_monthly_overview, calculate_monthly_payment_progress, calculate_percentage,
    classify_month, get_due_date, MonthlyProgress
)
from .services.tuition import MAX_FEE, bulk_update_tuition, parse_effective_date, parse_fee
from .utils import handle_api_error

User = get_user_model()


class TuitionTestMixin:
    def setUp(self):
        """Set up test data"""
        self.tenant = Tenant.objects.create(name="Test School", email="school@test.uz", status='ACTIVE')
        self.admin = User.objects.create_user(
            username="schooladmin",
            password="testpass123",
            role="ADMIN",
            tenant=self.tenant
        )
        self.student = Student.objects.create(
            tenant=self.tenant,
            student_code="ST001",
            full_name="Test Student",
            enrollment_date=date(2024, 9, 1),
            monthly_tuition_fee=Decimal('500000.00'),
        )

    def make_payment(self, month, year=2025, fee=Decimal('500000.00'), paid=Decimal('0.00'), student=None):
        student = student or self.student
        return Payment.objects.create(
            tenant=student.tenant,
            student=student,
            payment_type='TUITION',
            amount=fee,
            paid_amount=paid,
            remaining_amount=fee - paid,
            tuition_fee_at_payment=fee,
            status=Payment.status_for(paid, fee),
            payment_month=month,
            payment_year=year,
            due_date=date(year, month, 5),
        )


class PaymentModelTestCase(TuitionTestMixin, TestCase):
    def test_invoice_numbers_are_sequential_per_year(self):
        first = self.make_payment(1)
        second = self.make_payment(2)
        self.assertEqual(first.invoice_number, 'INV-2025-000001')
        self.assertEqual(second.invoice_number, 'INV-2025-000002')

    def test_status_for(self):
        self.assertEqual(Payment.status_for(Decimal('0'), Decimal('100')), 'PENDING')
        self.assertEqual(Payment.status_for(Decimal('40'), Decimal('100')), 'PARTIALLY_PAID')
        self.assertEqual(Payment.status_for(Decimal('100'), Decimal('100')), 'PAID')


class ProgressCalculatorTestCase(TuitionTestMixin, TestCase):
    def test_no_payment_row_returns_none(self):
        self.assertIsNone(calculate_monthly_payment_progress(self.student.pk, self.tenant.pk, 9, 2025))

    def test_partial_payment_progress(self):
        payment = self.make_payment(3, paid=Decimal('300000.00'))
        progress = calculate_monthly_payment_progress(self.student.pk, self.tenant.pk, 3, 2025)

        self.assertEqual(progress.total_paid, Decimal('300000.00'))
        self.assertEqual(progress.monthly_tuition_fee, Decimal('500000.00'))
        self.assertEqual(progress.percentage_paid, 60)
        self.assertFalse(progress.is_fully_paid)
        self.assertEqual(progress.payment_count, 1)
        self.assertEqual(progress.payment_id, payment.pk)

    def test_required_amount_is_the_snapshot_not_the_live_fee(self):
        self.make_payment(2, paid=Decimal('500000.00'))
        self.student.monthly_tuition_fee = Decimal('900000.00')
        self.student.save()

        progress = calculate_monthly_payment_progress(self.student.pk, self.tenant.pk, 2, 2025)
        self.assertEqual(progress.monthly_tuition_fee, Decimal('500000.00'))
        self.assertTrue(progress.is_fully_paid)
        self.assertEqual(progress.percentage_paid, 100)

    def test_other_tenant_rows_are_ignored(self):
        self.make_payment(4, paid=Decimal('100000.00'))
        other = Tenant.objects.create(name="Other School")
        self.assertIsNone(calculate_monthly_payment_progress(self.student.pk, other.pk, 4, 2025))

    def test_zero_fee_gives_zero_percentage(self):
        self.assertEqual(calculate_percentage(Decimal('0'), Decimal('0')), 0)
        self.assertEqual(calculate_percentage(Decimal('1000'), Decimal('0')), 0)
        self.make_payment(5, fee=Decimal('0.00'))
        progress = calculate_monthly_payment_progress(self.student.pk, self.tenant.pk, 5, 2025)
        self.assertEqual(progress.percentage_paid, 0)

    def test_percentage_rounds_half_up_and_clamps(self):
        self.assertEqual(calculate_percentage(Decimal('1'), Decimal('8')), 13)
        self.assertEqual(calculate_percentage(Decimal('200'), Decimal('100')), 100)

    def test_due_date_is_clamped_to_month_length(self):
        self.student.payment_due_day = 28
        self.assertEqual(get_due_date(self.student, 2, 2025), date(2025, 2, 28))
        self.student.payment_due_day = 5
        self.assertEqual(get_due_date(self.student, 6, 2025), date(2025, 6, 5))


class StatusClassifierTestCase(TuitionTestMixin, TestCase):
    def test_overdue_partial_payment(self):
        self.make_payment(3, paid=Decimal('300000.00'))
        progress = calculate_monthly_payment_progress(self.student.pk, self.tenant.pk, 3, 2025)
        status = classify_month(progress, date(2025, 3, 5), date(2025, 4, 1))

        self.assertEqual(status.status, 'overdue')
        self.assertTrue(status.is_overdue)
        self.assertFalse(status.is_pending)
        self.assertEqual(progress.percentage_paid, 60)

    def test_each_case_gets_exactly_one_status(self):
        due = date(2025, 3, 5)
        cases = [
            (Decimal('0'), date(2025, 3, 1), 'pending'),
            (Decimal('0'), date(2025, 3, 10), 'overdue'),
            (Decimal('100'), date(2025, 3, 1), 'partially_paid'),
            (Decimal('100'), date(2025, 3, 10), 'overdue'),
            (Decimal('500'), date(2025, 3, 10), 'completed'),
            (Decimal('500'), date(2025, 3, 1), 'completed'),
        ]
        for total_paid, today, expected in cases:
            progress = MonthlyProgress(
                total_paid, Decimal('500'), calculate_percentage(total_paid, Decimal('500')),
                total_paid >= Decimal('500'), 1, 1
            )
            status = classify_month(progress, due, today)
            self.assertEqual(status.status, expected)
            self.assertIn(status.status, MONTH_STATUSES)

        self.assertEqual(classify_month(None, due, date(2025, 4, 1)).status, 'not_due')

    def test_due_day_itself_is_not_overdue(self):
        progress = MonthlyProgress(Decimal('0'), Decimal('500'), 0, False, 1, 1)
        self.assertEqual(classify_month(progress, date(2025, 3, 5), date(2025, 3, 5)).status, 'pending')


class MonthlyOverviewTestCase(TuitionTestMixin, TestCase):
    def test_month_without_row_is_not_due(self):
        overview = build_monthly_overview(self.student, 2025, today=date(2025, 10, 1))
        september = overview[8]

        self.assertEqual(len(overview), 12)
        self.assertEqual(september['month'], 9)
        self.assertEqual(september['status'], 'not_due')
        self.assertFalse(september['hasPayment'])
        self.assertEqual(september['percentagePaid'], 0)
        self.assertIsNone(september['paymentId'])

    def test_months_before_enrollment_are_not_applicable(self):
        self.student.enrollment_date = date(2025, 4, 15)
        self.student.save()
        overview = build_monthly_overview(self.student, 2025, today=date(2025, 10, 1))

        self.assertTrue(all(m['isNotApplicable'] for m in overview[:3]))
        self.assertFalse(overview[3]['isNotApplicable'])

    def test_leave_month(self):
        StudentPaymentLeave.objects.create(student=self.student, month=7, year=2025, reason="Summer")
        overview = build_monthly_overview(self.student, 2025, today=date(2025, 10, 1))

        self.assertTrue(overview[6]['isLeave'])
        self.assertEqual(overview[6]['leaveReason'], "Summer")
        self.assertEqual(overview[6]['status'], 'not_due')

    def test_billed_months(self):
        self.make_payment(1, paid=Decimal('500000.00'))
        self.make_payment(3, paid=Decimal('300000.00'))
        overview = build_monthly_overview(self.student, 2025, today=date(2025, 4, 1))

        self.assertEqual(overview[0]['status'], 'completed')
        self.assertTrue(overview[0]['isFullyPaid'])
        self.assertEqual(overview[2]['status'], 'overdue')
        self.assertEqual(overview[2]['totalPaid'], 300000.0)
        self.assertEqual(overview[2]['requiredAmount'], 500000.0)
        self.assertEqual(overview[2]['percentagePaid'], 60)


class BulkTuitionUpdateTestCase(TuitionTestMixin, TestCase):
    def test_fee_change_with_effective_date(self):
        may = self.make_payment(5)
        june = self.make_payment(6)
        july = self.make_payment(7)

        result = bulk_update_tuition(self.tenant, [self.student.pk], 600000, effective_date='2025-06-01')

        self.assertEqual(result.updated_count, 1)
        self.assertEqual(result.payments_rewritten, 2)
        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('600000.00'))

        may.refresh_from_db()
        june.refresh_from_db()
        july.refresh_from_db()
        self.assertEqual(may.tuition_fee_at_payment, Decimal('500000.00'))
        for payment in (june, july):
            self.assertEqual(payment.amount, Decimal('600000.00'))
            self.assertEqual(payment.remaining_amount, Decimal('600000.00'))
            self.assertEqual(payment.tuition_fee_at_payment, Decimal('600000.00'))
        for payment in (may, june, july):
            self.assertTrue(payment.is_consistent())

    def test_paid_and_partially_paid_rows_are_untouched(self):
        partial = self.make_payment(8, paid=Decimal('100000.00'))
        paid = self.make_payment(9, paid=Decimal('500000.00'))

        bulk_update_tuition(self.tenant, [self.student.pk], '700000', effective_date=date(2025, 1, 1))

        partial.refresh_from_db()
        paid.refresh_from_db()
        self.assertEqual(partial.tuition_fee_at_payment, Decimal('500000.00'))
        self.assertEqual(partial.remaining_amount, Decimal('400000.00'))
        self.assertEqual(paid.tuition_fee_at_payment, Decimal('500000.00'))
        self.assertTrue(partial.is_consistent())
        self.assertTrue(paid.is_consistent())

    def test_without_effective_date_rows_are_untouched(self):
        june = self.make_payment(6)
        result = bulk_update_tuition(self.tenant, [self.student.pk], 600000)

        june.refresh_from_db()
        self.assertEqual(result.payments_rewritten, 0)
        self.assertEqual(june.tuition_fee_at_payment, Decimal('500000.00'))

    def test_students_of_other_tenants_are_not_updated(self):
        other = Tenant.objects.create(name="Other School")
        outsider = Student.objects.create(
            tenant=other, student_code="X1", full_name="Outsider", monthly_tuition_fee=Decimal('100.00')
        )
        result = bulk_update_tuition(self.tenant, [self.student.pk, outsider.pk], 600000)

        outsider.refresh_from_db()
        self.assertEqual(result.updated_count, 1)
        self.assertEqual(outsider.monthly_tuition_fee, Decimal('100.00'))

    def test_validation(self):
        with self.assertRaises(TuitionValidationError):
            bulk_update_tuition(self.tenant, [], 600000)
        with self.assertRaises(TuitionValidationError):
            bulk_update_tuition(self.tenant, [self.student.pk], -1)
        with self.assertRaises(TuitionValidationError):
            bulk_update_tuition(self.tenant, [self.student.pk], 'abc')
        with self.assertRaises(TuitionValidationError):
            bulk_update_tuition(self.tenant, [self.student.pk], 600000, effective_date='not-a-date')
        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('500000.00'))

    def test_fee_too_large_for_the_money_columns_is_rejected(self):
        self.assertEqual(MAX_FEE, Decimal('999999999999.99'))
        self.assertEqual(parse_fee('999999999999.99'), MAX_FEE)
        for fee in ('1e30', 1e15, '1000000000000'):
            with self.assertRaises(TuitionValidationError):
                bulk_update_tuition(self.tenant, [self.student.pk], fee)
        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('500000.00'))

    def test_zero_fee_rewrite_marks_pending_rows_paid(self):
        june = self.make_payment(6)
        bulk_update_tuition(self.tenant, [self.student.pk], 0, effective_date='2025-06-01')

        june.refresh_from_db()
        self.assertEqual(june.status, 'PAID')
        self.assertEqual(june.remaining_amount, Decimal('0.00'))
        self.assertTrue(june.is_consistent())

    def test_student_update_is_rolled_back_when_payment_rewrite_fails(self):
        self.make_payment(6)
        with mock.patch.object(Payment.objects, 'filter') as payment_filter:
            payment_filter.return_value.filter.return_value.update.side_effect = DatabaseError("disk full")
            with self.assertRaises(DatabaseError):
                bulk_update_tuition(self.tenant, [self.student.pk], 600000, effective_date='2025-06-01')

        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('500000.00'))

    def test_zero_fee_is_allowed(self):
        self.assertEqual(parse_fee(0), Decimal('0.00'))
        bulk_update_tuition(self.tenant, [self.student.pk], 0)
        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('0.00'))

    def test_parse_effective_date(self):
        self.assertEqual(parse_effective_date('2025-06-01'), date(2025, 6, 1))
        self.assertEqual(parse_effective_date('2025-06-01T10:00:00Z'), date(2025, 6, 1))
        self.assertIsNone(parse_effective_date(None))


class BillingTestCase(TuitionTestMixin, TestCase):
    def test_generate_billing_period(self):
        payment = generate_billing_period(self.student, 10, 2025)

        self.assertEqual(payment.status, 'PENDING')
        self.assertEqual(payment.amount, Decimal('500000.00'))
        self.assertEqual(payment.tuition_fee_at_payment, Decimal('500000.00'))
        self.assertEqual(payment.due_date, date(2025, 10, 5))
        self.assertTrue(payment.is_consistent())
        self.assertIsNone(generate_billing_period(self.student, 10, 2025))

    def test_skipped_periods(self):
        StudentPaymentLeave.objects.create(student=self.student, month=7, year=2025)
        self.assertIsNone(generate_billing_period(self.student, 7, 2025))
        self.assertIsNone(generate_billing_period(self.student, 8, 2024))

        self.student.status = 'GRADUATED'
        self.assertIsNone(generate_billing_period(self.student, 10, 2025))

    def test_generate_payment_schedule_rolls_over_year(self):
        created = generate_payment_schedule(self.student, 11, 2025, months_count=3)
        periods = [(p.payment_month, p.payment_year) for p in created]
        self.assertEqual(periods, [(11, 2025), (12, 2025), (1, 2026)])

    def test_add_partial_payment(self):
        payment = self.make_payment(3)

        payment = add_partial_payment(payment, '200000', payment_method='CASH', received_by=self.admin, today=date(2025, 3, 2))
        self.assertEqual(payment.status, 'PARTIALLY_PAID')
        self.assertEqual(payment.remaining_amount, Decimal('300000.00'))
        self.assertEqual(payment.paid_date, date(2025, 3, 2))

        payment = add_partial_payment(payment, 300000, payment_method='CARD', today=date(2025, 3, 20))
        self.assertEqual(payment.status, 'PAID')
        self.assertEqual(payment.remaining_amount, Decimal('0.00'))
        self.assertEqual(payment.paid_date, date(2025, 3, 2))
        self.assertEqual(len(payment.notes.splitlines()), 2)
        self.assertTrue(payment.is_consistent())

        with self.assertRaises(TuitionValidationError):
            add_partial_payment(payment, 1)

    def test_oversized_amounts_are_rejected(self):
        payment = self.make_payment(3)
        with self.assertRaises(TuitionValidationError):
            add_partial_payment(payment, '1e30')
        self.student.monthly_tuition_fee = Decimal('100000.00')
        self.student.save()
        with self.assertRaises(TuitionValidationError):
            record_multi_month_payment(self.student, 1, 2025, 1, payment_amount=1e15)
        payment.refresh_from_db()
        self.assertEqual(payment.paid_amount, Decimal('0.00'))

    def test_partial_payment_cannot_exceed_amount(self):
        payment = self.make_payment(3, paid=Decimal('400000.00'))
        with self.assertRaises(TuitionValidationError):
            add_partial_payment(payment, 200000)
        with self.assertRaises(TuitionValidationError):
            add_partial_payment(payment, 0)
        payment.refresh_from_db()
        self.assertEqual(payment.paid_amount, Decimal('400000.00'))

    def test_multi_month_payment(self):
        self.student.monthly_tuition_fee = Decimal('100000.00')
        self.student.save()

        result = record_multi_month_payment(self.student, 11, 2025, 3, payment_amount=250000, paid_date=date(2025, 11, 1))

        self.assertEqual(len(result.created), 3)
        self.assertEqual(result.total_amount, Decimal('300000.00'))
        statuses = [p.status for p in result.created]
        self.assertEqual(statuses, ['PAID', 'PAID', 'PARTIALLY_PAID'])
        self.assertEqual(result.created[2].payment_year, 2026)
        self.assertEqual(result.created[2].remaining_amount, Decimal('50000.00'))
        self.assertTrue(all(p.is_consistent() for p in result.created))

    def test_multi_month_payment_tops_up_existing_rows(self):
        self.student.monthly_tuition_fee = Decimal('100000.00')
        self.student.save()
        existing = self.make_payment(11, fee=Decimal('100000.00'), paid=Decimal('30000.00'))

        result = record_multi_month_payment(self.student, 11, 2025, 2, payment_amount=170000)

        existing.refresh_from_db()
        self.assertEqual(existing.status, 'PAID')
        self.assertEqual(len(result.updated), 1)
        self.assertEqual(len(result.created), 1)
        self.assertEqual(result.created[0].status, 'PAID')

    def test_multi_month_overpayment_is_rolled_back(self):
        self.student.monthly_tuition_fee = Decimal('100000.00')
        self.student.save()
        with self.assertRaises(TuitionValidationError):
            record_multi_month_payment(self.student, 1, 2025, 2, payment_amount=300000)
        self.assertFalse(Payment.objects.filter(student=self.student).exists())

    def test_multi_month_validation(self):
        with self.assertRaises(TuitionValidationError):
            record_multi_month_payment(self.student, 1, 2025, 13)
        with self.assertRaises(TuitionValidationError):
            record_multi_month_payment(self.student, 0, 2025, 1)
        self.student.monthly_tuition_fee = Decimal('0.00')
        with self.assertRaises(TuitionValidationError):
            record_multi_month_payment(self.student, 1, 2025, 1)


class GenerateMonthlyPaymentsCommandTestCase(TuitionTestMixin, TestCase):
    def test_generates_for_active_students(self):
        Student.objects.create(tenant=self.tenant, student_code="ST002", full_name="Left", status='INACTIVE',
                               enrollment_date=date(2024, 9, 1), monthly_tuition_fee=Decimal('100.00'))
        out = StringIO()
        call_command('generate_monthly_payments', month=10, year=2025, stdout=out)

        self.assertEqual(Payment.objects.filter(payment_month=10, payment_year=2025).count(), 1)
        self.assertIn('Generated: 1', out.getvalue())

    def test_dry_run_creates_nothing(self):
        out = StringIO()
        call_command('generate_monthly_payments', month=10, year=2025, dry_run=True, stdout=out)

        self.assertFalse(Payment.objects.exists())
        self.assertIn('[DRY RUN]', out.getvalue())


class TuitionApiTestCase(TuitionTestMixin, TestCase):
    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_bulk_update_requires_authentication(self):
        response = self.post_json(reverse('api_bulk_update_tuition'), {'studentIds': [self.student.pk], 'newTuitionFee': 1})
        self.assertEqual(response.status_code, 401)

    def test_bulk_update_as_admin(self):
        self.make_payment(6)
        self.client.force_login(self.admin)
        response = self.post_json(reverse('api_bulk_update_tuition'), {
            'studentIds': [self.student.pk],
            'newTuitionFee': 600000,
            'effectiveDate': '2025-06-01',
        })

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['updatedCount'], 1)
        self.assertIn('message', body)

    def test_bulk_update_rejects_oversized_fee(self):
        self.client.force_login(self.admin)
        for fee in ('1e30', 1e15):
            response = self.post_json(reverse('api_bulk_update_tuition'), {'studentIds': [self.student.pk], 'newTuitionFee': fee})
            self.assertEqual(response.status_code, 400)
            self.assertIn('error', response.json())

        self.student.refresh_from_db()
        self.assertEqual(self.student.monthly_tuition_fee, Decimal('500000.00'))
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]))
        self.assertEqual(response.status_code, 200)

    def test_bulk_update_validation_error(self):
        self.client.force_login(self.admin)
        response = self.post_json(reverse('api_bulk_update_tuition'), {'studentIds': [], 'newTuitionFee': 600000})
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

        response = self.client.post(reverse('api_bulk_update_tuition'), data='{not json', content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_bulk_update_forbidden_for_teacher(self):
        teacher = User.objects.create_user(username="teacher", password="x", role="TEACHER", tenant=self.tenant)
        self.client.force_login(teacher)
        response = self.post_json(reverse('api_bulk_update_tuition'), {'studentIds': [self.student.pk], 'newTuitionFee': 1})
        self.assertEqual(response.status_code, 403)

    def test_bulk_update_by_moderator_depends_on_grant(self):
        moderator = User.objects.create_user(username="moderator", password="x", role="MODERATOR", tenant=self.tenant)
        self.client.force_login(moderator)
        payload = {'studentIds': [self.student.pk], 'newTuitionFee': 1}
        self.assertEqual(self.post_json(reverse('api_bulk_update_tuition'), payload).status_code, 403)

        StaffPermission.objects.create(tenant=self.tenant, user=moderator, resource='students', action='UPDATE')
        self.assertEqual(self.post_json(reverse('api_bulk_update_tuition'), payload).status_code, 200)

    def test_bulk_update_forbidden_for_super_admin_without_tenant(self):
        superadmin = User.objects.create_user(username="root", password="x", role="SUPER_ADMIN")
        self.client.force_login(superadmin)
        response = self.post_json(reverse('api_bulk_update_tuition'), {'studentIds': [self.student.pk], 'newTuitionFee': 1})
        self.assertEqual(response.status_code, 403)

    def test_bulk_update_get_not_allowed(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.client.get(reverse('api_bulk_update_tuition')).status_code, 405)

    def test_payment_overview(self):
        self.make_payment(3, paid=Decimal('300000.00'))
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]), {'year': 2025})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(len(body['monthlyStatuses']), 12)
        self.assertEqual(body['enrollmentDate'], '2024-09-01')
        self.assertEqual(body['monthlyStatuses'][2]['percentagePaid'], 60)

    def test_payment_overview_for_super_admin(self):
        superadmin = User.objects.create_user(username="root", password="x", role="SUPER_ADMIN")
        self.client.force_login(superadmin)
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]), {'year': 2025})
        self.assertEqual(response.status_code, 200)

    def test_payment_overview_other_tenant_student_is_404(self):
        other = Tenant.objects.create(name="Other School", status='ACTIVE')
        outsider = Student.objects.create(tenant=other, student_code="X1", full_name="Outsider")
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_student_payment_overview', args=[outsider.pk]))
        self.assertEqual(response.status_code, 404)

    def test_payment_overview_invalid_year(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]), {'year': 'abc'})
        self.assertEqual(response.status_code, 400)

    def test_payment_overview_forbidden_for_parent(self):
        parent = User.objects.create_user(username="parent", password="x", role="PARENT", tenant=self.tenant)
        self.client.force_login(parent)
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]))
        self.assertEqual(response.status_code, 403)

    def test_suspended_tenant_is_refused(self):
        self.tenant.status = 'SUSPENDED'
        self.tenant.save()
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_student_payment_overview', args=[self.student.pk]))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['tenantStatus'], 'SUSPENDED')

    def test_multi_month_endpoint(self):
        self.client.force_login(self.admin)
        response = self.post_json(reverse('api_multi_month_payment'), {
            'studentId': self.student.pk,
            'startMonth': 1,
            'startYear': 2026,
            'monthsCount': 2,
            'paymentAmount': 750000,
        })

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['createdCount'], 2)
        self.assertEqual(body['totalAmount'], 1000000.0)
        self.assertEqual(Payment.objects.filter(student=self.student, received_by=self.admin).count(), 2)

    def test_multi_month_endpoint_invalid_method(self):
        self.client.force_login(self.admin)
        response = self.post_json(reverse('api_multi_month_payment'), {
            'studentId': self.student.pk, 'startMonth': 1, 'startYear': 2026, 'monthsCount': 1, 'paymentMethod': 'GOLD',
        })
        self.assertEqual(response.status_code, 400)

    def test_partial_payment_endpoint(self):
        payment = self.make_payment(3)
        self.client.force_login(self.admin)
        response = self.post_json(reverse('api_add_partial_payment', args=[payment.pk]), {'amount': 100000, 'paymentMethod': 'CARD'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['payment']['status'], 'PARTIALLY_PAID')
        self.assertEqual(response.json()['payment']['remainingAmount'], 400000.0)

        response = self.post_json(reverse('api_add_partial_payment', args=[999999]), {'amount': 1})
        self.assertEqual(response.status_code, 404)

    def test_payment_leave_endpoint(self):
        self.client.force_login(self.admin)
        url = reverse('api_student_payment_leave', args=[self.student.pk])

        response = self.post_json(url, {'month': 7, 'year': 2025, 'reason': 'Summer'})
        self.assertEqual(response.status_code, 201)
        self.assertTrue(self.student.is_on_leave(7, 2025))

        self.assertEqual(self.post_json(url, {'month': 7, 'year': 2025}).status_code, 400)
        self.assertEqual(self.post_json(url, {'month': 13, 'year': 2025}).status_code, 400)

        response = self.client.delete(url, data=json.dumps({'month': 7, 'year': 2025}), content_type='application/json')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(self.student.is_on_leave(7, 2025))

        response = self.client.delete(url, data=json.dumps({'month': 7, 'year': 2025}), content_type='application/json')
        self.assertEqual(response.status_code, 404)


class HandleApiErrorTestCase(TestCase):
    def setUp(self):
        self.request = RequestFactory().get('/api/test/')

    def test_domain_errors_keep_their_status(self):
        response = handle_api_error(PaymentNotFound("Student not found"), self.request)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(json.loads(response.content)['error'], "Student not found")

        response = handle_api_error(TuitionValidationError("Bad", errors=['x']), self.request)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(json.loads(response.content)['errors'], ['x'])

    def test_unexpected_error_is_generic_500(self):
        with self.assertLogs('accounts.utils', level='ERROR'):
            response = handle_api_error(RuntimeError("secret detail"), self.request)
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('secret detail', response.content.decode())
