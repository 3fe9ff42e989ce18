"""
Management command to generate the monthly tuition billing rows of active students
"""
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from accounts.services.billing import billing_skip_reason, generate_billing_period
from education.models import Student


class Command(BaseCommand):
    help = 'Generate PENDING tuition payments for a billing month (defaults to the current month)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--tenant-id',
            type=int,
            help='Generate payments for a specific school only',
        )
        parser.add_argument('--month', type=int, help='Billing month (1-12)')
        parser.add_argument('--year', type=int, help='Billing year')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be generated without actually creating payments',
        )

    def handle(self, *args, **options):
        today = timezone.localdate()
        tenant_id = options.get('tenant_id')
        month = options.get('month') or today.month
        year = options.get('year') or today.year
        dry_run = options.get('dry_run', False)

        if not 1 <= month <= 12:
            raise CommandError('--month must be between 1 and 12')

        students = Student.objects.filter(status='ACTIVE').select_related('tenant')
        if tenant_id:
            students = students.filter(tenant_id=tenant_id)

        total_generated = 0
        skipped = {}
        errors = []

        self.stdout.write(f"Processing {students.count()} students for {month:02d}/{year}...")

        for student in students:
            try:
                reason = billing_skip_reason(student, month, year)
                if reason:
                    skipped[reason] = skipped.get(reason, 0) + 1
                    continue

                if dry_run:
                    self.stdout.write(
                        self.style.WARNING(
                            f"[DRY RUN] Would bill {student.student_code} {student.monthly_tuition_fee} for {month:02d}/{year}"
                        )
                    )
                    total_generated += 1
                    continue

                payment = generate_billing_period(student, month, year)
                if payment:
                    self.stdout.write(
                        self.style.SUCCESS(f"Generated {payment.invoice_number} for {student.student_code}")
                    )
                    total_generated += 1
            except Exception as e:
                error_msg = f"Error processing student {student.student_code}: {str(e)}"
                errors.append(error_msg)
                self.stdout.write(self.style.ERROR(error_msg))

        # Summary
        self.stdout.write("\n" + "=" * 50)
        self.stdout.write(self.style.SUCCESS("Summary:"))
        self.stdout.write(f"  Generated: {total_generated}")
        for reason, count in sorted(skipped.items()):
            self.stdout.write(f"  Skipped ({reason}): {count}")
        if errors:
            self.stdout.write(self.style.ERROR(f"  Errors: {len(errors)}"))
            for error in errors[:10]:
                self.stdout.write(self.style.ERROR(f"    - {error}"))
