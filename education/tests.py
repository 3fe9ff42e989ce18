from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from .models import Tenant, Student, StaffPermission
from .permissions import (
    filter_resources, get_resource_from_path, has_permission, permission_granted
)
from .tenancy import check_tenant_access

User = get_user_model()


class PermissionsTestCase(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Test School", status='ACTIVE')
        self.superadmin = User.objects.create_user(username="root", password="x", role="SUPER_ADMIN")
        self.admin = User.objects.create_user(username="admin", password="x", role="ADMIN", tenant=self.tenant)
        self.moderator = User.objects.create_user(username="moderator", password="x", role="MODERATOR", tenant=self.tenant)
        self.teacher = User.objects.create_user(username="teacher", password="x", role="TEACHER", tenant=self.tenant)
        self.parent = User.objects.create_user(username="parent", password="x", role="PARENT", tenant=self.tenant)
        self.cook = User.objects.create_user(username="cook", password="x", role="COOK", tenant=self.tenant)

    def test_super_admin_can_do_everything(self):
        self.assertTrue(has_permission(self.superadmin, 'payments', 'DELETE'))
        self.assertTrue(has_permission(self.superadmin, 'platform_settings', 'UPDATE'))

    def test_django_superuser_counts_as_super_admin(self):
        user = User.objects.create_superuser(username="django", password="x", email="d@test.uz")
        self.assertTrue(has_permission(user, 'students', 'UPDATE'))

    def test_admin_has_tenant_resources_but_only_reads_platform_settings(self):
        self.assertTrue(has_permission(self.admin, 'students', 'UPDATE'))
        self.assertTrue(has_permission(self.admin, 'payments', 'CREATE'))
        self.assertTrue(has_permission(self.admin, 'platform_settings', 'READ'))
        self.assertFalse(has_permission(self.admin, 'platform_settings', 'UPDATE'))

    def test_admin_without_tenant_is_denied(self):
        orphan = User.objects.create_user(username="orphan", password="x", role="ADMIN")
        self.assertFalse(has_permission(orphan, 'students', 'READ'))

    def test_moderator_uses_stored_grants(self):
        self.assertFalse(has_permission(self.moderator, 'students', 'READ'))

        StaffPermission.objects.create(tenant=self.tenant, user=self.moderator, resource='students', action='READ')
        StaffPermission.objects.create(tenant=self.tenant, user=self.moderator, resource='payments', action='ALL')
        moderator = User.objects.get(pk=self.moderator.pk)

        self.assertTrue(has_permission(moderator, 'students', 'READ'))
        self.assertFalse(has_permission(moderator, 'students', 'UPDATE'))
        self.assertTrue(has_permission(moderator, 'payments', 'DELETE'))

    def test_fixed_role_grants(self):
        self.assertTrue(has_permission(self.teacher, 'grades', 'UPDATE'))
        self.assertFalse(has_permission(self.teacher, 'payments', 'READ'))
        self.assertTrue(has_permission(self.parent, 'payments', 'READ'))
        self.assertFalse(has_permission(self.parent, 'payments', 'UPDATE'))
        self.assertTrue(has_permission(self.cook, 'kitchen', 'DELETE'))
        self.assertFalse(has_permission(self.cook, 'students', 'READ'))

    def test_unknown_resource_or_action_and_inactive_users(self):
        self.assertFalse(has_permission(self.admin, 'nuclear_codes', 'READ'))
        self.assertFalse(has_permission(self.admin, 'students', 'ALL'))
        self.admin.is_active = False
        self.assertFalse(has_permission(self.admin, 'students', 'READ'))
        self.assertFalse(has_permission(None, 'students', 'READ'))

    def test_permission_granted(self):
        self.assertTrue(permission_granted({'students': {'ALL'}}, 'students', 'DELETE'))
        self.assertFalse(permission_granted({'students': {'READ'}}, 'students', 'DELETE'))
        self.assertFalse(permission_granted({}, 'students', 'READ'))

    def test_get_resource_from_path(self):
        self.assertEqual(get_resource_from_path('/admin/students/12'), 'students')
        self.assertEqual(get_resource_from_path('/admin'), 'dashboard')
        self.assertEqual(get_resource_from_path('/admin/payments/'), 'payments')
        self.assertIsNone(get_resource_from_path('/elsewhere'))
        self.assertIsNone(get_resource_from_path(''))

    def test_filter_resources(self):
        keys = [r['key'] for r in filter_resources(self.cook)]
        self.assertEqual(keys, ['meals', 'kitchen'])


class TenantAccessTestCase(TestCase):
    def setUp(self):
        self.now = timezone.now()

    def test_missing_tenant(self):
        access = check_tenant_access(None)
        self.assertFalse(access.can_access)
        self.assertEqual(access.status, 'BLOCKED')

    def test_expired_subscription_moves_to_grace_period(self):
        tenant = Tenant.objects.create(name="School", status='ACTIVE', subscription_end=self.now - timedelta(days=1))
        access = check_tenant_access(tenant, now=self.now)

        self.assertTrue(access.can_access)
        self.assertEqual(access.status, 'GRACE_PERIOD')
        tenant.refresh_from_db()
        self.assertEqual(tenant.status, 'GRACE_PERIOD')

    def test_active_subscription(self):
        tenant = Tenant.objects.create(name="School", status='ACTIVE', subscription_end=self.now + timedelta(days=30))
        self.assertEqual(check_tenant_access(tenant, now=self.now).status, 'ACTIVE')

    def test_trial(self):
        tenant = Tenant.objects.create(name="School", status='TRIAL', trial_ends_at=self.now + timedelta(days=3))
        access = check_tenant_access(tenant, now=self.now)
        self.assertTrue(access.can_access)
        self.assertEqual(access.status, 'TRIAL')
        self.assertIsNotNone(access.message)

        tenant.trial_ends_at = self.now - timedelta(hours=1)
        tenant.save()
        self.assertEqual(check_tenant_access(tenant, now=self.now).status, 'GRACE_PERIOD')

    def test_suspended_and_blocked_are_refused(self):
        for status in ('SUSPENDED', 'BLOCKED'):
            tenant = Tenant.objects.create(name=f"School {status}", status=status)
            access = check_tenant_access(tenant, now=self.now)
            self.assertFalse(access.can_access)
            self.assertEqual(access.status, status)


class TenantModelTestCase(TestCase):
    def test_slug_is_generated(self):
        tenant = Tenant.objects.create(name="Green Valley School")
        self.assertEqual(tenant.slug, 'green-valley-school')

    def test_student_limit(self):
        tenant = Tenant.objects.create(name="Tiny School", max_students=1)
        self.assertTrue(tenant.can_add_student())
        Student.objects.create(tenant=tenant, student_code="S1", full_name="Only Student")
        self.assertFalse(tenant.can_add_student())
