import json

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from education.models import Tenant
from .models import GlobalSettings
from .services import ensure_default_global_settings, get_global_settings, update_global_settings

User = get_user_model()


class GlobalSettingsServiceTestCase(TestCase):
    def setUp(self):
        cache.clear()

    def test_lazy_creation_is_idempotent(self):
        self.assertFalse(GlobalSettings.objects.exists())
        first = ensure_default_global_settings()
        second = ensure_default_global_settings()

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(GlobalSettings.objects.count(), 1)
        self.assertEqual(first.platform_name, 'School LMS')
        self.assertEqual(first.timezone, 'Asia/Tashkent')

    def test_get_global_settings_creates_defaults(self):
        data = get_global_settings()
        self.assertEqual(data['platformName'], 'School LMS')
        self.assertEqual(data['defaultLanguage'], 'uz')
        self.assertEqual(GlobalSettings.objects.count(), 1)

    def test_update_invalidates_cache(self):
        get_global_settings()
        update_global_settings({'platformName': 'Maktab', 'maintenanceMode': True, 'unknownKey': 'ignored'})

        data = get_global_settings()
        self.assertEqual(data['platformName'], 'Maktab')
        self.assertTrue(data['maintenanceMode'])

    def test_update_validates(self):
        with self.assertRaises(ValidationError):
            update_global_settings({'supportEmail': 'not-an-email'})


class GlobalSettingsApiTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.tenant = Tenant.objects.create(name="Test School", status='ACTIVE')
        self.superadmin = User.objects.create_user(username="root", password="x", role="SUPER_ADMIN")
        self.admin = User.objects.create_user(username="admin", password="x", role="ADMIN", tenant=self.tenant)
        self.url = reverse('api_global_settings')

    def put_json(self, data):
        return self.client.put(self.url, data=json.dumps(data), content_type='application/json')

    def test_requires_authentication(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)

    def test_any_user_can_read(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['settings']['platformName'], 'School LMS')

    def test_only_super_admin_can_write(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.put_json({'platformName': 'Hacked'}).status_code, 403)

        self.client.force_login(self.superadmin)
        response = self.put_json({'platformName': 'Maktab'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['settings']['platformName'], 'Maktab')

    def test_invalid_values_are_rejected(self):
        self.client.force_login(self.superadmin)
        response = self.put_json({'supportEmail': 'not-an-email'})
        self.assertEqual(response.status_code, 400)
