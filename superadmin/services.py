"""
Platform-wide settings access.

The single GlobalSettings row is created lazily on first read and cached
through Django's cache framework; writes go through update_global_settings,
which drops the cached copy.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from .models import GlobalSettings

logger = logging.getLogger(__name__)

GLOBAL_SETTINGS_CACHE_KEY = 'global_settings'

DEFAULT_GLOBAL_SETTINGS = {
    'platform_name': 'School LMS',
    'platform_description': 'School management platform',
    'support_email': '',
    'support_phone': '+998 71 123 45 67',
    'default_language': 'uz',
    'timezone': 'Asia/Tashkent',
    'maintenance_mode': False,
    'maintenance_message': '',
}

# JSON key -> model field accepted by update_global_settings
EDITABLE_FIELDS = {
    'platformName': 'platform_name',
    'platformDescription': 'platform_description',
    'supportEmail': 'support_email',
    'supportPhone': 'support_phone',
    'defaultLanguage': 'default_language',
    'timezone': 'timezone',
    'maintenanceMode': 'maintenance_mode',
    'maintenanceMessage': 'maintenance_message',
}


def ensure_default_global_settings():
    """Return the settings row, creating it with defaults when missing. Safe to call repeatedly."""
    instance = GlobalSettings.objects.order_by('pk').first()
    if instance is None:
        instance = GlobalSettings.objects.create(**DEFAULT_GLOBAL_SETTINGS)
        logger.info(f"Created default global settings (id={instance.pk})")
    return instance


def get_global_settings():
    """Platform settings as a dict, served from cache when possible"""
    data = cache.get(GLOBAL_SETTINGS_CACHE_KEY)
    if data is None:
        data = ensure_default_global_settings().to_dict()
        cache.set(GLOBAL_SETTINGS_CACHE_KEY, data, settings.GLOBAL_SETTINGS_CACHE_TIMEOUT)
    return data


def invalidate_global_settings_cache():
    cache.delete(GLOBAL_SETTINGS_CACHE_KEY)


def update_global_settings(data):
    """
    Apply the known keys of data (camelCase, as sent by the frontend) to the
    settings row and validate it.

    Raises:
        django.core.exceptions.ValidationError: a field value is invalid
    """
    with transaction.atomic():
        instance = ensure_default_global_settings()
        changed = []
        for key, field in EDITABLE_FIELDS.items():
            if key in data:
                setattr(instance, field, data[key])
                changed.append(field)
        instance.full_clean()
        instance.save()

    invalidate_global_settings_cache()
    logger.info(f"Global settings updated: {', '.join(changed) or 'no changes'}")
    return instance.to_dict()
