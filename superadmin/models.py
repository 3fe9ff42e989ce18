from django.db import models


class GlobalSettings(models.Model):
    """Platform-wide settings managed by the Super Admin. A single row is used."""
    platform_name = models.CharField(max_length=200, default='School LMS')
    platform_description = models.TextField(blank=True, default='')
    support_email = models.EmailField(blank=True, default='')
    support_phone = models.CharField(max_length=50, blank=True, default='')
    default_language = models.CharField(max_length=10, default='uz')
    timezone = models.CharField(max_length=50, default='Asia/Tashkent')
    maintenance_mode = models.BooleanField(default=False)
    maintenance_message = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'global_settings'
        verbose_name = 'Global Settings'
        verbose_name_plural = 'Global Settings'

    def __str__(self):
        return f"Global Settings - {self.platform_name}"

    def to_dict(self):
        return {
            'id': self.id,
            'platformName': self.platform_name,
            'platformDescription': self.platform_description,
            'supportEmail': self.support_email,
            'supportPhone': self.support_phone,
            'defaultLanguage': self.default_language,
            'timezone': self.timezone,
            'maintenanceMode': self.maintenance_mode,
            'maintenanceMessage': self.maintenance_message,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
