from django.contrib import admin
from .models import GlobalSettings
from .services import invalidate_global_settings_cache


@admin.register(GlobalSettings)
class GlobalSettingsAdmin(admin.ModelAdmin):
    list_display = ['platform_name', 'default_language', 'timezone', 'maintenance_mode', 'updated_at']
    readonly_fields = ['created_at', 'updated_at']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        invalidate_global_settings_cache()
