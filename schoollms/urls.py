"""
URL configuration for schoollms project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin interface - MUST come first to avoid conflicts
    path('django-admin/', admin.site.urls),

    # Super Admin API endpoints (platform settings)
    path('api/superadmin/', include('superadmin.api_urls')),

    # Payments and tuition API endpoints (tenant taken from the logged-in user)
    path('api/', include('accounts.api_urls')),
]
