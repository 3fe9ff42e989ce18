"""
Super Admin API URL Configuration
"""
from django.urls import path
from . import api_views

urlpatterns = [
    path('settings/', api_views.api_global_settings, name='api_global_settings'),
]
