from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Tenant, CustomUser, Student, StudentPaymentLeave, StaffPermission


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'email', 'phone', 'status', 'subscription_end', 'trial_ends_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'slug', 'email']
    readonly_fields = ['slug', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'email', 'phone', 'address')
        }),
        ('Subscription', {
            'fields': ('status', 'subscription_end', 'trial_ends_at', 'max_students')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'role', 'tenant', 'phone', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'tenant']
    search_fields = ['username', 'email', 'first_name', 'last_name']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Additional Information', {
            'fields': ('role', 'tenant', 'phone')
        }),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Additional Information', {
            'fields': ('role', 'tenant', 'phone', 'email', 'first_name', 'last_name')
        }),
    )


class StudentPaymentLeaveInline(admin.TabularInline):
    model = StudentPaymentLeave
    fk_name = 'student'
    extra = 0
    fields = ['month', 'year', 'reason', 'created_by']
    readonly_fields = ['created_by']


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['student_code', 'full_name', 'tenant', 'status', 'monthly_tuition_fee', 'payment_due_day', 'enrollment_date']
    list_filter = ['tenant', 'status']
    search_fields = ['student_code', 'full_name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [StudentPaymentLeaveInline]


@admin.register(StaffPermission)
class StaffPermissionAdmin(admin.ModelAdmin):
    list_display = ['user', 'tenant', 'resource', 'action', 'created_at']
    list_filter = ['tenant', 'resource', 'action']
    search_fields = ['user__username', 'resource']
