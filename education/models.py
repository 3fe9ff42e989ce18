from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.text import slugify
from django.utils import timezone
from decimal import Decimal


class Tenant(models.Model):
    """School/tenant model - every domain row is scoped by it"""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('TRIAL', 'Trial'),
        ('GRACE_PERIOD', 'Grace Period'),
        ('SUSPENDED', 'Suspended'),
        ('BLOCKED', 'Blocked'),
    ]

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='TRIAL')
    subscription_end = models.DateTimeField(null=True, blank=True, help_text="End of the paid subscription")
    trial_ends_at = models.DateTimeField(null=True, blank=True, help_text="End of the trial period")
    max_students = models.IntegerField(default=500, validators=[MinValueValidator(0)], help_text="Maximum number of students this school can register")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='tenants_status_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def can_add_student(self):
        """Check if the school is still under its student limit"""
        return self.students.count() < self.max_students


class CustomUser(AbstractUser):
    """Custom user model with tenant association and roles"""
    ROLE_CHOICES = [
        ('SUPER_ADMIN', 'Super Admin'),
        ('ADMIN', 'Admin'),
        ('MODERATOR', 'Moderator'),
        ('TEACHER', 'Teacher'),
        ('PARENT', 'Parent'),
        ('STUDENT', 'Student'),
        ('COOK', 'Cook'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='STUDENT')
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, null=True, blank=True, related_name='users')
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['username']
        indexes = [
            models.Index(fields=['tenant', 'role'], name='users_tenant_role_idx'),
            models.Index(fields=['tenant', 'username'], name='users_tenant_username_idx'),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    def is_super_admin(self):
        """Check if user is super admin - either through role or Django superuser flag"""
        return self.role == 'SUPER_ADMIN' or self.is_superuser

    def is_admin(self):
        return self.role == 'ADMIN'

    def is_moderator(self):
        return self.role == 'MODERATOR'

    def is_teacher(self):
        return self.role == 'TEACHER'

    def is_parent(self):
        return self.role == 'PARENT'

    def is_student(self):
        return self.role == 'STUDENT'

    def is_cook(self):
        return self.role == 'COOK'


class Student(models.Model):
    """Student model with the current monthly tuition rate"""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
        ('GRADUATED', 'Graduated'),
        ('EXPELLED', 'Expelled'),
    ]

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='students')
    user = models.OneToOneField(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='student_profile')
    student_code = models.CharField(max_length=50)
    full_name = models.CharField(max_length=200)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    enrollment_date = models.DateField(default=timezone.localdate)

    # Tuition. Payment rows keep their own snapshot of the fee, this is only the live rate
    monthly_tuition_fee = models.DecimalField(
        max_digits=14, decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Current monthly tuition fee, applied to billing periods generated from now on"
    )
    payment_due_day = models.PositiveSmallIntegerField(
        default=5,
        validators=[MinValueValidator(1), MaxValueValidator(28)],
        help_text="Day of month the tuition is due (1-28)"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        unique_together = ['tenant', 'student_code']
        ordering = ['student_code']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='students_tenant_status_idx'),
            models.Index(fields=['tenant', 'full_name'], name='students_tenant_name_idx'),
        ]

    def __str__(self):
        return f"{self.student_code} - {self.full_name}"

    def is_enrolled(self):
        return self.status == 'ACTIVE'

    def is_on_leave(self, month, year):
        return self.payment_leaves.filter(month=month, year=year).exists()


class StudentPaymentLeave(models.Model):
    """Month during which a student is excused from tuition"""
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='payment_leaves')
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    year = models.PositiveIntegerField()
    reason = models.CharField(max_length=255, blank=True, null=True)
    created_by = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_payment_leaves')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'student_payment_leaves'
        unique_together = ['student', 'month', 'year']
        ordering = ['year', 'month']

    def __str__(self):
        return f"{self.student.student_code} - leave {self.month:02d}/{self.year}"


class StaffPermission(models.Model):
    """Resource/action grant for a moderator (staff) account"""
    ACTION_CHOICES = [
        ('CREATE', 'Create'),
        ('READ', 'Read'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
        ('ALL', 'All'),
    ]

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='staff_permissions')
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='staff_permissions')
    resource = models.CharField(max_length=50)
    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'staff_permissions'
        unique_together = ['user', 'resource', 'action']
        indexes = [
            models.Index(fields=['tenant', 'user'], name='staff_perm_tenant_user_idx'),
        ]

    def __str__(self):
        return f"{self.user.username}: {self.resource}.{self.action}"
