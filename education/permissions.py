"""
Role and resource based access control.

Role checks go through has_permission(user, resource, action). Moderators get
their capabilities from StaffPermission rows, every other role from
ROLE_PERMISSIONS.
"""
from .models import StaffPermission


CREATE = 'CREATE'
READ = 'READ'
UPDATE = 'UPDATE'
DELETE = 'DELETE'
ALL = 'ALL'

ACTIONS = (CREATE, READ, UPDATE, DELETE)

# Each resource maps to an admin panel section
ADMIN_RESOURCES = [
    {'key': 'dashboard', 'label': 'Dashboard', 'href': '/admin'},
    {'key': 'students', 'label': 'Students', 'href': '/admin/students'},
    {'key': 'teachers', 'label': 'Teachers', 'href': '/admin/teachers'},
    {'key': 'staff', 'label': 'Staff', 'href': '/admin/staff'},
    {'key': 'parents', 'label': 'Parents', 'href': '/admin/parents'},
    {'key': 'classes', 'label': 'Classes', 'href': '/admin/classes'},
    {'key': 'groups', 'label': 'Groups', 'href': '/admin/groups'},
    {'key': 'subjects', 'label': 'Subjects', 'href': '/admin/subjects'},
    {'key': 'schedules', 'label': 'Schedules', 'href': '/admin/schedules'},
    {'key': 'attendance', 'label': 'Attendance', 'href': '/admin/attendance'},
    {'key': 'grades', 'label': 'Grades', 'href': '/admin/grades'},
    {'key': 'payments', 'label': 'Payments', 'href': '/admin/payments'},
    {'key': 'salaries', 'label': 'Salaries', 'href': '/admin/salaries'},
    {'key': 'expenses', 'label': 'Expenses', 'href': '/admin/expenses'},
    {'key': 'meals', 'label': 'Meal Menu', 'href': '/admin/meals'},
    {'key': 'kitchen', 'label': 'Kitchen Expenses', 'href': '/admin/kitchen'},
    {'key': 'dormitory', 'label': 'Dormitory', 'href': '/admin/dormitory'},
    {'key': 'contracts', 'label': 'Contracts', 'href': '/admin/contracts'},
    {'key': 'messages', 'label': 'Messages', 'href': '/admin/messages'},
    {'key': 'announcements', 'label': 'Announcements', 'href': '/admin/announcements'},
    {'key': 'reports', 'label': 'Reports', 'href': '/admin/reports'},
    {'key': 'contacts', 'label': 'Contacts', 'href': '/admin/contacts'},
    {'key': 'settings', 'label': 'Settings', 'href': '/admin/settings'},
]

TENANT_RESOURCES = frozenset(r['key'] for r in ADMIN_RESOURCES)

# Platform-wide configuration, owned by super admins
PLATFORM_SETTINGS = 'platform_settings'

RESOURCES = TENANT_RESOURCES | {PLATFORM_SETTINGS}

_READ_ONLY = (READ,)

# Fixed grants per role. ADMIN and SUPER_ADMIN are handled in has_permission,
# MODERATOR grants come from the database.
ROLE_PERMISSIONS = {
    'TEACHER': {
        'attendance': (CREATE, READ, UPDATE),
        'grades': (CREATE, READ, UPDATE),
        'schedules': _READ_ONLY,
        'classes': _READ_ONLY,
        'groups': _READ_ONLY,
        'subjects': _READ_ONLY,
        'messages': (CREATE, READ),
        'announcements': _READ_ONLY,
    },
    'PARENT': {
        'payments': _READ_ONLY,
        'grades': _READ_ONLY,
        'attendance': _READ_ONLY,
        'schedules': _READ_ONLY,
        'meals': _READ_ONLY,
        'messages': (CREATE, READ),
        'announcements': _READ_ONLY,
    },
    'STUDENT': {
        'payments': _READ_ONLY,
        'grades': _READ_ONLY,
        'attendance': _READ_ONLY,
        'schedules': _READ_ONLY,
        'meals': _READ_ONLY,
        'messages': (CREATE, READ),
        'announcements': _READ_ONLY,
    },
    'COOK': {
        'kitchen': ACTIONS,
        'meals': _READ_ONLY,
    },
}


def get_resource_from_path(path):
    """Return the resource key of the most specific admin section matching path"""
    if not path:
        return None
    path = path.rstrip('/') or '/'
    for resource in sorted(ADMIN_RESOURCES, key=lambda r: len(r['href']), reverse=True):
        href = resource['href']
        if path == href or path.startswith(href + '/'):
            return resource['key']
    return None


def get_user_permissions(user):
    """
    Load a staff user's stored grants.

    Returns:
        dict: resource -> set of actions, e.g. {'students': {'READ', 'CREATE'}}
    """
    permissions = {}
    if not user.tenant_id:
        return permissions
    rows = StaffPermission.objects.filter(user=user, tenant_id=user.tenant_id).values_list('resource', 'action')
    for resource, action in rows:
        permissions.setdefault(resource, set()).add(action)
    return permissions


def permission_granted(permissions, resource, action):
    """Check a resource -> actions mapping for an action (ALL covers every action)"""
    actions = permissions.get(resource) or ()
    return action in actions or ALL in actions


def has_permission(user, resource, action):
    """
    Decide whether user may perform action on resource.

    Args:
        user: CustomUser instance (anonymous users are always denied)
        resource: resource key from RESOURCES
        action: one of CREATE, READ, UPDATE, DELETE

    Returns:
        bool
    """
    if user is None or not user.is_authenticated or not user.is_active:
        return False
    if resource not in RESOURCES or action not in ACTIONS:
        return False

    if user.is_super_admin():
        return True

    # Everything below is tenant-scoped
    if not user.tenant_id:
        return False

    if resource == PLATFORM_SETTINGS:
        return action == READ

    if user.is_admin():
        return True

    if user.is_moderator():
        # Cached per user instance so one request hits the table once
        permissions = getattr(user, '_staff_permissions_cache', None)
        if permissions is None:
            permissions = get_user_permissions(user)
            user._staff_permissions_cache = permissions
        return permission_granted(permissions, resource, action)

    return permission_granted(ROLE_PERMISSIONS.get(user.role, {}), resource, action)


def filter_resources(user, action=READ):
    """List the admin sections user may see"""
    return [r for r in ADMIN_RESOURCES if has_permission(user, r['key'], action)]
