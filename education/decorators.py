"""
Decorators for enforcing tenant-level data isolation and permissions on API views
"""
from functools import wraps
from django.http import JsonResponse
from django.utils.translation import gettext as _

from .permissions import has_permission


def api_login_required(view_func):
    """Decorator returning a 401 JSON body instead of a login redirect"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': _('Authentication required')}, status=401)
        return view_func(request, *args, **kwargs)
    return wrapper


def api_permission_required(resource, action, tenant_required=True):
    """
    Decorator to ensure the user may perform action on resource.

    The user's tenant is stored on request.tenant for the view to filter by.
    With tenant_required, users without a tenant (super admins) are refused,
    since tenant data is only reachable through a tenant membership.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return JsonResponse({'error': _('Authentication required')}, status=401)

            if not has_permission(request.user, resource, action):
                return JsonResponse({'error': _('You do not have permission to perform this action')}, status=403)

            request.tenant = request.user.tenant
            if tenant_required and request.tenant is None:
                return JsonResponse({'error': _('You must be associated with a school to access this resource')}, status=403)

            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator

