import logging

from django.http import JsonResponse, HttpResponseForbidden

from .tenancy import check_tenant_access

logger = logging.getLogger(__name__)


class TenantAccessMiddleware:
    """Middleware to attach the user's tenant to the request and gate blocked tenants"""

    # Paths never gated by the tenant subscription state
    EXEMPT_PATHS = ['/django-admin/', '/static/']

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.tenant = None
        request.tenant_access = None

        if any(request.path.startswith(p) for p in self.EXEMPT_PATHS):
            return self.get_response(request)

        user = request.user
        # Super admins are platform-level and never gated by a tenant
        if user.is_authenticated and not user.is_super_admin() and user.tenant_id:
            request.tenant = user.tenant
            access = check_tenant_access(request.tenant)
            request.tenant_access = access

            if not access.can_access:
                logger.warning(
                    f"Refused {request.method} {request.path} for user {user.username}: tenant {user.tenant_id} is {access.status}"
                )
                if request.path.startswith('/api/'):
                    return JsonResponse({'error': access.message, 'tenantStatus': access.status}, status=403)
                return HttpResponseForbidden(access.message)

        return self.get_response(request)
