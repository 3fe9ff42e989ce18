"""
Super Admin API Views
Platform settings endpoint
"""
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from django.utils.translation import gettext as _

from accounts.utils import handle_api_error, parse_json_body
from education.decorators import api_login_required
from .services import get_global_settings, update_global_settings


@csrf_exempt
@require_http_methods(["GET", "PUT"])
@api_login_required
def api_global_settings(request):
    """GET: platform settings for any signed-in user. PUT: super admin only."""
    if request.method == 'GET':
        return JsonResponse({'success': True, 'settings': get_global_settings()})

    if not request.user.is_super_admin():
        return JsonResponse({'error': _('Super admin access required')}, status=403)

    try:
        data = parse_json_body(request)
        return JsonResponse({
            'success': True,
            'message': _('Settings saved'),
            'settings': update_global_settings(data),
        })
    except Exception as e:
        return handle_api_error(e, request, action='update_global_settings')
