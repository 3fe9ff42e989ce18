"""
Request helpers shared by the JSON API views: body parsing and error mapping
"""
import json
import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import IntegrityError, DatabaseError
from django.http import JsonResponse
from django.utils.translation import gettext as _

from .exceptions import PaymentError

logger = logging.getLogger(__name__)


def parse_json_body(request):
    """
    Decode a JSON object request body.

    Raises:
        PaymentError: body is not valid JSON or not an object
    """
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise PaymentError(_('Invalid JSON'))
    if not isinstance(data, dict):
        raise PaymentError(_('Request body must be a JSON object'))
    return data


def handle_api_error(exc, request=None, action=None):
    """
    Turn an exception raised inside an API view into a JSON error response.

    Known errors map to their status with a safe message. Anything else is
    logged with its traceback and answered with a generic 500; the exception
    text is only exposed when DEBUG is on.
    """
    context = {
        'action': action,
        'path': getattr(request, 'path', None),
        'method': getattr(request, 'method', None),
    }
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        context['user_id'] = user.pk
        context['tenant_id'] = user.tenant_id

    if isinstance(exc, PaymentError):
        logger.info(f"API error ({exc.status_code}) {exc.message} {context}")
        body = {'error': exc.message}
        if exc.errors:
            body['errors'] = exc.errors
        return JsonResponse(body, status=exc.status_code)

    if isinstance(exc, ValidationError):
        logger.info(f"API validation error {exc.messages} {context}")
        return JsonResponse({'error': _('Data is not in the correct format'), 'errors': exc.messages}, status=400)

    if isinstance(exc, ObjectDoesNotExist):
        logger.info(f"API not found {context}")
        return JsonResponse({'error': _('Not found')}, status=404)

    if isinstance(exc, IntegrityError):
        logger.warning(f"API integrity error {exc} {context}")
        return JsonResponse({'error': _('This record already exists')}, status=409)

    if isinstance(exc, DatabaseError):
        logger.exception(f"API database error {context}")
        return JsonResponse({'error': _('Database error')}, status=500)

    logger.exception(f"API error {context}")
    if settings.DEBUG:
        return JsonResponse({'error': str(exc), 'name': type(exc).__name__}, status=500)
    return JsonResponse({'error': _('A server error occurred. Please try again later.')}, status=500)
