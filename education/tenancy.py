"""
Tenant subscription state checks
"""
import logging
from collections import namedtuple

from django.utils import timezone
from django.utils.translation import gettext as _

logger = logging.getLogger(__name__)


TenantAccess = namedtuple('TenantAccess', ['can_access', 'status', 'message'])


def check_tenant_access(tenant, now=None):
    """
    Decide whether a tenant may use the system.

    An ACTIVE tenant past its subscription end, or a TRIAL tenant past its
    trial end, is moved to GRACE_PERIOD and keeps access. SUSPENDED and
    BLOCKED tenants are refused.

    Args:
        tenant: Tenant instance or None
        now: aware datetime to evaluate against (defaults to timezone.now())

    Returns:
        TenantAccess(can_access, status, message)
    """
    if tenant is None:
        return TenantAccess(False, 'BLOCKED', _('School not found'))

    if now is None:
        now = timezone.now()

    if tenant.status == 'ACTIVE':
        if tenant.subscription_end and tenant.subscription_end < now:
            _move_to_grace_period(tenant)
            return TenantAccess(True, 'GRACE_PERIOD', _('Subscription has expired. Please pay within 7 days.'))
        return TenantAccess(True, 'ACTIVE', None)

    if tenant.status == 'TRIAL':
        if tenant.trial_ends_at and tenant.trial_ends_at < now:
            _move_to_grace_period(tenant)
            return TenantAccess(True, 'GRACE_PERIOD', _('Trial period has ended. Please pay.'))
        message = None
        if tenant.trial_ends_at:
            days_left = (tenant.trial_ends_at - now).days + 1
            message = _('Trial period: %(days)d days left') % {'days': days_left}
        return TenantAccess(True, 'TRIAL', message)

    if tenant.status == 'GRACE_PERIOD':
        return TenantAccess(True, 'GRACE_PERIOD', _('Please pay, otherwise your account will be blocked.'))

    if tenant.status == 'SUSPENDED':
        return TenantAccess(False, 'SUSPENDED', _('Your account is suspended. Please pay.'))

    if tenant.status == 'BLOCKED':
        return TenantAccess(False, 'BLOCKED', _('Your account is blocked. Contact the administrator.'))

    return TenantAccess(False, 'BLOCKED', _('Unknown status'))


def _move_to_grace_period(tenant):
    previous = tenant.status
    tenant.status = 'GRACE_PERIOD'
    tenant.save(update_fields=['status', 'updated_at'])
    logger.info(f"Tenant {tenant.pk} moved from {previous} to GRACE_PERIOD")
