"""
Audit logging utility for recording user actions.
"""
import logging

from core.models.audit import AuditLog
from core.models.mixins import TimestampMixin
from core.utils.http import get_client_ip

audit_logger = logging.getLogger('shop.audit')


def log_action(request, action, resource_type, resource_id='', description='', extra_data=None):
    """
    Create an audit log entry and mirror it to the shop.audit logger.

    Args:
        request: Django HttpRequest (can be None for management commands)
        action: One of AuditLog.ACTION_CHOICES (CREATE, ROSTER, SALE, ...)
        resource_type: Model name or resource category
        resource_id: Primary key / position / transaction id of the resource
        description: Human-readable description
        extra_data: Optional dict with extra context
    """
    user = None
    username = 'system'
    ip_address = None

    if request is not None:
        request_user = getattr(request, 'user', None)
        if request_user is not None and request_user.is_authenticated:
            user = request_user
            username = user.username
        ip_address = get_client_ip(request)

    AuditLog.objects.create(
        user=user,
        username=username,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id),
        description=description,
        ip_address=ip_address,
        extra_data=extra_data,
        timestamp=TimestampMixin.utc_timestamp(),
    )
    audit_logger.info(
        '%s | user=%s | %s=%s | %s',
        action, username, resource_type, resource_id, description,
    )
