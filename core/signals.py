"""
Login audit signal handlers.

Listens to Django's user_logged_in, user_login_failed and user_logged_out
signals to create immutable LoginAuditLog records for every authentication
attempt. The shop login views send user_logged_in / user_logged_out
themselves, since they issue ShopSessions instead of calling
django.contrib.auth.login().

Also ends every shop session of a user who is deactivated.
"""
import logging

from django.conf import settings
from django.contrib.auth.signals import user_logged_in, user_login_failed, user_logged_out
from django.db.models.signals import post_save
from django.dispatch import receiver

from core.models.login_audit import LoginAuditLog
from core.models.shop_session import ShopSession
from core.utils.http import get_client_ip

logger = logging.getLogger('shop.audit')
auth_logger = logging.getLogger('shop.auth')


@receiver(user_logged_in)
def log_successful_login(sender, request, user, **kwargs):
    """Record a successful login attempt."""
    ip = get_client_ip(request)
    user_agent = request.META.get('HTTP_USER_AGENT', '') if request else ''

    LoginAuditLog.objects.create(
        user=user,
        username_attempted=getattr(user, 'username', str(user)),
        ip_address=ip,
        user_agent=user_agent,
        success=True,
    )

    logger.info(
        'LOGIN_SUCCESS | user=%s | ip=%s | ua=%s',
        getattr(user, 'username', str(user)),
        ip,
        user_agent[:120],
    )


@receiver(user_login_failed)
def log_failed_login(sender, credentials, request=None, **kwargs):
    """Record a failed login attempt."""
    ip = get_client_ip(request)
    user_agent = request.META.get('HTTP_USER_AGENT', '') if request else ''
    username = credentials.get('username', '<unknown>')

    LoginAuditLog.objects.create(
        user=None,
        username_attempted=username,
        ip_address=ip,
        user_agent=user_agent,
        success=False,
    )

    logger.warning(
        'LOGIN_FAILED | username=%s | ip=%s | ua=%s',
        username,
        ip,
        user_agent[:120],
    )


@receiver(user_logged_out)
def log_logout(sender, request, user, **kwargs):
    if user is None:
        return
    logger.info(
        'LOGOUT | user=%s | ip=%s',
        getattr(user, 'username', str(user)),
        get_client_ip(request),
    )


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def end_sessions_of_deactivated_user(sender, instance, created, **kwargs):
    """A disabled account keeps no live sessions."""
    if created or instance.is_active:
        return
    deleted, _ = ShopSession.objects.filter(user=instance).delete()
    if deleted:
        auth_logger.info(
            'SESSIONS_ENDED_ON_DEACTIVATE | user=%s | count=%d',
            instance.username, deleted,
        )
