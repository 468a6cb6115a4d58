"""
Session store – issues, looks up and ends ShopSession rows.

Every write happens inside a transaction and is committed before the caller
builds its response, so a key handed to a client always exists in the store
on the very next request. Expiry is evaluated at lookup time; rows past their
expiry are simply ignored until the purge_sessions command removes them.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from core.exceptions import StorageError
from core.models import ShopSession
from core.services.csrf_guard import CsrfGuard

logger = logging.getLogger('shop.auth')

# 48 chars from [a-zA-Z0-9] ≈ 285 bits of entropy
SESSION_KEY_LENGTH = 48


def generate_session_key():
    return get_random_string(SESSION_KEY_LENGTH)


class SessionStore:
    """Database-backed session store with a fixed time-to-live."""

    def __init__(self, ttl=None, csrf_guard=None):
        self.ttl = ttl or settings.SHOP_SESSION_TTL
        self.csrf_guard = csrf_guard or CsrfGuard()

    def create_session(self, user, role=None, ip_address=None, user_agent=''):
        """Persist a new session for user and return it."""
        now = timezone.now()
        try:
            with transaction.atomic():
                session = ShopSession.objects.create(
                    key=generate_session_key(),
                    user=user,
                    role=role or user.role,
                    csrf_token=self.csrf_guard.generate_token(),
                    created_at=now,
                    expires_at=now + self.ttl,
                    ip_address=ip_address,
                    user_agent=(user_agent or '')[:500],
                )
        except DatabaseError as exc:
            logger.error('SESSION_CREATE_FAILED | user=%s | error=%s', user.username, exc)
            raise StorageError('Could not start a session') from exc

        logger.info(
            'SESSION_CREATED | user=%s | role=%s | expires=%s',
            user.username, session.role, session.expires_at.isoformat(),
        )
        return session

    def get_session(self, key):
        """Live session for key, or None if unknown, expired or the user is disabled."""
        if not key:
            return None
        session = (
            ShopSession.objects
            .select_related('user')
            .filter(key=key, expires_at__gt=timezone.now())
            .first()
        )
        if session is None or not session.user.is_active:
            return None
        return session

    def destroy_session(self, key):
        """Remove the session if present. Safe to call twice."""
        if not key:
            return
        try:
            with transaction.atomic():
                deleted, _ = ShopSession.objects.filter(key=key).delete()
        except DatabaseError as exc:
            logger.error('SESSION_DESTROY_FAILED | error=%s', exc)
            raise StorageError('Could not end the session') from exc
        if deleted:
            logger.info('SESSION_DESTROYED | session=%s…', key[:8])

    def active_sessions(self):
        return (
            ShopSession.objects
            .select_related('user')
            .filter(expires_at__gt=timezone.now())
            .order_by('-created_at')
        )

    def destroy_user_sessions(self, user):
        """Log a user out everywhere. Returns the number of sessions removed."""
        with transaction.atomic():
            deleted, _ = ShopSession.objects.filter(user=user).delete()
        logger.info('SESSIONS_DESTROYED | user=%s | count=%d', user.username, deleted)
        return deleted

    def purge_expired(self):
        """Delete expired rows. Only called from the purge_sessions command."""
        with transaction.atomic():
            deleted, _ = ShopSession.objects.filter(expires_at__lte=timezone.now()).delete()
        return deleted
