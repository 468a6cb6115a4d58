"""
CSRF token guard (synchronizer-token pattern).

One token per session, stored on the ShopSession row. The same token is
handed out on every response for the whole life of the session and is never
re-minted per request: a page may cache it and use it for many writes.
"""
import logging

from django.db import transaction
from django.utils.crypto import constant_time_compare, get_random_string

from core.exceptions import AuthRequired, CsrfInvalid, CsrfMissing
from core.models import ShopSession

logger = logging.getLogger('shop.auth')

CSRF_TOKEN_LENGTH = 48


class CsrfGuard:
    """Issues and checks the anti-forgery token bound to a ShopSession."""

    @staticmethod
    def generate_token():
        return get_random_string(CSRF_TOKEN_LENGTH)

    def token_for(self, session):
        """Return the session's token, binding one first if it has none."""
        if session.csrf_token:
            return session.csrf_token

        with transaction.atomic():
            try:
                locked = ShopSession.objects.select_for_update().get(pk=session.pk)
            except ShopSession.DoesNotExist:
                raise AuthRequired('Session ended')
            if not locked.csrf_token:
                locked.csrf_token = self.generate_token()
                locked.save(update_fields=['csrf_token'])
                logger.info('CSRF_BOUND | user=%s | session=%s…', session.user_id, session.pk[:8])

        session.csrf_token = locked.csrf_token
        return session.csrf_token

    def validate(self, session, supplied_token):
        """True iff supplied_token equals the bound token (constant time)."""
        expected = session.csrf_token
        if not expected or not supplied_token:
            return False
        return constant_time_compare(expected, supplied_token)

    def check(self, session, supplied_token):
        """Raise CsrfMissing / CsrfInvalid instead of returning False."""
        if not supplied_token:
            raise CsrfMissing()
        if not self.validate(session, supplied_token):
            raise CsrfInvalid()
