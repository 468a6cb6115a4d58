"""
ShopSession model – server-side record behind the `shop_session` cookie
(or `Authorization: Bearer` header).

Owned by core.services.session_store.SessionStore; nothing else writes it.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone


class ShopSession(models.Model):
    """
    One authenticated login.

    The key is the opaque bearer value handed to the client. The CSRF token
    lives on the same row, so it dies with the session and there is never more
    than one live token per session.
    """
    key = models.CharField(max_length=64, primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='shop_sessions',
    )
    role = models.CharField(max_length=20)
    csrf_token = models.CharField(max_length=64, blank=True, default='')

    created_at = models.DateTimeField()
    expires_at = models.DateTimeField(db_index=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'shop_sessions'
        ordering = ['-created_at']
        verbose_name = 'Shop Session'
        verbose_name_plural = 'Shop Sessions'

    def __str__(self):
        return f'{self.user} - {self.key[:8]}…'

    def is_expired(self, now=None):
        return self.expires_at <= (now or timezone.now())

    @property
    def max_age_seconds(self):
        """Remaining lifetime, used for the cookie Max-Age."""
        remaining = self.expires_at - timezone.now()
        return max(int(remaining.total_seconds()), 0)
