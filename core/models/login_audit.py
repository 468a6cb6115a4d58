"""
LoginAuditLog model – one row per login attempt, written by core.signals.
"""
from django.conf import settings
from django.db import models


class LoginAuditLog(models.Model):
    """Immutable record of an authentication attempt against the POS."""

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='login_audit_logs',
        help_text='Authenticated user (null for failed attempts)',
    )
    username_attempted = models.CharField(max_length=150)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    success = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = 'login_audit_logs'
        ordering = ['-timestamp']
        verbose_name = 'Login Audit Log'
        verbose_name_plural = 'Login Audit Logs'
        indexes = [
            models.Index(fields=['success', 'timestamp'], name='idx_login_audit_success_ts'),
        ]

    def __str__(self):
        status = 'OK' if self.success else 'FAIL'
        return f'[{status}] {self.username_attempted} from {self.ip_address} at {self.timestamp}'
