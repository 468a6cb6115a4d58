"""
AuditLog model – who changed what in the shop, and when.
"""
from django.conf import settings
from django.db import models
from .mixins import TimestampMixin


class AuditLog(models.Model):
    """Append-only trail of logins and every mutating API call."""

    ACTION_CHOICES = [
        ('CREATE', 'Create'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
        ('LOGIN', 'Login'),
        ('LOGOUT', 'Logout'),
        ('ROSTER', 'Roster Change'),
        ('SALE', 'Sale'),
        ('CORRECT', 'Sale Correction'),
        ('VOID', 'Void'),
        ('PAYOUT', 'Staff Payout'),
        ('EXPORT', 'Export'),
    ]

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='audit_logs'
    )
    username = models.CharField(max_length=80, blank=True, default='')

    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    resource_type = models.CharField(max_length=50)  # e.g. 'RosterEntry', 'Transaction'
    resource_id = models.CharField(max_length=64, blank=True, default='')

    description = models.TextField(blank=True, default='')
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    extra_data = models.JSONField(null=True, blank=True)

    timestamp = models.IntegerField(db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['user', 'action'], name='idx_audit_user_action'),
            models.Index(fields=['resource_type', 'resource_id'], name='idx_audit_resource'),
        ]

    def __str__(self):
        return f'[{self.action}] {self.username} on {self.resource_type} {self.resource_id}'

    def save(self, *args, **kwargs):
        if not self.timestamp:
            self.timestamp = TimestampMixin.utc_timestamp()
        super().save(*args, **kwargs)
