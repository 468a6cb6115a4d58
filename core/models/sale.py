"""
Transaction (sale) and Expense models.
"""
from django.conf import settings
from django.db import models
from django.utils.crypto import get_random_string

from .mixins import TimestampMixin


class Transaction(TimestampMixin):
    """
    One massage sold.

    Price and masseuse fee are copied from the Service at the time of sale so
    later price changes never rewrite history. A correction is a new ACTIVE row
    pointing at the row it replaces (corrected_from); the replaced row becomes
    EDITED and drops out of every total.
    """

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_EDITED = 'EDITED'
    STATUS_VOID = 'VOID'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_EDITED, 'Edited'),
        (STATUS_VOID, 'Void'),
    ]

    id = models.BigAutoField(primary_key=True)
    transaction_id = models.CharField(max_length=32, unique=True)
    timestamp = models.DateTimeField(db_index=True)
    date = models.DateField(db_index=True)

    staff_name = models.CharField(max_length=100, db_index=True)
    service_name = models.CharField(max_length=100)
    location = models.CharField(max_length=30)
    duration_minutes = models.PositiveIntegerField()

    payment_amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=50)
    masseuse_fee = models.DecimalField(max_digits=10, decimal_places=2)

    start_time = models.TimeField()
    end_time = models.TimeField()
    customer_contact = models.CharField(max_length=100, blank=True, default='')

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    corrected_from = models.CharField(max_length=32, blank=True, default='')
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='transactions'
    )

    class Meta:
        db_table = 'transactions'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['date', 'status'], name='idx_tx_date_status'),
            models.Index(fields=['staff_name', 'date'], name='idx_tx_staff_date'),
        ]

    def __str__(self):
        return f'{self.transaction_id} {self.staff_name} {self.service_name} [{self.status}]'

    @staticmethod
    def make_transaction_id(timestamp):
        """Sortable id: yyyymmddHHMMSS + milliseconds + short random suffix."""
        return f"{timestamp.strftime('%Y%m%d%H%M%S%f')[:17]}-{get_random_string(4, '0123456789ABCDEF')}"


class Expense(TimestampMixin):
    """Money that left the till (supplies, laundry, ...)."""

    id = models.BigAutoField(primary_key=True)
    date = models.DateField(db_index=True)
    description = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='expenses'
    )

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.date} {self.description}: {self.amount}'
