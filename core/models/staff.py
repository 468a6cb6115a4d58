"""
Staff (master list of masseuses) and StaffPayment models.
"""
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone

from .mixins import ActiveFlagMixin, TimestampMixin


class Staff(ActiveFlagMixin, TimestampMixin):
    """
    A masseuse who can be put on the daily roster.

    Fee totals are running sums: every recorded transaction adds its
    masseuse_fee to total_fees_earned, every payout adds to total_fees_paid.
    """

    PAYMENT_NEVER_PAID = 'Never Paid'
    PAYMENT_PAID_THIS_WEEK = 'Paid This Week'
    PAYMENT_DUE = 'Payment Due'
    PAYMENT_OVERDUE = 'Overdue'

    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=100, unique=True)
    hire_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')

    total_fees_earned = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_fees_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    last_payment_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'staff'
        ordering = ['name']
        verbose_name = 'Staff Member'
        verbose_name_plural = 'Staff'

    def __str__(self):
        return self.name

    @property
    def outstanding_balance(self):
        return self.total_fees_earned - self.total_fees_paid

    def payment_status(self, today=None):
        """Weekly payout status; weeks run Monday to Sunday."""
        if self.last_payment_date is None:
            return self.PAYMENT_NEVER_PAID
        today = today or timezone.localdate()
        week_start = today - timedelta(days=today.weekday())
        if self.last_payment_date >= week_start:
            return self.PAYMENT_PAID_THIS_WEEK
        if self.last_payment_date >= week_start - timedelta(days=7):
            return self.PAYMENT_DUE
        return self.PAYMENT_OVERDUE

    @classmethod
    def adjust_earnings(cls, name, amount):
        """Atomically add (or, with a negative amount, reverse) earned fees."""
        return cls.objects.filter(name=name).update(
            total_fees_earned=F('total_fees_earned') + amount,
        )


class StaffPayment(TimestampMixin):
    """A fee payout handed to a staff member."""

    id = models.BigAutoField(primary_key=True)
    staff = models.ForeignKey(
        'core.Staff', on_delete=models.CASCADE, related_name='payments'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_date = models.DateField()
    period_start = models.DateField(null=True, blank=True)
    period_end = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='recorded_payments'
    )

    class Meta:
        db_table = 'staff_payments'
        ordering = ['-payment_date', '-id']

    def __str__(self):
        return f'{self.staff_id}: {self.amount} on {self.payment_date}'
