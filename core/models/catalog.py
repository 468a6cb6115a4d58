"""
Service (price list) and PaymentMethod models.
"""
from django.db import models

from .mixins import ActiveFlagMixin, TimestampMixin


class Service(ActiveFlagMixin, TimestampMixin):
    """
    A priced treatment. The same name can exist for several durations and
    for in-shop vs. home service, each with its own price and masseuse fee.
    """

    LOCATION_IN_SHOP = 'In-Shop'
    LOCATION_HOME = 'Home Service'
    LOCATION_CHOICES = [
        (LOCATION_IN_SHOP, 'In-Shop'),
        (LOCATION_HOME, 'Home Service'),
    ]

    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=100)
    duration_minutes = models.PositiveIntegerField()
    location = models.CharField(max_length=30, choices=LOCATION_CHOICES, default=LOCATION_IN_SHOP)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    masseuse_fee = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'services'
        ordering = ['name', 'duration_minutes', 'location']
        constraints = [
            models.UniqueConstraint(
                fields=['name', 'duration_minutes', 'location'],
                name='unique_service_name_duration_location'
            ),
        ]

    def __str__(self):
        return f'{self.name} ({self.duration_minutes} min, {self.location})'

    @classmethod
    def lookup(cls, name, duration_minutes, location):
        """Active price row for a sale, or None."""
        return cls.objects.filter(
            name=name,
            duration_minutes=duration_minutes,
            location=location,
            active=True,
        ).first()


class PaymentMethod(ActiveFlagMixin, TimestampMixin):
    """How a customer paid (Cash, Credit Card, ...)."""

    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=200, blank=True, default='')

    class Meta:
        db_table = 'payment_methods'
        ordering = ['name']

    def __str__(self):
        return self.name
