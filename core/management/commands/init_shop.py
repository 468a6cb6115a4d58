"""
Management command: init_shop

Populates the Service and PaymentMethod tables from
settings.SHOP_DEFAULT_SERVICES and settings.SHOP_DEFAULT_PAYMENT_METHODS.
"""
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from core.models import PaymentMethod, Service


class Command(BaseCommand):
    help = 'Seed the default services and payment methods'

    def handle(self, *args, **options):
        created = 0
        for data in settings.SHOP_DEFAULT_SERVICES:
            obj, was_created = Service.objects.get_or_create(
                name=data['name'],
                duration_minutes=data['duration_minutes'],
                location=data['location'],
                defaults={
                    'price': Decimal(str(data['price'])),
                    'masseuse_fee': Decimal(str(data['masseuse_fee'])),
                },
            )
            if was_created:
                created += 1
                self.stdout.write(f'  Created service: {obj}')
            else:
                self.stdout.write(f'  Already exists: {obj}')

        methods = 0
        for name in settings.SHOP_DEFAULT_PAYMENT_METHODS:
            _, was_created = PaymentMethod.objects.get_or_create(name=name)
            if was_created:
                methods += 1
                self.stdout.write(f'  Created payment method: {name}')

        self.stdout.write(self.style.SUCCESS(
            f'Done. {created} new service(s), {methods} new payment method(s).'
        ))
