"""
Custom template tags and filters for the massage shop.
"""
from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings

register = template.Library()


@register.filter(name='money')
def money_filter(value, currency=None):
    """
    Format an amount with two decimals and the shop currency.

    Usage: {{ summary.total_revenue|money }}  ->  "1,250.00 THB"
    """
    if value is None or value == '':
        return ''
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return str(value)
    return f'{amount:,.2f} {currency or settings.SHOP_CURRENCY}'
