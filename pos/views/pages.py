"""
POS page views – the HTML shell pages. Data is loaded by the page script
from /api/ using the X-CSRF-Token carried in the <meta> tag.
"""
from django.conf import settings
from django.shortcuts import render
from django.views.decorators.http import require_GET

from core.decorators import manager_required
from core.models import PaymentMethod, RosterStatus, Service, Staff
from core.services.roster_manager import RosterManager
from pos.reports import daily_report


@require_GET
def dashboard(request):
    """Today at a glance: totals, roster and the sale form."""
    return render(request, 'pos/dashboard.html', {
        'report': daily_report(),
        'roster': RosterManager().entries(),
        'services': Service.objects.filter(active=True),
        'payment_methods': PaymentMethod.objects.filter(active=True),
        'currency': settings.SHOP_CURRENCY,
    })


@require_GET
def roster(request):
    """Queue management page."""
    manager = RosterManager()
    on_roster = [e.staff_id for e in manager.entries()]
    return render(request, 'pos/roster.html', {
        'roster_date': manager.roster_date,
        'roster': manager.entries(),
        'available_staff': Staff.objects.filter(active=True).exclude(pk__in=on_roster),
        'statuses': RosterStatus.choices,
    })


@require_GET
@manager_required
def reports(request):
    """Manager report page (daily figures; weekly/monthly are fetched by the page)."""
    return render(request, 'pos/reports.html', {
        'report': daily_report(),
        'currency': settings.SHOP_CURRENCY,
    })
