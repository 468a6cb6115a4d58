"""
POS API – reports & export endpoints.
"""
import re

from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from core.decorators import manager_required
from core.exceptions import ValidationFailed
from core.utils.audit import log_action
from core.utils.http import parse_date, parse_int
from pos import reports


def _safe_filename(name: str) -> str:
    """Sanitize a string for safe use in Content-Disposition headers."""
    return re.sub(r'[^\w\-.]', '_', name)


def _year_month(request):
    today = timezone.localdate()
    year = parse_int(request.GET.get('year', today.year), 'year', minimum=2000, maximum=9999)
    month = parse_int(request.GET.get('month', today.month), 'month', minimum=1)
    if month > 12:
        raise ValidationFailed('month must be between 1 and 12')
    return year, month


@require_GET
def daily(request):
    """GET /api/reports/daily?date=YYYY-MM-DD"""
    return JsonResponse(reports.daily_report(parse_date(request.GET.get('date'))))


@require_GET
def daily_pdf(request):
    """GET /api/reports/daily/pdf?date=YYYY-MM-DD"""
    report = reports.daily_report(parse_date(request.GET.get('date')))
    content = reports.daily_pdf(report, settings.SHOP_CURRENCY)

    log_action(request, 'EXPORT', 'Report', report['date'], f"Exported daily report {report['date']}")

    filename = _safe_filename(f"daily_report_{report['date']}.pdf")
    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@require_GET
@manager_required
def weekly(request):
    """GET /api/reports/weekly?date= – the Monday–Sunday week containing date."""
    return JsonResponse(reports.weekly_report(parse_date(request.GET.get('date'))))


@require_GET
@manager_required
def monthly(request):
    """GET /api/reports/monthly?year=&month="""
    year, month = _year_month(request)
    return JsonResponse(reports.monthly_report(year, month))


@require_GET
@manager_required
def monthly_xlsx(request):
    """GET /api/reports/monthly/xlsx?year=&month="""
    year, month = _year_month(request)
    report = reports.monthly_report(year, month)
    content = reports.monthly_workbook(report, settings.SHOP_CURRENCY)

    log_action(request, 'EXPORT', 'Report', report['month'], f"Exported monthly report {report['month']}")

    filename = _safe_filename(f"monthly_report_{report['month']}.xlsx")
    response = HttpResponse(
        content,
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@require_GET
def summary_today(request):
    """GET /api/reports/summary/today"""
    return JsonResponse(reports.today_summary())


@require_GET
def staff_performance_today(request):
    """GET /api/staff/performance/today"""
    return JsonResponse(reports.performance_for(), safe=False)


def _filter_param(request, name):
    value = request.GET.get(name, '').strip()
    return None if value in ('', 'all') else value


@require_GET
@manager_required
def financial(request):
    """
    GET /api/reports/financial?from_date=&to_date=&staff_name=&service_name=&location=

    The range defaults to the current month up to today. 'all' or an empty
    value leaves a filter off.
    """
    today = timezone.localdate()
    start = parse_date(request.GET.get('from_date'), 'from_date', default=today.replace(day=1))
    end = parse_date(request.GET.get('to_date'), 'to_date', default=today)
    if start > end:
        raise ValidationFailed('from_date must not be after to_date')
    return JsonResponse(reports.financial_report(
        start, end,
        staff=_filter_param(request, 'staff_name'),
        service=_filter_param(request, 'service_name'),
        location=_filter_param(request, 'location'),
    ))


@require_GET
@manager_required
def staff_filter(request):
    """GET /api/reports/staff – staff names that appear in sales."""
    return JsonResponse(reports.filter_values('staff'), safe=False)


@require_GET
@manager_required
def service_type_filter(request):
    """GET /api/reports/service-types"""
    return JsonResponse(reports.filter_values('service_types'), safe=False)


@require_GET
@manager_required
def location_filter(request):
    """GET /api/reports/locations"""
    return JsonResponse(reports.filter_values('locations'), safe=False)
