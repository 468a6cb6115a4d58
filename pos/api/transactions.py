"""
POS API – sales (transactions).
"""
import math

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.exceptions import ValidationFailed
from core.models import Transaction
from core.utils.audit import log_action
from core.utils.http import parse_date, parse_int, parse_json_body
from pos import ledger
from pos.reports import as_money, today_summary


def serialize_transaction(t):
    return {
        'transaction_id': t.transaction_id,
        'timestamp': t.timestamp.isoformat(),
        'date': t.date.isoformat(),
        'staff_name': t.staff_name,
        'service_name': t.service_name,
        'location': t.location,
        'duration_minutes': t.duration_minutes,
        'payment_amount': as_money(t.payment_amount),
        'payment_method': t.payment_method,
        'masseuse_fee': as_money(t.masseuse_fee),
        'start_time': t.start_time.strftime('%H:%M'),
        'end_time': t.end_time.strftime('%H:%M'),
        'customer_contact': t.customer_contact,
        'status': t.status,
        'corrected_from': t.corrected_from or None,
    }


@require_http_methods(['GET', 'POST'])
def transactions(request):
    """
    GET  /api/transactions   ?page=&limit=&date=&status= (status=all for every row)
    POST /api/transactions   record a sale; original_transaction_id makes it a correction
    """
    if request.method == 'POST':
        data = parse_json_body(request)
        sale = ledger.record_transaction(data, user=request.user)
        if sale.corrected_from:
            log_action(request, 'CORRECT', 'Transaction', sale.transaction_id,
                       f'Corrected {sale.corrected_from}: {sale.staff_name} {sale.service_name}',
                       extra_data={'corrected_from': sale.corrected_from})
        else:
            log_action(request, 'SALE', 'Transaction', sale.transaction_id,
                       f'{sale.staff_name} {sale.service_name} {as_money(sale.payment_amount)} ({sale.payment_method})')
        return JsonResponse(serialize_transaction(sale), status=201)

    page = parse_int(request.GET.get('page', 1), 'page', minimum=1)
    limit = parse_int(request.GET.get('limit', settings.SHOP_TRANSACTIONS_PAGE_SIZE), 'limit', minimum=1)
    limit = min(limit, 500)

    qs = Transaction.objects.all().order_by('-timestamp')
    status = request.GET.get('status', '').strip()
    if status and status.lower() != 'all':
        if status.upper() not in dict(Transaction.STATUS_CHOICES):
            raise ValidationFailed(f'Unknown status: {status}')
        qs = qs.filter(status=status.upper())
    day = parse_date(request.GET.get('date'))
    if day is not None:
        qs = qs.filter(date=day)

    total = qs.count()
    offset = (page - 1) * limit
    rows = qs[offset:offset + limit]
    return JsonResponse({
        'transactions': [serialize_transaction(t) for t in rows],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'pages': math.ceil(total / limit),
        },
    })


@require_GET
def recent_transactions(request):
    """GET /api/transactions/recent?limit=5 – dashboard feed of ACTIVE sales."""
    limit = min(parse_int(request.GET.get('limit', 5), 'limit', minimum=1), 50)
    rows = Transaction.objects.filter(status=Transaction.STATUS_ACTIVE).order_by('-timestamp')[:limit]
    return JsonResponse([serialize_transaction(t) for t in rows], safe=False)


@require_GET
def latest_for_correction(request):
    """GET /api/transactions/latest-for-correction"""
    return JsonResponse(serialize_transaction(ledger.latest_for_correction()))


@require_POST
def void_transaction(request, transaction_id):
    """POST /api/transactions/<transaction_id>/void"""
    sale = ledger.void_transaction(transaction_id)
    log_action(request, 'VOID', 'Transaction', sale.transaction_id,
               f'Voided {sale.staff_name} {sale.service_name} {as_money(sale.payment_amount)}')
    return JsonResponse(serialize_transaction(sale))


@require_GET
def summary_today(request):
    """GET /api/transactions/summary/today"""
    return JsonResponse(today_summary())
