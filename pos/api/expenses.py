"""
POS API – expenses.
"""
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods

from core.exceptions import NotFound
from core.models import Expense
from core.utils.audit import log_action
from core.utils.http import parse_date, parse_decimal, parse_json_body, require_fields
from pos.reports import as_money


def _serialize_expense(e):
    return {
        'id': e.id,
        'date': e.date.isoformat(),
        'description': e.description,
        'amount': as_money(e.amount),
        'recorded_by': e.recorded_by.username if e.recorded_by else None,
    }


@require_http_methods(['GET', 'POST'])
def expenses(request):
    """
    GET  /api/expenses?date=YYYY-MM-DD   (default today)
    POST /api/expenses   {"description", "amount", "date"?}
    """
    if request.method == 'GET':
        day = parse_date(request.GET.get('date'), default=timezone.localdate())
        rows = Expense.objects.filter(date=day).select_related('recorded_by')
        return JsonResponse([_serialize_expense(e) for e in rows], safe=False)

    data = parse_json_body(request)
    require_fields(data, 'description', 'amount')
    expense = Expense.objects.create(
        date=parse_date(data.get('date'), default=timezone.localdate()),
        description=str(data['description']).strip()[:200],
        amount=parse_decimal(data['amount'], 'amount'),
        recorded_by=request.user,
    )
    log_action(request, 'CREATE', 'Expense', expense.id,
               f'{expense.description}: {as_money(expense.amount)}')
    return JsonResponse(_serialize_expense(expense), status=201)


@require_http_methods(['DELETE'])
def expense_detail(request, expense_id):
    """DELETE /api/expenses/<id>"""
    expense = Expense.objects.filter(pk=expense_id).first()
    if expense is None:
        raise NotFound('Expense not found')
    description = f'{expense.date} {expense.description}: {as_money(expense.amount)}'
    expense.delete()
    log_action(request, 'DELETE', 'Expense', expense_id, f'Deleted expense {description}')
    return JsonResponse({'success': True, 'message': 'Expense deleted successfully'})


@require_GET
def summary_today(request):
    """GET /api/expenses/summary/today"""
    day = timezone.localdate()
    rows = list(Expense.objects.filter(date=day).values_list('amount', flat=True))
    return JsonResponse({
        'date': day.isoformat(),
        'expense_count': len(rows),
        'total_expenses': as_money(sum(rows, 0)),
    })
