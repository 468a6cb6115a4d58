"""
POS API – staff master records and fee payouts.

GET /api/staff is open to every signed-in user (roster dropdown); the
/api/admin/staff... endpoints are manager only.
"""
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods

from core.decorators import manager_required
from core.exceptions import Conflict, NotFound, ValidationFailed
from core.models import Staff, Transaction
from core.utils.audit import log_action
from core.utils.http import parse_date, parse_decimal, parse_json_body, require_fields
from pos.ledger import record_payout
from pos.reports import as_money, staff_balances


def _serialize_staff(s):
    return {
        'id': s.id,
        'name': s.name,
        'hire_date': s.hire_date.isoformat() if s.hire_date else None,
        'notes': s.notes,
        'active': s.active,
        'total_fees_earned': as_money(s.total_fees_earned),
        'total_fees_paid': as_money(s.total_fees_paid),
        'outstanding_balance': as_money(s.outstanding_balance),
        'last_payment_date': s.last_payment_date.isoformat() if s.last_payment_date else None,
        'payment_status': s.payment_status(),
    }


def _get_staff(staff_id):
    staff = Staff.objects.filter(pk=staff_id).first()
    if staff is None:
        raise NotFound('Staff member not found')
    return staff


@require_GET
def staff_names(request):
    """GET /api/staff – active staff for pickers."""
    return JsonResponse([
        {'id': s.id, 'name': s.name}
        for s in Staff.objects.filter(active=True).order_by('name')
    ], safe=False)


@require_http_methods(['GET', 'POST'])
@manager_required
def staff_collection(request):
    """
    GET  /api/admin/staff   balances, payment status and a summary
    POST /api/admin/staff   {"name", "hire_date"?, "notes"?}
    """
    if request.method == 'GET':
        rows, summary = staff_balances()
        return JsonResponse({'staff': rows, 'summary': summary})

    data = parse_json_body(request)
    require_fields(data, 'name')
    name = str(data['name']).strip()
    hire_date = parse_date(data.get('hire_date'), 'hire_date')

    existing = Staff.objects.filter(name=name).first()
    if existing is not None and existing.active:
        raise Conflict('Staff member already exists')

    try:
        with transaction.atomic():
            if existing is not None:
                # Re-hiring keeps the fee history
                existing.active = True
                existing.hire_date = hire_date or existing.hire_date
                existing.notes = str(data.get('notes') or existing.notes)
                existing.save()
                staff = existing
            else:
                staff = Staff.objects.create(
                    name=name, hire_date=hire_date, notes=str(data.get('notes') or ''),
                )
    except IntegrityError:
        raise Conflict('Staff member already exists')

    log_action(request, 'CREATE', 'Staff', staff.id, f'Added staff member {staff.name}')
    return JsonResponse(_serialize_staff(staff), status=201)


@require_http_methods(['PUT', 'DELETE'])
@manager_required
def staff_detail(request, staff_id):
    """
    PUT    /api/admin/staff/<id>   update name / hire_date / notes
    DELETE /api/admin/staff/<id>   deactivate; refused while fees are owed
    """
    staff = _get_staff(staff_id)

    if request.method == 'DELETE':
        if staff.outstanding_balance > 0:
            raise Conflict(
                f'Cannot remove staff with outstanding fees: {as_money(staff.outstanding_balance)}'
            )
        if staff.roster_entries.filter(roster_date=timezone.localdate()).exists():
            raise Conflict(f'{staff.name} is on today\'s roster; remove them from the roster first')
        staff.deactivate()
        log_action(request, 'DELETE', 'Staff', staff.id, f'Deactivated staff member {staff.name}')
        return JsonResponse({'success': True, 'message': 'Staff member removed successfully'})

    data = parse_json_body(request)
    if 'name' in data:
        name = str(data['name'] or '').strip()
        if not name:
            raise ValidationFailed('name cannot be empty')
        if name != staff.name and Transaction.objects.filter(staff_name=staff.name).exists():
            raise Conflict('Cannot rename a staff member who already has transactions')
        staff.name = name
    if 'hire_date' in data:
        staff.hire_date = parse_date(data['hire_date'], 'hire_date')
    if 'notes' in data:
        staff.notes = str(data['notes'] or '')

    try:
        with transaction.atomic():
            staff.save()
    except IntegrityError:
        raise Conflict('Another staff member already has that name')

    log_action(request, 'UPDATE', 'Staff', staff.id, f'Updated staff member {staff.name}')
    return JsonResponse(_serialize_staff(staff))


@require_http_methods(['GET', 'POST'])
@manager_required
def staff_payments(request, staff_id):
    """
    GET  /api/admin/staff/<id>/payments   payout history
    POST /api/admin/staff/<id>/payments   {"amount", "payment_date"?, "period_start"?, "period_end"?, "notes"?}
    """
    staff = _get_staff(staff_id)

    if request.method == 'GET':
        return JsonResponse({
            'staff': _serialize_staff(staff),
            'payments': [
                {
                    'id': p.id,
                    'amount': as_money(p.amount),
                    'payment_date': p.payment_date.isoformat(),
                    'period_start': p.period_start.isoformat() if p.period_start else None,
                    'period_end': p.period_end.isoformat() if p.period_end else None,
                    'notes': p.notes,
                    'recorded_by': p.recorded_by.username if p.recorded_by else None,
                }
                for p in staff.payments.select_related('recorded_by')
            ],
        })

    data = parse_json_body(request)
    require_fields(data, 'amount')
    amount = parse_decimal(data['amount'], 'amount')
    payment = record_payout(
        staff,
        amount,
        payment_date=parse_date(data.get('payment_date'), 'payment_date', default=timezone.localdate()),
        period_start=parse_date(data.get('period_start'), 'period_start'),
        period_end=parse_date(data.get('period_end'), 'period_end'),
        notes=str(data.get('notes') or ''),
        user=request.user,
    )
    log_action(request, 'PAYOUT', 'Staff', staff.id,
               f'Paid {as_money(amount)} to {staff.name}',
               extra_data={'payment_id': payment.id})
    return JsonResponse({
        'message': 'Payment recorded successfully',
        'staff': _serialize_staff(staff),
        'new_outstanding': as_money(staff.outstanding_balance),
    }, status=201)
