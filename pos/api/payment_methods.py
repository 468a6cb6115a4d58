"""
POS API – payment methods.
"""
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from core.decorators import ensure_manager
from core.exceptions import Conflict, NotFound, ValidationFailed
from core.models import PaymentMethod
from core.utils.audit import log_action
from core.utils.http import parse_json_body, require_fields


def _serialize_method(m):
    return {'id': m.id, 'name': m.name, 'description': m.description, 'active': m.active}


@require_http_methods(['GET', 'POST'])
def payment_methods(request):
    """
    GET  /api/payment-methods   active methods (?all=1 includes inactive)
    POST /api/payment-methods   create (manager); duplicate name -> 409
    """
    if request.method == 'GET':
        qs = PaymentMethod.objects.all()
        if request.GET.get('all') != '1':
            qs = qs.filter(active=True)
        return JsonResponse([_serialize_method(m) for m in qs], safe=False)

    ensure_manager(request)
    data = parse_json_body(request)
    require_fields(data, 'name')
    name = str(data['name']).strip()
    if PaymentMethod.objects.filter(name__iexact=name).exists():
        raise Conflict('Payment method already exists')

    try:
        with transaction.atomic():
            method = PaymentMethod.objects.create(
                name=name, description=str(data.get('description') or '').strip(),
            )
    except IntegrityError:
        raise Conflict('Payment method already exists')

    log_action(request, 'CREATE', 'PaymentMethod', method.id, f'Added payment method {method.name}')
    return JsonResponse(_serialize_method(method), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def payment_method_detail(request, method_id):
    """
    GET    /api/payment-methods/<id>
    PUT    /api/payment-methods/<id>   rename / describe / (re)activate (manager)
    DELETE /api/payment-methods/<id>   deactivate (manager)
    """
    method = PaymentMethod.objects.filter(pk=method_id).first()
    if method is None:
        raise NotFound('Payment method not found')

    if request.method == 'GET':
        return JsonResponse(_serialize_method(method))

    ensure_manager(request)

    if request.method == 'DELETE':
        method.deactivate()
        log_action(request, 'DELETE', 'PaymentMethod', method.id, f'Deactivated payment method {method.name}')
        return JsonResponse({'success': True})

    data = parse_json_body(request)
    if 'name' in data:
        name = str(data['name'] or '').strip()
        if not name:
            raise ValidationFailed('name cannot be empty')
        if PaymentMethod.objects.filter(name__iexact=name).exclude(pk=method.pk).exists():
            raise Conflict('Payment method already exists')
        method.name = name
    if 'description' in data:
        method.description = str(data['description'] or '').strip()
    if 'active' in data:
        method.active = bool(data['active'])

    try:
        with transaction.atomic():
            method.save()
    except IntegrityError:
        raise Conflict('Payment method already exists')

    log_action(request, 'UPDATE', 'PaymentMethod', method.id, f'Updated payment method {method.name}')
    return JsonResponse(_serialize_method(method))
