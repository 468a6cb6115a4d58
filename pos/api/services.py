"""
POS API – service price list.
"""
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from core.decorators import ensure_manager, manager_required
from core.exceptions import Conflict, NotFound, ValidationFailed
from core.models import Service
from core.utils.audit import log_action
from core.utils.http import parse_decimal, parse_int, parse_json_body, require_fields
from pos.reports import as_money


def _serialize_service(s):
    return {
        'id': s.id,
        'name': s.name,
        'duration_minutes': s.duration_minutes,
        'location': s.location,
        'price': as_money(s.price),
        'masseuse_fee': as_money(s.masseuse_fee),
        'active': s.active,
    }


def _clean_location(value):
    location = str(value or '').strip()
    if location not in dict(Service.LOCATION_CHOICES):
        raise ValidationFailed(
            f"location must be one of: {', '.join(dict(Service.LOCATION_CHOICES))}"
        )
    return location


def _apply_prices(service, data):
    if 'price' in data:
        service.price = parse_decimal(data['price'], 'price')
    if 'masseuse_fee' in data:
        service.masseuse_fee = parse_decimal(data['masseuse_fee'], 'masseuse_fee', allow_zero=True)
    if service.masseuse_fee > service.price:
        raise ValidationFailed('masseuse_fee cannot exceed price')


@require_http_methods(['GET', 'POST'])
def services(request):
    """
    GET  /api/services   active services (?name=, ?location= filters)
    POST /api/services   create (manager)
    """
    if request.method == 'GET':
        qs = Service.objects.filter(active=True)
        if request.GET.get('name'):
            qs = qs.filter(name=request.GET['name'])
        if request.GET.get('location'):
            qs = qs.filter(location=request.GET['location'])
        return JsonResponse([_serialize_service(s) for s in qs], safe=False)

    ensure_manager(request)
    data = parse_json_body(request)
    require_fields(data, 'name', 'duration_minutes', 'location', 'price', 'masseuse_fee')
    service = Service(
        name=str(data['name']).strip(),
        duration_minutes=parse_int(data['duration_minutes'], 'duration_minutes', minimum=1),
        location=_clean_location(data['location']),
    )
    _apply_prices(service, data)

    try:
        with transaction.atomic():
            service.save()
    except IntegrityError:
        raise Conflict('A service with that name, duration and location already exists')

    log_action(request, 'CREATE', 'Service', service.id, f'Added service {service}')
    return JsonResponse(_serialize_service(service), status=201)


@require_http_methods(['PUT', 'DELETE'])
@manager_required
def service_detail(request, service_id):
    """
    PUT    /api/services/<id>   change price / fee (and optionally reactivate)
    DELETE /api/services/<id>   deactivate
    """
    service = Service.objects.filter(pk=service_id).first()
    if service is None:
        raise NotFound('Service not found')

    if request.method == 'DELETE':
        service.deactivate()
        log_action(request, 'DELETE', 'Service', service.id, f'Deactivated service {service}')
        return JsonResponse({'success': True})

    data = parse_json_body(request)
    _apply_prices(service, data)
    if 'active' in data:
        service.active = bool(data['active'])
    service.save()
    log_action(request, 'UPDATE', 'Service', service.id,
               f'Updated {service}: price {as_money(service.price)}, fee {as_money(service.masseuse_fee)}')
    return JsonResponse(_serialize_service(service))


@require_GET
def service_price(request):
    """GET /api/services/price?name=&duration=&location= – price lookup for the sale form."""
    name = request.GET.get('name', '').strip()
    if not name:
        raise ValidationFailed('name is required')
    duration = parse_int(request.GET.get('duration'), 'duration', minimum=1)
    location = _clean_location(request.GET.get('location'))

    service = Service.lookup(name, duration, location)
    if service is None:
        raise NotFound(f'Service not found: {name} ({duration} minutes, {location})')
    return JsonResponse(_serialize_service(service))
