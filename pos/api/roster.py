"""
POS API – staff roster endpoints (/api/staff/roster...).

Mutations always act on today's roster. GET may look at another day with
?date=YYYY-MM-DD.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from core.exceptions import ValidationFailed
from core.services.roster_manager import RosterManager
from core.utils.audit import log_action
from core.utils.http import parse_date, parse_json_body, parse_int


def _serialize_entry(entry):
    return {
        'id': entry.id,
        'roster_date': entry.roster_date.isoformat(),
        'position': entry.position,
        'staff_id': entry.staff_id,
        'staff_name': entry.staff.name,
        'status': entry.status,
        'services_today': entry.services_today,
        'last_updated': entry.last_updated.isoformat() if entry.last_updated else None,
    }


def _roster_payload(manager):
    entries = manager.entries()
    return {
        'date': manager.roster_date.isoformat(),
        'count': len(entries),
        'roster': [_serialize_entry(e) for e in entries],
    }


@require_http_methods(['GET', 'POST', 'DELETE'])
def roster(request):
    """
    GET    /api/staff/roster           list (optionally ?date=)
    POST   /api/staff/roster           add {"staff_id"} or {"staff_name"}
    DELETE /api/staff/roster           clear today's roster
    """
    if request.method == 'GET':
        day = parse_date(request.GET.get('date'))
        return JsonResponse(_roster_payload(RosterManager(day)))

    manager = RosterManager()

    if request.method == 'DELETE':
        removed = manager.clear_roster()
        log_action(request, 'ROSTER', 'RosterEntry', manager.roster_date,
                   f'Cleared roster ({removed} entries)')
        return JsonResponse({'success': True, 'removed': removed})

    data = parse_json_body(request)
    if data.get('staff_id') not in (None, ''):
        staff_ref = parse_int(data['staff_id'], 'staff_id', minimum=1)
    else:
        staff_ref = data.get('staff_name')
    entry = manager.add_to_roster(staff_ref)
    log_action(request, 'ROSTER', 'RosterEntry', entry.position,
               f'Added {entry.staff.name} at position {entry.position}')
    return JsonResponse(_serialize_entry(entry), status=201)


@require_http_methods(['PUT', 'DELETE'])
def roster_position(request, position):
    """
    PUT    /api/staff/roster/<position>   {"status": "Waiting"|"Serving"|...}
    DELETE /api/staff/roster/<position>   remove; later positions shift up
    """
    manager = RosterManager()

    if request.method == 'DELETE':
        manager.remove_from_roster(position)
        log_action(request, 'ROSTER', 'RosterEntry', position, f'Removed position {position}')
        return JsonResponse(_roster_payload(manager))

    data = parse_json_body(request)
    status = data.get('status')
    if not isinstance(status, str) or not status:
        raise ValidationFailed('status is required')
    entry = manager.set_status(position, status)
    log_action(request, 'ROSTER', 'RosterEntry', position,
               f'{entry.staff.name} set to {entry.status}')
    return JsonResponse(_serialize_entry(entry))


@require_POST
def move_up(request, position):
    """POST /api/staff/roster/<position>/move-up"""
    entry = RosterManager().move_up(position)
    log_action(request, 'ROSTER', 'RosterEntry', position,
               f'Moved {entry.staff.name} up to {entry.position}')
    return JsonResponse(_roster_payload(RosterManager(entry.roster_date)))


@require_POST
def move_down(request, position):
    """POST /api/staff/roster/<position>/move-down"""
    entry = RosterManager().move_down(position)
    log_action(request, 'ROSTER', 'RosterEntry', position,
               f'Moved {entry.staff.name} down to {entry.position}')
    return JsonResponse(_roster_payload(RosterManager(entry.roster_date)))


@require_POST
def serve_next(request):
    """POST /api/staff/roster/serve-next – nobody waiting is not an error."""
    entry = RosterManager().serve_next()
    if entry is None:
        return JsonResponse({'served': None, 'message': 'No staff waiting'})
    log_action(request, 'ROSTER', 'RosterEntry', entry.position,
               f'{entry.staff.name} is now serving')
    return JsonResponse({
        'served': _serialize_entry(entry),
        'message': f'{entry.staff.name} is serving the next customer',
    })

