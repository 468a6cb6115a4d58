"""
Core views – login/logout for the browser and the JSON auth API.

Sessions are ShopSessions issued by request.session_store (set up by
ShopAuthGateMiddleware); Django's own session framework is only used by the
admin and the messages framework.
"""
import logging

from axes.decorators import axes_dispatch
from django.conf import settings
from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.decorators import manager_required
from core.exceptions import NotFound
from core.utils.audit import log_action
from core.utils.http import (
    clear_session_cookie,
    get_client_ip,
    parse_json_body,
    require_fields,
    set_session_cookie,
)

logger = logging.getLogger('shop.auth')


def _user_payload(user):
    return {
        'id': user.id,
        'username': user.username,
        'display_name': user.name,
        'role': user.role,
        'is_manager': user.is_manager,
    }


def _start_session(request, user):
    """Issue a ShopSession for user and make it current for this request."""
    session = request.session_store.create_session(
        user,
        ip_address=get_client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', ''),
    )
    request.shop_session = session
    request.user = user
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    log_action(request, 'LOGIN', 'User', user.id,
               f'{user.name} logged in (role: {session.role})')
    return session


def _end_session(request):
    session = request.shop_session
    user = session.user
    log_action(request, 'LOGOUT', 'User', user.id, f'{user.name} logged out')
    request.session_store.destroy_session(session.key)
    user_logged_out.send(sender=user.__class__, request=request, user=user)
    request.shop_session = None


def _safe_next(request, candidate):
    if candidate and url_has_allowed_host_and_scheme(
        candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return candidate
    return settings.LOGIN_REDIRECT_URL


@axes_dispatch
@never_cache
def login_view(request):
    """Browser login form; on success sets the session cookie and opens the POS."""
    next_url = request.POST.get('next') or request.GET.get('next', '')

    if request.shop_session is not None and request.method == 'GET':
        return redirect(_safe_next(request, next_url))

    if request.method == 'POST':
        username = request.POST.get('username', '').strip()
        password = request.POST.get('password', '')

        if not username or not password:
            messages.error(request, 'Please provide both username and password.')
            return render(request, 'login.html', {'next': next_url})

        user = authenticate(request, username=username, password=password)
        if user is not None:
            session = _start_session(request, user)
            response = redirect(_safe_next(request, next_url))
            return set_session_cookie(response, session)

        messages.error(request, 'Invalid username or password. (Username is case-sensitive)')

    return render(request, 'login.html', {'next': next_url})


@require_POST
def logout_view(request):
    """Browser logout – ends the session, expires the cookie, back to /login/."""
    _end_session(request)
    messages.info(request, 'You have been logged out.')
    return clear_session_cookie(redirect(settings.LOGIN_URL))


# ── JSON auth API ─────────────────────────────────────────────────────

@axes_dispatch
@never_cache
@require_POST
def api_login(request):
    """
    POST /api/auth/login  {"username": ..., "password": ...}

    Returns the session key (usable as a Bearer token), its CSRF token and
    the user; also sets the shop_session cookie for browser clients.
    """
    data = parse_json_body(request)
    require_fields(data, 'username', 'password')

    user = authenticate(
        request,
        username=str(data['username']).strip(),
        password=str(data['password']),
    )
    if user is None:
        return JsonResponse(
            {'error': 'Invalid username or password', 'code': 'INVALID_CREDENTIALS'},
            status=401,
        )

    session = _start_session(request, user)
    response = JsonResponse({
        'success': True,
        'session_id': session.key,
        'csrf_token': request.csrf_guard.token_for(session),
        'expires_at': session.expires_at.isoformat(),
        'user': _user_payload(user),
    })
    return set_session_cookie(response, session)


@require_POST
def api_logout(request):
    """POST /api/auth/logout – destroys the session and expires the cookie."""
    _end_session(request)
    return clear_session_cookie(JsonResponse({'success': True}))


@never_cache
@require_GET
def api_session(request):
    """GET /api/auth/session – who am I, and until when."""
    session = request.shop_session
    return JsonResponse({
        'user': _user_payload(session.user),
        'role': session.role,
        'created_at': session.created_at.isoformat(),
        'expires_at': session.expires_at.isoformat(),
        'expires_in': session.max_age_seconds,
        'csrf_token': request.csrf_guard.token_for(session),
    })


@never_cache
@require_GET
@manager_required
def api_active_sessions(request):
    """GET /api/auth/sessions – every live session (manager only)."""
    current_key = request.shop_session.key
    sessions = [
        {
            'session': s.key[:8],
            'user': s.user.username,
            'display_name': s.user.name,
            'role': s.role,
            'ip_address': s.ip_address,
            'user_agent': s.user_agent[:120],
            'created_at': s.created_at.isoformat(),
            'expires_at': s.expires_at.isoformat(),
            'current': s.key == current_key,
        }
        for s in request.session_store.active_sessions()
    ]
    return JsonResponse({'sessions': sessions, 'count': len(sessions)})


@require_http_methods(['DELETE'])
@manager_required
def api_end_user_sessions(request, user_id):
    """DELETE /api/auth/sessions/user/<id> – log a user out everywhere."""
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound('User not found')

    own = user.pk == request.shop_session.user_id
    count = request.session_store.destroy_user_sessions(user)
    log_action(request, 'LOGOUT', 'User', user.id,
               f'Ended {count} session(s) of {user.name}')

    response = JsonResponse({'success': True, 'ended': count})
    if own:
        request.shop_session = None
        clear_session_cookie(response)
    return response


@require_GET
def health(request):
    """GET /health/ – process is up and the database answers."""
    try:
        connection.ensure_connection()
    except DatabaseError:
        logger.error('HEALTH_DB_UNAVAILABLE')
        return JsonResponse({'status': 'error', 'database': 'unavailable'}, status=503)
    return JsonResponse({'status': 'ok', 'database': 'ok'})
