"""
View decorators for shop roles.
"""
from functools import wraps

from core.exceptions import AuthRequired, Forbidden


def ensure_manager(request):
    """
    Raise unless the session was opened with the manager role (or by a
    superuser). Reception users get 403 FORBIDDEN.
    """
    session = getattr(request, 'shop_session', None)
    if session is None:
        raise AuthRequired()
    if not (session.user.is_superuser or session.role == session.user.ROLE_MANAGER):
        raise Forbidden('Manager access required')


def manager_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        ensure_manager(request)
        return view_func(request, *args, **kwargs)
    return _wrapped
