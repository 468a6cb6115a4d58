"""
Error rendering - JSON for API clients, redirect or error page for browsers.
Messages are sanitized: no traceback or exception text beyond ShopError.message.
"""
from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.http import JsonResponse
from django.shortcuts import render

from core.exceptions import AuthRequired, Forbidden, NotFound, ValidationFailed
from core.utils.negotiation import wants_html


def _error_page(request, status, message):
    return render(
        request,
        [f'errors/{status}.html', 'errors/error.html'],
        {'status': status, 'message': message},
        status=status,
    )


def shop_error_response(request, exc):
    """Response for a ShopError, negotiated on the Accept header."""
    if wants_html(request):
        if isinstance(exc, AuthRequired):
            return redirect_to_login(request.get_full_path(), settings.LOGIN_URL)
        return _error_page(request, exc.status, exc.message)
    return JsonResponse(exc.as_dict(), status=exc.status)


def handler404(request, exception=None):
    """Custom 404 error handler."""
    return shop_error_response(request, NotFound())


def handler500(request):
    """Custom 500 error handler - never exposes error details."""
    if wants_html(request):
        return _error_page(request, 500, 'Internal server error')
    return JsonResponse({'error': 'Internal server error', 'code': 'SERVER_ERROR'}, status=500)


def handler403(request, exception=None):
    """Custom 403 error handler."""
    return shop_error_response(request, Forbidden())


def handler400(request, exception=None):
    """Custom 400 error handler."""
    return shop_error_response(request, ValidationFailed('Bad request'))
