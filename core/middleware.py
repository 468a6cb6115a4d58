"""
Request gate and security middleware for the massage shop.
"""
import logging

from django.conf import settings
from django.db import DatabaseError
from django.http import Http404

from core.error_handlers import shop_error_response
from core.exceptions import AuthRequired, ShopError, StorageError
from core.services.csrf_guard import CsrfGuard
from core.services.session_store import SessionStore
from core.utils.http import read_csrf_token, read_session_key

logger = logging.getLogger('shop.auth')


class AdminPathMiddleware:
    """
    The Django admin lives under settings.SECRET_ADMIN_URL. The default
    /admin/ path always returns 404, so automated scanners probing it get
    nothing.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith('/admin/'):
            raise Http404
        return self.get_response(request)


class ShopAuthGateMiddleware:
    """
    Authenticates every shop request against the session store and enforces
    the CSRF token on state-changing methods.

        no session, browser      -> 302 /login/?next=<path>
        no session, API client   -> 401 AUTH_REQUIRED
        write without token      -> 403 CSRF_MISSING
        write with wrong token   -> 403 CSRF_INVALID
        otherwise                -> view runs; response carries X-CSRF-Token

    Nothing is cached between requests: the session row is looked up fresh
    each time. The admin and static files are left to Django.
    """

    SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS', 'TRACE')
    PUBLIC_PATHS = ('/login/', '/api/auth/login', '/health/')

    def __init__(self, get_response):
        self.get_response = get_response

    @staticmethod
    def _bypassed(path):
        """Paths the gate never looks at."""
        static_prefix = '/' + settings.STATIC_URL.lstrip('/')
        admin_prefix = f'/{settings.SECRET_ADMIN_URL}/'
        return path.startswith(static_prefix) or path.startswith(admin_prefix)

    def _is_public(self, path):
        return path in self.PUBLIC_PATHS

    def __call__(self, request):
        if self._bypassed(request.path):
            return self.get_response(request)

        guard = CsrfGuard()
        store = SessionStore(csrf_guard=guard)
        request.csrf_guard = guard
        request.session_store = store
        request.shop_session = None

        try:
            session = store.get_session(read_session_key(request))
        except DatabaseError:
            logger.exception('SESSION_LOOKUP_FAILED | path=%s', request.path)
            return shop_error_response(request, StorageError())

        public = self._is_public(request.path)

        if session is None:
            if public:
                return self.get_response(request)
            logger.info('AUTH_REQUIRED | method=%s | path=%s', request.method, request.path)
            return shop_error_response(request, AuthRequired())

        request.shop_session = session
        request.user = session.user

        if request.method not in self.SAFE_METHODS and not public:
            try:
                guard.check(session, read_csrf_token(request))
            except ShopError as exc:
                logger.warning(
                    'CSRF_REJECTED | user=%s | method=%s | path=%s | code=%s',
                    session.user.username, request.method, request.path, exc.code,
                )
                return shop_error_response(request, exc)

        response = self.get_response(request)

        # Logout clears request.shop_session; login replaces it.
        if request.shop_session is not None:
            response[settings.SHOP_CSRF_HEADER] = guard.token_for(request.shop_session)
        return response


class ShopErrorMiddleware:
    """
    Turns ShopError raised inside a view into its JSON body / error page.
    A DatabaseError becomes StorageError (500); the traceback is logged and
    never sent to the client.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, DatabaseError):
            logger.exception('STORAGE_ERROR | method=%s | path=%s', request.method, request.path)
            return shop_error_response(request, StorageError())
        if isinstance(exception, ShopError):
            if exception.status >= 500:
                logger.error('%s | path=%s | %s', exception.code, request.path, exception.message)
            return shop_error_response(request, exception)
        return None


class ContentSecurityPolicyMiddleware:
    """
    Adds Content-Security-Policy header to all responses.
    """

    # CSP directives - adjust per deployment needs
    CSP_DIRECTIVES = {
        "default-src": "'self'",
        "script-src": "'self' 'unsafe-inline'",
        "style-src": "'self' 'unsafe-inline'",
        "img-src": "'self' data:",
        "connect-src": "'self'",
        "frame-ancestors": "'none'",
        "form-action": "'self'",
        "base-uri": "'self'",
    }

    def __init__(self, get_response):
        self.get_response = get_response
        self.csp_value = "; ".join(
            f"{key} {value}" for key, value in self.CSP_DIRECTIVES.items()
        )

    def __call__(self, request):
        response = self.get_response(request)
        response["Content-Security-Policy"] = self.csp_value
        return response


class ReferrerPolicyMiddleware:
    """Sets the Referrer-Policy header."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response["Referrer-Policy"] = "same-origin"
        return response


class PermissionsPolicyMiddleware:
    """Sets the Permissions-Policy header."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=(), payment=(), usb=()"
        )
        return response
