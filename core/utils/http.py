"""
Request helpers shared by the auth views and the POS API.
"""
import json
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation

from django.conf import settings

from core.exceptions import ValidationFailed


def get_client_ip(request):
    """
    Extract the real client IP, honouring X-Forwarded-For only when the
    request came through one of settings.TRUSTED_PROXIES (or none are set).
    """
    if request is None:
        return None
    trusted = getattr(settings, 'TRUSTED_PROXIES', [])
    remote = request.META.get('REMOTE_ADDR', '')
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded and (not trusted or remote in trusted):
        return forwarded.split(',')[0].strip()
    return remote or None


def read_session_key(request):
    """Session key from `Authorization: Bearer <key>`, else from the cookie."""
    auth = request.META.get('HTTP_AUTHORIZATION', '')
    scheme, _, credentials = auth.partition(' ')
    if scheme.lower() == 'bearer' and credentials.strip():
        return credentials.strip()
    return request.COOKIES.get(settings.SHOP_SESSION_COOKIE_NAME) or None


def read_csrf_token(request):
    """CSRF token from the X-CSRF-Token header, else from a form field."""
    token = request.headers.get(settings.SHOP_CSRF_HEADER)
    if token:
        return token.strip()
    if request.content_type in ('application/x-www-form-urlencoded', 'multipart/form-data'):
        return request.POST.get(settings.SHOP_CSRF_FORM_FIELD, '').strip() or None
    return None


def parse_json_body(request):
    """
    Return the request payload as a dict.

    JSON bodies are decoded; classic form posts fall back to request.POST.
    Anything else that is not a JSON object is rejected.
    """
    if request.content_type in ('application/x-www-form-urlencoded', 'multipart/form-data'):
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        raise ValidationFailed('Invalid JSON body')
    if not isinstance(data, dict):
        raise ValidationFailed('JSON body must be an object')
    return data


def require_fields(data, *names):
    missing = [n for n in names if data.get(n) in (None, '')]
    if missing:
        raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")


def parse_decimal(value, field, allow_zero=False):
    try:
        amount = Decimal(str(value))
        # NaN passes quantize untouched
        if amount.is_finite():
            amount = amount.quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationFailed(f'{field} must be a number')
    if not amount.is_finite():
        raise ValidationFailed(f'{field} must be a number')
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationFailed(f'{field} must be greater than zero')
    return amount


def parse_int(value, field, minimum=None, maximum=None):
    if isinstance(value, bool):
        raise ValidationFailed(f'{field} must be an integer')
    try:
        number = int(value)
    except (ValueError, TypeError):
        raise ValidationFailed(f'{field} must be an integer')
    if minimum is not None and number < minimum:
        raise ValidationFailed(f'{field} must be at least {minimum}')
    if maximum is not None and number > maximum:
        raise ValidationFailed(f'{field} must be at most {maximum}')
    return number


def parse_date(value, field='date', default=None):
    if value in (None, ''):
        return default
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationFailed(f'{field} must be a date (YYYY-MM-DD)')


def parse_time(value, field):
    if isinstance(value, time):
        return value
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(str(value), fmt).time()
        except (ValueError, TypeError):
            continue
    raise ValidationFailed(f'{field} must be a time (HH:MM)')


def set_session_cookie(response, session):
    response.set_cookie(
        settings.SHOP_SESSION_COOKIE_NAME,
        session.key,
        max_age=int(settings.SHOP_SESSION_TTL.total_seconds()),
        path='/',
        secure=settings.SHOP_SESSION_COOKIE_SECURE,
        httponly=True,
        samesite='Strict',
    )
    return response


def clear_session_cookie(response):
    # delete_cookie sends Max-Age=0 with an expiry in 1970
    response.delete_cookie(settings.SHOP_SESSION_COOKIE_NAME, path='/', samesite='Strict')
    return response
