"""
Shop error taxonomy.

Views and services raise these; ShopErrorMiddleware (and the auth gate for
its own rejections) turns them into a JSON body for API clients or a
redirect / error page for browsers.
"""


class ShopError(Exception):
    """Base class: carries an HTTP status and a machine-readable code."""

    status = 500
    code = 'ERROR'
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {'error': self.message, 'code': self.code}


class AuthRequired(ShopError):
    status = 401
    code = 'AUTH_REQUIRED'
    default_message = 'Authentication required'


class Forbidden(ShopError):
    status = 403
    code = 'FORBIDDEN'
    default_message = 'You do not have permission to do that'


class CsrfMissing(ShopError):
    status = 403
    code = 'CSRF_MISSING'
    default_message = 'CSRF token required'


class CsrfInvalid(ShopError):
    status = 403
    code = 'CSRF_INVALID'
    default_message = 'CSRF token invalid'


class NotFound(ShopError):
    status = 404
    code = 'NOT_FOUND'
    default_message = 'Not found'


class Conflict(ShopError):
    status = 409
    code = 'CONFLICT'
    default_message = 'Conflict'


class ValidationFailed(ShopError):
    status = 400
    code = 'VALIDATION_ERROR'
    default_message = 'Invalid request'


class StorageError(ShopError):
    status = 500
    code = 'STORAGE_ERROR'
    default_message = 'Storage unavailable, please try again'
