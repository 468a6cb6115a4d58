"""
Production settings.
"""
from .base import *

DEBUG = False

SECRET_KEY = env('SECRET_KEY')  # REQUIRED in production
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS')

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': env('DB_NAME', default='massage_shop'),
        'USER': env('DB_USER', default='massage_shop'),
        'PASSWORD': env('DB_PASSWORD'),
        'HOST': env('DB_HOST', default='localhost'),
        'PORT': env('DB_PORT', default='5432'),
        'CONN_MAX_AGE': 600,
    }
}

# Security
SHOP_SESSION_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
CSRF_COOKIE_HTTPONLY = True
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'SAMEORIGIN'

# Behind nginx: trust X-Forwarded-For only from these addresses
TRUSTED_PROXIES = env.list('TRUSTED_PROXIES', default=['127.0.0.1'])

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
     'OPTIONS': {'min_length': 10}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LOGGING['handlers']['file'] = {
    'class': 'logging.handlers.RotatingFileHandler',
    'filename': env('LOG_FILE', default=str(BASE_DIR / 'logs' / 'massage_shop.log')),
    'maxBytes': 5 * 1024 * 1024,
    'backupCount': 5,
    'formatter': 'verbose',
}
for _logger in LOGGING['loggers'].values():
    _logger['handlers'].append('file')
