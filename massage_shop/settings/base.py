"""
Base Django settings for massage_shop.
Common settings shared between development and production.
"""
import os
import sys
from datetime import timedelta
from pathlib import Path
import environ

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Check if running tests
TESTING = 'test' in sys.argv or 'pytest' in sys.modules

# Environment variables
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, ['*']),
)
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env('SECRET_KEY', default='django-insecure-change-me-in-production')

# Obscured path for the Django admin; /admin/ itself always 404s.
SECRET_ADMIN_URL = env('SECRET_ADMIN_URL', default='manage-shop')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Third-party apps
    'axes',
    # Project apps
    'core.apps.CoreConfig',
    'pos.apps.PosConfig',
]

# Django session/auth middleware only serve the admin. Shop routes are guarded
# by ShopAuthGateMiddleware, which also owns the CSRF check; CsrfViewMiddleware
# is not installed (admin views carry their own csrf_protect).
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # Django-axes rate limiting (must be after AuthenticationMiddleware)
    'axes.middleware.AxesMiddleware',
    # Hide the default admin path
    'core.middleware.AdminPathMiddleware',
    # Shop session + CSRF gate (must be after AuthenticationMiddleware)
    'core.middleware.ShopAuthGateMiddleware',
    # Renders ShopError / DatabaseError raised by views
    'core.middleware.ShopErrorMiddleware',
    # Custom security middleware
    'core.middleware.ContentSecurityPolicyMiddleware',
    'core.middleware.ReferrerPolicyMiddleware',
    'core.middleware.PermissionsPolicyMiddleware',
]

ROOT_URLCONF = 'massage_shop.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'core.context_processors.shop_session',
            ],
        },
    },
]

WSGI_APPLICATION = 'massage_shop.wsgi.application'

# Custom user model
AUTH_USER_MODEL = 'core.ShopUser'

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
     'OPTIONS': {'min_length': 8}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# Login URL
LOGIN_URL = '/login/'
LOGIN_REDIRECT_URL = '/pos/'

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = env('TIME_ZONE', default='Asia/Bangkok')
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = 'static/'
STATICFILES_DIRS = [BASE_DIR / 'static']
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Django sessions only back the admin login.
SESSION_COOKIE_AGE = 1800
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

# ==========================================================================
# SHOP SESSION / CSRF SETTINGS
# ==========================================================================
SHOP_SESSION_TTL = timedelta(days=90)
SHOP_SESSION_COOKIE_NAME = 'shop_session'
SHOP_SESSION_COOKIE_SECURE = False
SHOP_CSRF_HEADER = 'X-CSRF-Token'
SHOP_CSRF_FORM_FIELD = 'csrf_token'

# ==========================================================================
# SHOP SETTINGS
# ==========================================================================
SHOP_CURRENCY = env('SHOP_CURRENCY', default='THB')
SHOP_TRANSACTIONS_PAGE_SIZE = 50

SHOP_DEFAULT_SERVICES = [
    {'name': 'Thai Massage', 'duration_minutes': 60, 'location': 'In-Shop', 'price': 250, 'masseuse_fee': 100},
    {'name': 'Thai Massage', 'duration_minutes': 90, 'location': 'In-Shop', 'price': 350, 'masseuse_fee': 140},
    {'name': 'Neck and Shoulder', 'duration_minutes': 30, 'location': 'In-Shop', 'price': 150, 'masseuse_fee': 60},
    {'name': 'Foot Massage', 'duration_minutes': 60, 'location': 'In-Shop', 'price': 200, 'masseuse_fee': 80},
    {'name': 'Oil Massage', 'duration_minutes': 60, 'location': 'In-Shop', 'price': 400, 'masseuse_fee': 150},
    {'name': 'Oil Massage', 'duration_minutes': 60, 'location': 'Home Service', 'price': 600, 'masseuse_fee': 250},
]

SHOP_DEFAULT_PAYMENT_METHODS = ['Cash', 'Credit Card', 'Bank Transfer', 'Voucher']

# ==========================================================================
# LOGGING
# ==========================================================================
LOG_LEVEL = env('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'shop.auth': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'shop.audit': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'shop.roster': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'shop.pos': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'django.request': {'handlers': ['console'], 'level': 'ERROR', 'propagate': False},
    },
}

if TESTING:
    # Keep test output readable
    for _logger in LOGGING['loggers'].values():
        _logger['level'] = 'CRITICAL'

# ==========================================================================
# DJANGO-AXES RATE LIMITING
# ==========================================================================
if TESTING:
    # Don't use axes in tests (it requires request object)
    AUTHENTICATION_BACKENDS = [
        'django.contrib.auth.backends.ModelBackend',
    ]
else:
    AUTHENTICATION_BACKENDS = [
        'axes.backends.AxesBackend',  # AxesBackend with ModelBackend fallback
        'django.contrib.auth.backends.ModelBackend',
    ]

# Lock out after 5 failed attempts
AXES_FAILURE_LIMIT = 5
# Lock out for 15 minutes
AXES_COOLOFF_TIME = timedelta(minutes=15)
# Lock based on username and IP for better security
AXES_LOCKOUT_PARAMETERS = ['username', 'ip_address']
# Reset attempts on successful login
AXES_RESET_ON_SUCCESS = True
# The shop login API posts JSON; axes reads the username from this field
AXES_USERNAME_FORM_FIELD = 'username'
AXES_ENABLE_ADMIN = True
# Lockouts would leak between test cases
AXES_ENABLED = not TESTING
