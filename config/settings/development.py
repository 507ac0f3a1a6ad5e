# config/settings/development.py

import sys
from .base import *

# === DEVELOPMENT ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# Tokens fall back to SECRET_KEY so a fresh checkout can log in right away
if not JWT_SECRET:
    JWT_SECRET = SECRET_KEY

# === DATABASE ===

# PostgreSQL by default (same as production)
# DATABASE_URL wins over the individual variables
if env('DATABASE_URL', default=None):
    import dj_database_url

    DATABASES['default'] = dj_database_url.parse(env('DATABASE_URL'), conn_max_age=600)
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': env('DB_NAME', default='mini_saas_dashboard'),
            'USER': env('DB_USER', default='dashboard_user'),
            'PASSWORD': env('DB_PASSWORD', default='dashboard123'),
            'HOST': env('DB_HOST', default='localhost'),
            'PORT': env('DB_PORT', default='5432'),
            'OPTIONS': {
                'sslmode': 'prefer',
            },
            'CONN_MAX_AGE': 60,  # Persistent connections
        }
    }

# SQLite only when explicitly requested
if env('USE_SQLITE', cast=bool, default=False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# One transaction per request
DATABASES['default']['ATOMIC_REQUESTS'] = True

# === EMAIL ===

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# === MORE VERBOSE LOGGING ===

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['root']['level'] = 'DEBUG'

LOGGING['loggers']['django.db.backends'] = {
    'handlers': ['console'],
    'level': 'INFO',
    'propagate': False,
}

# === DEVELOPMENT CACHE ===

# Local memory cache unless Redis is reachable
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'dashboard-dev-cache',
    }
}

if env('REDIS_URL', default=None):
    try:
        import redis

        r = redis.from_url(env('REDIS_URL'))
        r.ping()

        CACHES['default'] = {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': env('REDIS_URL'),
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            }
        }
    except redis.exceptions.RedisError as e:
        print(f"Redis unavailable ({e}), using local memory cache")

# Simplified channel layer for development
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer'
    }
}

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# shell_plus imports
SHELL_PLUS_IMPORTS = [
    'from apps.core.models import *',
    'from apps.core.auth_service import auth_service',
]

# `manage.py test` runs against an in-memory database
if 'test' in sys.argv:
    DATABASES['default'] = {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:'
    }

    LOGGING['handlers'] = {}
    LOGGING['loggers'] = {}
    LOGGING['root'] = {'handlers': [], 'level': 'WARNING'}
