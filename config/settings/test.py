"""
Django Test Settings for the Journey Backend

Uses SQLite in-memory database for fast testing.
Unmanaged models are flipped to managed in tests/conftest.py so the
schema can be created with --run-syncdb.
"""
from .base import *  # noqa: F401, F403

DEBUG = False

# =============================================================================
# Database
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# =============================================================================
# Middleware - JWT middleware is bypassed; tests use force_authenticate
# =============================================================================

MIDDLEWARE = [
    'django.middleware.common.CommonMiddleware',
    'apps.core.middleware.LanguageContextMiddleware',
]

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable logging during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

# =============================================================================
# REST Framework Test Settings
# =============================================================================

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'auth': '1000/min',
        'uploads': '1000/min',
        'burst': '1000/min',
    },
}

# =============================================================================
# Supabase Mock Configuration
# =============================================================================

SUPABASE_URL = 'http://localhost:54321'
SUPABASE_ANON_KEY = 'test-anon-key'
SUPABASE_SERVICE_ROLE_KEY = 'test-service-role-key'
SUPABASE_JWT_SECRET = 'test-jwt-secret-key-for-testing-purposes-only'

CORS_ALLOW_ALL_ORIGINS = True
