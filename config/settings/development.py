"""
Django Development Settings for the Journey Backend

Use these settings for local development against a local or staging
Supabase project.
"""
from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# =============================================================================
# CORS - the Vite dev server runs on 5173, preview builds on 4173
# =============================================================================

CORS_ALLOWED_ORIGINS = [
    'http://localhost:5173',
    'http://127.0.0.1:5173',
    'http://localhost:4173',
]

CORS_ALLOW_ALL_ORIGINS = False

# =============================================================================
# Database - local Supabase (supabase start) does not speak SSL
# =============================================================================

DATABASES['default']['OPTIONS']['sslmode'] = config(  # noqa: F405
    'SUPABASE_DB_SSLMODE',
    default='disable'
)

# =============================================================================
# Throttling - relaxed so bulk admin screens can be exercised by hand
# =============================================================================

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {  # noqa: F405
    'auth': '100/min',
    'uploads': '300/hour',
    'burst': '600/min',
}

# =============================================================================
# Logging - aggregation services are chatty at DEBUG
# =============================================================================

LOGGING = LOGGING.copy()  # noqa: F405  # type: ignore[name-defined]
LOGGING['root']['level'] = 'DEBUG'  # type: ignore[index]
LOGGING['loggers']['services']['level'] = 'DEBUG'  # type: ignore[index]
