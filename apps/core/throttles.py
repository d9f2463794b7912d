"""
Custom Throttle Classes for the Journey Backend

Rates are configured in REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'].
"""
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    """
    Applied to: login, register, refresh
    Slows down password guessing against Supabase Auth.
    """
    scope = 'auth'


class UploadRateThrottle(UserRateThrottle):
    """
    Applied to every endpoint that writes to Supabase Storage.
    """
    scope = 'uploads'


class BurstRateThrottle(UserRateThrottle):
    """
    Applied to bulk admin actions that fan out into one write per row.
    """
    scope = 'burst'
