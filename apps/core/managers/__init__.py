"""
Core managers for profile-owned tables.
"""
from .profile import ProfileManager, ProfileQuerySet, UserOwnedManager, UserOwnedQuerySet

__all__ = [
    'ProfileQuerySet',
    'ProfileManager',
    'UserOwnedQuerySet',
    'UserOwnedManager',
]
