"""
Utility functions for the Journey Backend

Common helpers used across selectors and views.
"""
from datetime import date

from django.utils import timezone


def display_name(full_name: str | None, fallback: str = 'Unknown') -> str:
    """Trimmed name, or the fallback when the profile has none."""
    return (full_name or '').strip() or fallback


def today() -> date:
    """Current date in the configured TIME_ZONE."""
    return timezone.localdate()
