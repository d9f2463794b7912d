"""
Core QuerySet mixins for role-based visibility filtering.
"""
from .visibility import ParticipantScopeQuerySetMixin

__all__ = ['ParticipantScopeQuerySetMixin']
