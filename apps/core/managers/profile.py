"""
Profile QuerySet and Manager, plus the shared manager for user-owned rows.
"""
from django.db import models
from django.db.models import Q

from apps.core.constants import STAFF_ROLES
from apps.core.querysets import ParticipantScopeQuerySetMixin


class ProfileQuerySet(ParticipantScopeQuerySetMixin, models.QuerySet):
    """
    Custom QuerySet for Profile with role scoping.
    """
    user_field = 'id'
    coach_field = 'assigned_coach_id'

    def participants(self):
        """Filter to profiles without a staff role (a missing role row means participant)."""
        return self.exclude(roles__role__in=STAFF_ROLES)

    def with_role(self, role: str):
        return self.filter(roles__role=role).distinct()

    def search(self, term: str | None):
        """Case-insensitive match on name, email or batch."""
        if not term:
            return self
        return self.filter(
            Q(full_name__icontains=term)
            | Q(email__icontains=term)
            | Q(batch_number__icontains=term)
        )

    def batch_numbers(self) -> list[str]:
        """Distinct, non-empty batch labels in ascending order."""
        return list(
            self.exclude(batch_number__isnull=True)
            .exclude(batch_number='')
            .order_by('batch_number')
            .values_list('batch_number', flat=True)
            .distinct()
        )


class ProfileManager(models.Manager.from_queryset(ProfileQuerySet)):  # type: ignore[misc]
    pass


class UserOwnedQuerySet(ParticipantScopeQuerySetMixin, models.QuerySet):
    """
    QuerySet for tables keyed by user_id (progress, submissions, documents...).
    """

    def with_status(self, *statuses: str):
        return self.filter(status__in=statuses)


class UserOwnedManager(models.Manager.from_queryset(UserOwnedQuerySet)):  # type: ignore[misc]
    pass
