"""
Visibility QuerySet Mixin for role scoping.

Admin, finance and ecommerce staff see every participant, coaches see the
participants assigned to them, participants see only their own rows.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apps.core.authentication import AuthenticatedUser


class ParticipantScopeQuerySetMixin:
    """
    Mixin for tables that hang off a participant profile.

    The owning column is configurable so the same mixin serves both
    profiles (scoped on their own id) and child tables (scoped on user_id).
    """

    user_field = 'user_id'
    coach_field = 'user__assigned_coach_id'

    def visible_to(self, user: 'AuthenticatedUser'):
        """
        Filter to records the user may see.

        Args:
            user: The authenticated user

        Returns:
            Filtered queryset
        """
        if user.is_coach:
            return self.filter(**{self.coach_field: user.id})
        if user.is_participant:
            return self.filter(**{self.user_field: user.id})
        return self.all()

    def for_users(self, user_ids):
        """Filter to an explicit set of owners."""
        return self.filter(**{f'{self.user_field}__in': list(user_ids)})

    def in_batch(self, batch_number: str | None):
        """Filter by the owner's batch label, no-op when batch is empty or 'all'."""
        if not batch_number or batch_number == 'all':
            return self
        batch_field = self.coach_field.replace('assigned_coach_id', 'batch_number')
        return self.filter(**{batch_field: batch_number})
