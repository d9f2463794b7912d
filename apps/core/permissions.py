"""
Permission Classes for the Journey Backend

Provides role-based access control. Supabase row-level security remains the
enforcement point for the tables themselves; these checks mirror the page
gating of the web client so the API answers with the same access-denied
result the UI shows.
"""
import logging
from uuid import UUID

from rest_framework import permissions

from .authentication import AuthenticatedUser
from .constants import (
    ECOMMERCE_STAGE_NAME,
    FEES_STAGE_NAME,
    PAGE_ACCESS,
    ROLE_ADMIN,
    ROLE_COACH,
    ROLE_ECOMMERCE,
    ROLE_FINANCE,
)

logger = logging.getLogger(__name__)


def can_mutate_stage(role: str | None, stage_name: str) -> bool:
    """
    Decide whether a role may change a participant's progress on a stage.

    Advisory: drives the `can_update` flag the client uses to hide controls.
    Stage ownership is matched on the exact stage name.

    Args:
        role: The caller's role
        stage_name: JourneyStage.name

    Returns:
        bool: True if the role may update the stage
    """
    if role == ROLE_ADMIN:
        return True
    if stage_name == FEES_STAGE_NAME:
        return role == ROLE_FINANCE
    if stage_name == ECOMMERCE_STAGE_NAME:
        return role == ROLE_ECOMMERCE
    return role == ROLE_COACH


def can_access_page(role: str | None, page_path: str) -> bool:
    """Check the role gate for a client page. Unlisted pages are open."""
    allowed = PAGE_ACCESS.get(page_path)
    if allowed is None:
        return True
    return role in allowed


def can_view_participant(user: AuthenticatedUser, participant_id: UUID, assigned_coach_id: UUID | None) -> bool:
    """
    Check if user may see a participant's records.

    Participants see themselves, coaches see their assigned participants,
    other staff see everyone.
    """
    if str(user.id) == str(participant_id):
        return True
    if user.is_coach:
        return assigned_coach_id is not None and str(assigned_coach_id) == str(user.id)
    return user.is_staff


class IsAuthenticated(permissions.BasePermission):
    """
    Allows access only to requests carrying an AuthenticatedUser.
    """
    message = 'Authentication required'

    def has_permission(self, request, view):
        return isinstance(getattr(request, 'user', None), AuthenticatedUser)


class HasRole(permissions.BasePermission):
    """
    Allows access only to the roles listed on the view.

    Configure allowed roles on the view:
        class MyView(APIView):
            permission_classes = [HasRole]
            allowed_roles = ['admin', 'coach']
    """
    message = 'Access denied'
    allowed_roles: list[str] = []

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedUser):
            return False
        allowed = getattr(view, 'allowed_roles', None) or self.allowed_roles
        return user.role in allowed


class IsAdmin(HasRole):
    message = 'Admin access required'
    allowed_roles = [ROLE_ADMIN]

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, AuthenticatedUser) and user.is_admin


class IsAdminOrCoach(IsAdmin):
    message = 'Admin or coach access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, AuthenticatedUser) and (user.is_admin or user.is_coach)


class IsFinanceOrAdmin(permissions.BasePermission):
    message = 'Finance access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, AuthenticatedUser) and user.role in (ROLE_ADMIN, ROLE_FINANCE)


class IsEcommerceOrAdmin(permissions.BasePermission):
    message = 'E-commerce access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, AuthenticatedUser) and user.role in (ROLE_ADMIN, ROLE_ECOMMERCE)


class IsStaff(permissions.BasePermission):
    """
    Allows any non-participant role.
    """
    message = 'Staff access required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, AuthenticatedUser) and user.is_staff


class HasPageAccess(permissions.BasePermission):
    """
    Gates a view by the client page it backs.

    Set `page_path` on the view, e.g. page_path = '/finance'.
    """
    message = 'Access denied'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedUser):
            return False
        page_path = getattr(view, 'page_path', None)
        if not page_path:
            return True
        allowed = can_access_page(user.role, page_path)
        if not allowed:
            logger.info(f'Role {user.role} denied access to {page_path}')
        return allowed
