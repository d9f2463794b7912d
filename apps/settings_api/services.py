"""
Settings Services

Branding updates, navigation management, notification reads and the
caller's own profile.
"""
import logging
from uuid import UUID

from django.db.models import Max

from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.constants import PAGE_META
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import AppSettings, Notification, Profile, RoleNavigationSetting
from apps.core.selectors import get_profile
from apps.core.storage import upload_user_file

from .selectors import get_app_settings

logger = logging.getLogger(__name__)

CUSTOM_LABEL_KEY = 'custom'


# =============================================================================
# App settings
# =============================================================================

def update_app_settings(*, actor: AuthenticatedUser, data: dict) -> AppSettings:
    """Apply a partial update to the single settings row, creating it if needed."""
    app_settings = get_app_settings()
    for field, value in data.items():
        setattr(app_settings, field, value)
    app_settings.save()
    logger.info(f'App settings updated by {actor.id}: {sorted(data)}')
    return app_settings


# =============================================================================
# Navigation
# =============================================================================

def _system_row(role: str, page_path: str) -> RoleNavigationSetting:
    """Stored row for a system page, built unsaved from PAGE_META when missing."""
    row = RoleNavigationSetting.objects.filter(role=role, page_path=page_path, is_custom=False).first()
    if row is not None:
        return row
    label_key, icon_name = PAGE_META[page_path]
    return RoleNavigationSetting(
        role=role,
        page_path=page_path,
        label_key=label_key,
        icon_name=icon_name,
        is_visible=False,
        is_default=False,
        display_order=list(PAGE_META).index(page_path) + 1,
        is_custom=False,
        is_external=False,
    )


def set_page_visibility(*, role: str, page_path: str, is_visible: bool) -> RoleNavigationSetting:
    """
    Show or hide a system page for a role.

    Hiding the default page also clears its default flag.
    """
    row = _system_row(role, page_path)
    row.is_visible = is_visible
    if not is_visible and row.is_default:
        row.is_default = False
    row.save()
    return row


def set_default_page(*, role: str, page_path: str) -> RoleNavigationSetting:
    """
    Make one visible page the role's landing page.

    Raises:
        ValidationError: the page is hidden or has no stored row
    """
    row = RoleNavigationSetting.objects.filter(role=role, page_path=page_path).first()
    if row is None or not row.is_visible:
        raise ValidationError('Page must be visible to be the default', details={'page_path': page_path})
    if row.is_external:
        raise ValidationError('External links cannot be the default page', details={'page_path': page_path})

    RoleNavigationSetting.objects.filter(role=role, is_default=True).exclude(id=row.id).update(is_default=False)
    row.is_default = True
    row.save(update_fields=['is_default', 'updated_at'])
    return row


def reorder_navigation(*, role: str, page_paths: list[str]) -> int:
    """
    Renumber a role's menu to follow `page_paths`.

    System pages that have no stored row yet are inserted at their new
    position, keeping their current visibility (hidden). One write per item.

    Raises:
        ValidationError: a path is neither a system page nor a stored link
    """
    stored = {row.page_path: row for row in RoleNavigationSetting.objects.filter(role=role)}
    unknown = [p for p in page_paths if p not in stored and p not in PAGE_META]
    if unknown:
        raise ValidationError('Unknown navigation items', details={'page_paths': unknown})

    def place(item: tuple[int, str]) -> None:
        position, page_path = item
        row = stored.get(page_path)
        if row is None:
            row = _system_row(role, page_path)
            row.display_order = position
            row.save()
        else:
            RoleNavigationSetting.objects.filter(id=row.id).update(display_order=position)

    return run_sequentially(
        list(enumerate(page_paths, start=1)),
        place,
        label='reorder navigation',
    )


def create_custom_link(
    *,
    role: str,
    label: str,
    url: str,
    icon_name: str = 'LinkIcon',
    is_external: bool = False,
) -> RoleNavigationSetting:
    """Add a visible custom link at the end of the role's menu."""
    max_order = RoleNavigationSetting.objects.filter(role=role).aggregate(m=Max('display_order'))['m'] or 0
    return RoleNavigationSetting.objects.create(
        role=role,
        page_path=url,
        label_key=CUSTOM_LABEL_KEY,
        custom_label=label,
        icon_name=icon_name,
        is_visible=True,
        is_default=False,
        display_order=max_order + 1,
        is_custom=True,
        is_external=is_external,
    )


def _custom_link(link_id: UUID) -> RoleNavigationSetting:
    link = RoleNavigationSetting.objects.filter(id=link_id, is_custom=True).first()
    if link is None:
        raise NotFoundError('Custom link not found')
    return link


def update_custom_link(*, link_id: UUID, data: dict) -> RoleNavigationSetting:
    link = _custom_link(link_id)
    link.custom_label = data['label']
    link.page_path = data['url']
    link.icon_name = data.get('icon_name') or link.icon_name
    link.is_external = data.get('is_external', link.is_external)
    link.save()
    return link


def toggle_custom_link(*, link_id: UUID) -> RoleNavigationSetting:
    link = _custom_link(link_id)
    link.is_visible = not link.is_visible
    if not link.is_visible:
        link.is_default = False
    link.save(update_fields=['is_visible', 'is_default', 'updated_at'])
    return link


def delete_custom_link(*, link_id: UUID) -> None:
    """System pages cannot be deleted, only hidden."""
    _custom_link(link_id).delete()


# =============================================================================
# Notifications
# =============================================================================

def mark_notification_read(*, user: AuthenticatedUser, notification_id: UUID) -> Notification:
    notification = Notification.objects.filter(id=notification_id, user_id=user.id).first()
    if notification is None:
        raise NotFoundError('Notification not found')
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return notification


def mark_all_notifications_read(*, user: AuthenticatedUser) -> int:
    return Notification.objects.filter(user_id=user.id, is_read=False).update(is_read=True)


# =============================================================================
# Own profile
# =============================================================================

def update_own_profile(*, user: AuthenticatedUser, data: dict) -> Profile:
    profile = get_profile(user.id)
    for field in ('full_name', 'phone'):
        if field in data:
            setattr(profile, field, data[field])
    profile.save()
    return profile


def upload_avatar(*, user: AuthenticatedUser, file) -> Profile:
    """Store the avatar at a fixed per-user path (overwriting) and save its URL."""
    profile = get_profile(user.id)
    profile.avatar_url = upload_user_file('avatar', user.id, file).public_url
    profile.save(update_fields=['avatar_url', 'updated_at'])
    return profile
