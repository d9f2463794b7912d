"""
Settings Selectors

App branding, per-role navigation and the caller's notifications.
"""
import logging
from uuid import UUID

from apps.core.constants import FALLBACK_DEFAULT_PAGE, FALLBACK_ICONS, FALLBACK_NAVIGATION, PAGE_META
from apps.core.models import AppSettings, Notification, RoleNavigationSetting

logger = logging.getLogger(__name__)

DEFAULT_PAGE = '/dashboard'


def get_app_settings() -> AppSettings:
    """The single settings row, or an unsaved default when none exists yet."""
    return AppSettings.objects.order_by('updated_at').first() or AppSettings()


def _link(page_path: str, label_key: str, icon_name: str | None, **extra) -> dict:
    return {
        'page_path': page_path,
        'label_key': label_key,
        'icon_name': icon_name,
        'is_custom': extra.get('is_custom', False),
        'custom_label': extra.get('custom_label'),
        'is_external': extra.get('is_external', False),
    }


def fallback_navigation(role: str | None) -> dict:
    """Built-in menu used when a role has no stored visible rows."""
    links = []
    for page_path in FALLBACK_NAVIGATION.get(role, []):
        label_key, icon_name = PAGE_META[page_path]
        icon_name = FALLBACK_ICONS.get((role, page_path), icon_name)
        links.append(_link(page_path, label_key, icon_name))
    return {
        'links': links,
        'default_page': FALLBACK_DEFAULT_PAGE.get(role, DEFAULT_PAGE),
        'source': 'fallback',
    }


def get_effective_navigation(role: str | None) -> dict:
    """
    The menu a role sees and the page it lands on after login.

    Default page resolution: the stored internal default (even when hidden),
    else the first visible internal link, else the built-in default.
    """
    if not role:
        return fallback_navigation(role)

    rows = RoleNavigationSetting.objects.filter(role=role)
    visible = list(rows.filter(is_visible=True).order_by('display_order'))
    if not visible:
        return fallback_navigation(role)

    links = [
        _link(
            row.page_path,
            row.label_key,
            row.icon_name,
            is_custom=row.is_custom,
            custom_label=row.custom_label,
            is_external=row.is_external,
        )
        for row in visible
    ]

    default = rows.filter(is_default=True, is_external=False).values_list('page_path', flat=True).first()
    if default is None:
        first_internal = next((link for link in links if not link['is_external']), None)
        default = first_internal['page_path'] if first_internal else FALLBACK_DEFAULT_PAGE.get(role, DEFAULT_PAGE)

    return {'links': links, 'default_page': default, 'source': 'settings'}


def get_navigation_items(role: str) -> list[dict]:
    """
    Every system page plus the role's custom links, in menu order.

    System pages without a stored row are listed hidden with id None and
    take their position from PAGE_META.
    """
    stored = {row.page_path: row for row in RoleNavigationSetting.objects.filter(role=role, is_custom=False)}

    items = []
    for index, (page_path, (label_key, icon_name)) in enumerate(PAGE_META.items()):
        row = stored.get(page_path)
        items.append({
            'id': str(row.id) if row else None,
            'role': role,
            'page_path': page_path,
            'label_key': label_key,
            'icon_name': icon_name,
            'is_visible': row.is_visible if row else False,
            'is_default': row.is_default if row else False,
            'display_order': row.display_order if row else index + 1,
            'is_custom': False,
            'custom_label': None,
            'is_external': False,
        })

    for row in RoleNavigationSetting.objects.filter(role=role, is_custom=True):
        items.append({
            'id': str(row.id),
            'role': role,
            'page_path': row.page_path,
            'label_key': row.label_key,
            'icon_name': row.icon_name,
            'is_visible': row.is_visible,
            'is_default': row.is_default,
            'display_order': row.display_order,
            'is_custom': True,
            'custom_label': row.custom_label,
            'is_external': row.is_external,
        })

    return sorted(items, key=lambda item: item['display_order'])


def get_notifications(user_id: UUID, *, unread_only: bool = False, limit: int = 50):
    qs = Notification.objects.filter(user_id=user_id)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by('-created_at')[:limit]


def unread_count(user_id: UUID) -> int:
    return Notification.objects.filter(user_id=user_id, is_read=False).count()
