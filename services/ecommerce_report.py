"""
E-Commerce Report Service

Store setup progress and platform breakdown.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .base import Row, key_of

PLATFORMS = ['amazon', 'flipkart', 'own_website', 'shopify', 'indiamart', 'other']

EXPORT_COLUMNS = ['name', 'email', 'batch_number', 'platform', 'status']


@dataclass
class SetupStats:
    completed: int
    inProgress: int
    pending: int
    total: int


@dataclass
class PlatformStats:
    platform: str
    total: int
    completed: int
    pending: int


@dataclass
class ECommerceReport:
    stats: SetupStats
    platforms: list[PlatformStats] = field(default_factory=list)


def setup_stats(profiles: list[Row], setups: list[Row]) -> SetupStats:
    """
    Setup counts.

    `pending` is the number of participants with no setup row at all, while
    `inProgress` counts setups that exist but are not completed yet.
    """
    users_with_setup = {key_of(s, 'user_id') for s in setups}
    return SetupStats(
        completed=sum(1 for s in setups if s.get('status') == 'completed'),
        inProgress=sum(1 for s in setups if s.get('status') in ('in_progress', 'pending')),
        pending=max(len(profiles) - len(users_with_setup), 0),
        total=len(setups),
    )


def platform_stats(setups: list[Row]) -> list[PlatformStats]:
    """Per-platform counts; a missing platform is counted as 'other'."""
    counts: dict[str, PlatformStats] = {
        p: PlatformStats(platform=p, total=0, completed=0, pending=0) for p in PLATFORMS
    }
    for setup in setups:
        platform = setup.get('platform') or 'other'
        entry = counts.setdefault(platform, PlatformStats(platform=platform, total=0, completed=0, pending=0))
        entry.total += 1
        if setup.get('status') == 'completed':
            entry.completed += 1
        else:
            entry.pending += 1
    return list(counts.values())


def build_ecommerce_report(profiles: list[Row], setups: list[Row]) -> ECommerceReport:
    return ECommerceReport(stats=setup_stats(profiles, setups), platforms=platform_stats(setups))


def export_rows(profiles: list[Row], setups: list[Row]) -> list[Row]:
    """Rows for the e-commerce CSV: one per setup joined to its owner."""
    by_id = {str(p['id']): p for p in profiles}
    rows = []
    for setup in setups:
        profile = by_id.get(key_of(setup, 'user_id'), {})
        rows.append({
            'name': profile.get('full_name') or '',
            'email': profile.get('email') or '',
            'batch_number': profile.get('batch_number') or '',
            'platform': setup.get('platform') or '',
            'status': setup.get('status'),
        })
    return rows
