"""
Finance Report Service

Fee-stage completion across all participants and per batch.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .base import Row, batches_of, key_of, percent

EXPORT_COLUMNS = ['name', 'email', 'batch_number', 'status']


@dataclass
class FeeStats:
    totalParticipants: int
    feesPaid: int
    inProgress: int
    pending: int
    completionRate: int


@dataclass
class BatchFeeStats:
    batch: str
    total: int
    completed: int
    inProgress: int
    pending: int
    completionRate: int


@dataclass
class StageStats:
    stage_id: str | None
    completed: int
    inProgress: int
    notStarted: int


@dataclass
class FinanceReport:
    stage_id: str | None
    stats: FeeStats
    batches: list[BatchFeeStats] = field(default_factory=list)


def fee_stats(profiles: list[Row], fee_progress: list[Row]) -> FeeStats:
    """
    Fee completion for a set of profiles.

    Only progress rows owned by `profiles` are counted, so the same
    function serves the overall figures and each batch.
    """
    ids = {str(p['id']) for p in profiles}
    rows = [p for p in fee_progress if key_of(p, 'user_id') in ids]
    completed = sum(1 for p in rows if p.get('status') == 'completed')
    in_progress = sum(1 for p in rows if p.get('status') == 'in_progress')
    total = len(profiles)

    return FeeStats(
        totalParticipants=total,
        feesPaid=completed,
        inProgress=in_progress,
        pending=total - (completed + in_progress),
        completionRate=percent(completed, total),
    )


def batch_fee_stats(profiles: list[Row], fee_progress: list[Row]) -> list[BatchFeeStats]:
    """One entry per distinct batch label, sorted by label."""
    result = []
    for batch in batches_of(profiles):
        members = [p for p in profiles if p.get('batch_number') == batch]
        stats = fee_stats(members, fee_progress)
        result.append(BatchFeeStats(
            batch=batch,
            total=stats.totalParticipants,
            completed=stats.feesPaid,
            inProgress=stats.inProgress,
            pending=stats.pending,
            completionRate=stats.completionRate,
        ))
    return result


def stage_stats(stage: Row | None, profiles: list[Row], progress: list[Row]) -> StageStats:
    """Completed / in progress / not started counts for one stage."""
    if not stage:
        return StageStats(stage_id=None, completed=0, inProgress=0, notStarted=0)
    rows = [p for p in progress if key_of(p, 'stage_id') == str(stage['id'])]
    return StageStats(
        stage_id=str(stage['id']),
        completed=sum(1 for p in rows if p.get('status') == 'completed'),
        inProgress=sum(1 for p in rows if p.get('status') == 'in_progress'),
        notStarted=max(len(profiles) - len(rows), 0),
    )


def build_finance_report(fee_stage: Row | None, profiles: list[Row], progress: list[Row]) -> FinanceReport:
    """
    Fee-stage report.

    Args:
        fee_stage: the stage row for fee payment, or None when not configured
        profiles: participant profile rows
        progress: participant_progress rows (any stage)
    """
    stage_id = str(fee_stage['id']) if fee_stage else None
    fee_progress = [p for p in progress if stage_id and key_of(p, 'stage_id') == stage_id]
    return FinanceReport(
        stage_id=stage_id,
        stats=fee_stats(profiles, fee_progress),
        batches=batch_fee_stats(profiles, fee_progress),
    )


def export_rows(fee_stage: Row | None, profiles: list[Row], progress: list[Row]) -> list[Row]:
    """Rows for the finance CSV: one per profile with its fee status."""
    stage_id = str(fee_stage['id']) if fee_stage else None
    status_by_user = {
        key_of(p, 'user_id'): p.get('status')
        for p in progress
        if stage_id and key_of(p, 'stage_id') == stage_id
    }
    return [
        {
            'name': p.get('full_name') or '',
            'email': p.get('email') or '',
            'batch_number': p.get('batch_number') or '',
            'status': status_by_user.get(str(p['id'])) or 'not_started',
        }
        for p in profiles
    ]


FEE_SEGMENTS = ('completed', 'in_progress', 'pending')


def fee_drill_down(fee_stage: Row | None, profiles: list[Row], progress: list[Row], segment: str) -> list[Row]:
    """
    Profiles behind one slice of the fee chart.

    `pending` means no fee progress row at all, matching the chart's
    "not yet started" slice.
    """
    if segment not in FEE_SEGMENTS:
        raise ValueError(f'Unknown fee segment: {segment}')
    stage_id = str(fee_stage['id']) if fee_stage else None
    fee_rows = {
        key_of(p, 'user_id'): p
        for p in progress
        if stage_id and key_of(p, 'stage_id') == stage_id
    }

    records = []
    for profile in profiles:
        row = fee_rows.get(str(profile['id']))
        if segment == 'pending':
            if row is not None:
                continue
        elif row is None or row.get('status') != segment:
            continue
        records.append({
            'id': str(profile['id']),
            'name': profile.get('full_name') or 'Unknown',
            'email': profile.get('email') or '-',
            'batch': profile.get('batch_number') or '-',
            'status': row.get('status') if row else 'not_started',
            'date': (row or {}).get('completed_at') or (row or {}).get('started_at'),
        })
    return records
