"""
Analytics Service

Program-wide analytics, metric drill-downs, the participant dashboard and
side-by-side participant comparison. All functions aggregate rows that the
selectors have already fetched and scoped.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from .base import Row, as_date, count_by, group_rows, key_of, percent, ratio, round_half_up, sum_amount

logger = logging.getLogger(__name__)

TASK_STATUSES = ['not_started', 'in_progress', 'submitted', 'verified', 'rejected']
DOCUMENT_STATUSES = ['pending', 'submitted', 'under_review', 'approved', 'rejected']

DRILL_DOWN_METRICS = ('stage', 'task_status', 'document_status', 'trade_month', 'attendance_week')


# ============================================================================
# Data Transfer Objects (DTOs)
# ============================================================================

@dataclass
class StageProgressPoint:
    stage_id: str
    name: str
    completed: int
    total: int


@dataclass
class StatusCount:
    status: str
    count: int


@dataclass
class TradeMonthPoint:
    month: str
    exports: float
    imports: float


@dataclass
class AttendanceWeekPoint:
    week: str
    count: int


@dataclass
class ProgramAnalytics:
    """Everything the analytics page charts."""
    totalParticipants: int
    activeParticipants: int
    tasksCompleted: int
    totalTasks: int
    documentsApproved: int
    totalDocuments: int
    totalTradeVolume: float
    averageAttendance: float
    stageProgress: list[StageProgressPoint] = field(default_factory=list)
    tasksByStatus: list[StatusCount] = field(default_factory=list)
    documentsByStatus: list[StatusCount] = field(default_factory=list)
    tradesByMonth: list[TradeMonthPoint] = field(default_factory=list)
    attendanceByWeek: list[AttendanceWeekPoint] = field(default_factory=list)


@dataclass
class DrillDownRecord:
    id: str
    userName: str
    email: str
    batch: str
    status: str | None
    extra: str | None = None
    date: str | None = None


@dataclass
class DashboardStats:
    """A participant's own dashboard."""
    completedStages: int
    totalStages: int
    tasksCompleted: int
    totalTasks: int
    documentsApproved: int
    totalDocuments: int
    tradeVolume: float
    attendancePercent: int
    overallProgress: int


@dataclass
class ComparisonRow:
    userId: str
    userName: str
    batchNumber: str | None
    stagesCompleted: int
    totalStages: int
    tasksCompleted: int
    totalTasks: int
    docsApproved: int
    totalDocs: int
    tradesApproved: int
    tradeVolume: float
    overallProgress: int


# ============================================================================
# Helpers
# ============================================================================

def month_label(value: Any) -> str | None:
    """'Jan 25' style label for a trade date."""
    d = as_date(value)
    return d.strftime('%b %y') if d else None


def week_of_month_label(value: Any) -> str | None:
    """'Week N' where N = ceil(day_of_month / 7)."""
    d = as_date(value)
    return f'Week {math.ceil(d.day / 7)}' if d else None


def _only(rows: list[Row], user_ids: set[str]) -> list[Row]:
    return [r for r in rows if key_of(r, 'user_id') in user_ids]


# ============================================================================
# Program analytics
# ============================================================================

def build_program_analytics(
    participants: list[Row],
    stages: list[Row],
    progress: list[Row],
    tasks: list[Row],
    submissions: list[Row],
    documents: list[Row],
    trades: list[Row],
    attendance: list[Row],
    *,
    documents_per_participant: int = 6,
) -> ProgramAnalytics:
    """
    Aggregate program analytics for a set of participants.

    `participants` must already be role scoped; every other row set is
    narrowed to those participants here. `stages` and `tasks` are the
    active catalog rows.
    """
    ids = {str(p['id']) for p in participants}
    progress = _only(progress, ids)
    submissions = _only(submissions, ids)
    documents = _only(documents, ids)
    trades = _only(trades, ids)
    attendance = _only(attendance, ids)

    completed_by_stage = group_rows(
        (p for p in progress if p.get('status') == 'completed'),
        'stage_id',
    )
    stage_progress = [
        StageProgressPoint(
            stage_id=str(stage['id']),
            name=stage['name'],
            completed=len(completed_by_stage.get(str(stage['id']), [])),
            total=len(participants),
        )
        for stage in sorted(stages, key=lambda s: s.get('stage_order') or 0)
    ]

    task_counts = count_by(submissions, 'status', TASK_STATUSES)
    doc_counts = count_by(documents, 'status', DOCUMENT_STATUSES)

    months: dict[tuple[int, int], TradeMonthPoint] = {}
    for trade in trades:
        d = as_date(trade.get('trade_date'))
        if not d:
            continue
        point = months.setdefault((d.year, d.month), TradeMonthPoint(month=month_label(d), exports=0.0, imports=0.0))
        amount = sum_amount([trade])
        if trade.get('trade_type') == 'export':
            point.exports += amount
        else:
            point.imports += amount

    weeks: dict[str, int] = {}
    for row in attendance:
        label = week_of_month_label(row.get('date'))
        if label:
            weeks[label] = weeks.get(label, 0) + 1

    return ProgramAnalytics(
        totalParticipants=len(participants),
        activeParticipants=len({key_of(s, 'user_id') for s in submissions}),
        tasksCompleted=task_counts['verified'],
        totalTasks=len(tasks) * len(participants),
        documentsApproved=doc_counts['approved'],
        totalDocuments=documents_per_participant * len(participants),
        totalTradeVolume=sum_amount(trades),
        averageAttendance=ratio(len(attendance), len(participants)),
        stageProgress=stage_progress,
        tasksByStatus=[StatusCount(status=s, count=task_counts[s]) for s in TASK_STATUSES],
        documentsByStatus=[StatusCount(status=s, count=doc_counts[s]) for s in DOCUMENT_STATUSES],
        tradesByMonth=[months[k] for k in sorted(months)],
        attendanceByWeek=[AttendanceWeekPoint(week=w, count=weeks[w]) for w in sorted(weeks)],
    )


def build_drill_down(
    metric: str,
    key: str,
    participants: list[Row],
    *,
    progress: list[Row] | None = None,
    submissions: list[Row] | None = None,
    documents: list[Row] | None = None,
    trades: list[Row] | None = None,
    attendance: list[Row] | None = None,
    tasks: list[Row] | None = None,
) -> list[DrillDownRecord]:
    """
    List the records behind one chart segment.

    metric/key pairs:
        stage / stage_id
        task_status / status
        document_status / status
        trade_month / 'Mon YY'
        attendance_week / 'Week N'
    """
    profiles = {str(p['id']): p for p in participants}
    task_titles = {str(t['id']): t.get('title') for t in (tasks or [])}

    def record(row: Row, *, extra=None, when=None) -> DrillDownRecord | None:
        profile = profiles.get(key_of(row, 'user_id'))
        if profile is None:
            return None
        when_date = as_date(when)
        return DrillDownRecord(
            id=str(row['id']),
            userName=profile.get('full_name') or 'Unknown',
            email=profile.get('email') or '-',
            batch=profile.get('batch_number') or '-',
            status=row.get('status'),
            extra=extra,
            date=when_date.isoformat() if when_date else None,
        )

    if metric == 'stage':
        rows = [p for p in progress or [] if key_of(p, 'stage_id') == key]
        records = [record(p, when=p.get('completed_at')) for p in rows]
    elif metric == 'task_status':
        rows = [s for s in submissions or [] if s.get('status') == key]
        records = [
            record(s, extra=task_titles.get(key_of(s, 'task_id')) or 'Unknown Task', when=s.get('submitted_at'))
            for s in rows
        ]
    elif metric == 'document_status':
        rows = [d for d in documents or [] if d.get('status') == key]
        records = [record(d, extra=d.get('document_type'), when=d.get('submitted_at')) for d in rows]
    elif metric == 'trade_month':
        rows = [t for t in trades or [] if month_label(t.get('trade_date')) == key]
        records = [
            record(t, extra=f"{t.get('trade_type')}: {t.get('product_service')}", when=t.get('trade_date'))
            for t in rows
        ]
    elif metric == 'attendance_week':
        rows = [a for a in attendance or [] if week_of_month_label(a.get('date')) == key]
        records = [record(a, extra=a.get('attendance_type'), when=a.get('date')) for a in rows]
    else:
        raise ValueError(f'Unknown drill-down metric: {metric}')

    return [r for r in records if r is not None]


# ============================================================================
# Participant dashboard
# ============================================================================

def build_dashboard_stats(
    progress: list[Row],
    submissions: list[Row],
    documents: list[Row],
    trades: list[Row],
    attendance_count: int,
    *,
    total_stages: int = 11,
    total_tasks: int = 32,
    total_documents: int = 6,
    attendance_days: int = 30,
) -> DashboardStats:
    """
    Dashboard numbers for one participant.

    Overall progress weighs stages 40%, tasks 40%, documents 20%.
    Trade volume sums every logged trade whatever its review status.
    """
    completed_stages = sum(1 for p in progress if p.get('status') == 'completed')
    tasks_completed = sum(1 for s in submissions if s.get('status') == 'verified')
    docs_approved = sum(1 for d in documents if d.get('status') == 'approved')
    trade_volume = sum_amount(trades)

    overall = (
        ratio(completed_stages, total_stages) * 0.4
        + ratio(tasks_completed, total_tasks) * 0.4
        + ratio(docs_approved, total_documents) * 0.2
    )

    return DashboardStats(
        completedStages=completed_stages,
        totalStages=total_stages,
        tasksCompleted=tasks_completed,
        totalTasks=total_tasks,
        documentsApproved=docs_approved,
        totalDocuments=total_documents,
        tradeVolume=trade_volume,
        attendancePercent=min(100, percent(attendance_count, attendance_days)),
        overallProgress=round_half_up(overall * 100),
    )


# ============================================================================
# Comparison
# ============================================================================

def build_comparison(
    participants: list[Row],
    progress: list[Row],
    submissions: list[Row],
    documents: list[Row],
    trades: list[Row],
    *,
    total_stages: int,
    total_tasks: int,
) -> list[ComparisonRow]:
    """One row per selected participant, in the order given."""
    progress_by = group_rows(progress, 'user_id')
    subs_by = group_rows(submissions, 'user_id')
    docs_by = group_rows(documents, 'user_id')
    trades_by = group_rows(trades, 'user_id')

    rows = []
    for profile in participants:
        uid = str(profile['id'])
        user_progress = progress_by.get(uid, [])
        user_docs = docs_by.get(uid, [])
        user_trades = trades_by.get(uid, [])
        stages_completed = sum(1 for p in user_progress if p.get('status') == 'completed')

        rows.append(ComparisonRow(
            userId=uid,
            userName=profile.get('full_name') or 'Unknown',
            batchNumber=profile.get('batch_number'),
            stagesCompleted=stages_completed,
            totalStages=total_stages,
            tasksCompleted=sum(1 for s in subs_by.get(uid, []) if s.get('status') == 'verified'),
            totalTasks=total_tasks,
            docsApproved=sum(1 for d in user_docs if d.get('status') == 'approved'),
            totalDocs=len(user_docs),
            tradesApproved=sum(1 for t in user_trades if t.get('status') == 'approved'),
            tradeVolume=sum_amount(user_trades),
            overallProgress=percent(stages_completed, total_stages),
        ))
    return rows
