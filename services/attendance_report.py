"""
Attendance Report Service

Per-participant presence over a reporting period plus overall stats.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from .base import Row, ScopeFilter, batches_of, group_rows, percent, round_half_up

logger = logging.getLogger(__name__)

PERIODS = ('daily', 'weekly', 'monthly', 'custom')


# ============================================================================
# Data Transfer Objects (DTOs)
# ============================================================================

@dataclass
class AttendanceSummary:
    """One participant's attendance over the period."""
    user_id: str
    full_name: str
    batch_number: str | None
    unique_id: str | None
    totalDays: int
    presentDays: int
    absentDays: int
    attendanceRate: int
    sessionAttendance: int
    rateBand: str


@dataclass
class AttendanceOverall:
    totalParticipants: int
    avgAttendance: int
    totalSessions: int


@dataclass
class AttendanceReport:
    period: str
    start_date: date
    end_date: date
    summary: list[AttendanceSummary]
    overall: AttendanceOverall
    batches: list[str] = field(default_factory=list)

    @property
    def period_label(self) -> str:
        """Filename fragment: the day for daily reports, otherwise the range."""
        if self.period == 'daily':
            return self.start_date.isoformat()
        return f'{self.start_date.isoformat()}_to_{self.end_date.isoformat()}'


# ============================================================================
# Period handling
# ============================================================================

def period_range(
    period: str,
    anchor: date,
    custom_start: date | None = None,
    custom_end: date | None = None,
) -> tuple[date, date]:
    """
    Resolve a reporting period to an inclusive (start, end) date pair.

    weekly runs Monday to Sunday around the anchor; monthly covers the
    anchor's calendar month; custom uses the supplied bounds, each
    defaulting to the anchor.
    """
    if period == 'daily':
        return anchor, anchor
    if period == 'weekly':
        start = anchor - timedelta(days=anchor.weekday())
        return start, start + timedelta(days=6)
    if period == 'monthly':
        last_day = calendar.monthrange(anchor.year, anchor.month)[1]
        return anchor.replace(day=1), anchor.replace(day=last_day)
    if period == 'custom':
        return custom_start or anchor, custom_end or anchor
    raise ValueError(f'Unknown period: {period}')


def days_in_range(start: date, end: date) -> int:
    """Inclusive day count; 0 for an inverted range."""
    if end < start:
        return 0
    return (end - start).days + 1


def rate_band(rate: int) -> str:
    if rate >= 90:
        return 'good'
    if rate >= 70:
        return 'fair'
    return 'low'


# ============================================================================
# Aggregation
# ============================================================================

def summarize_participant(profile: Row, attendance: list[Row], total_days: int) -> AttendanceSummary:
    """
    Attendance for one participant.

    Present days are distinct dates among daily check-ins; session rows are
    counted separately and never add to presence.
    """
    daily_dates = {str(a['date']) for a in attendance if a.get('attendance_type') == 'daily'}
    sessions = sum(1 for a in attendance if a.get('attendance_type') == 'session')
    present = len(daily_dates)
    rate = percent(present, total_days)

    return AttendanceSummary(
        user_id=str(profile['id']),
        full_name=profile.get('full_name') or 'Unknown',
        batch_number=profile.get('batch_number'),
        unique_id=profile.get('unique_id'),
        totalDays=total_days,
        presentDays=present,
        absentDays=max(total_days - present, 0),
        attendanceRate=rate,
        sessionAttendance=sessions,
        rateBand=rate_band(rate),
    )


def overall_stats(summary: list[AttendanceSummary]) -> AttendanceOverall:
    if not summary:
        return AttendanceOverall(totalParticipants=0, avgAttendance=0, totalSessions=0)
    return AttendanceOverall(
        totalParticipants=len(summary),
        avgAttendance=round_half_up(sum(s.attendanceRate for s in summary) / len(summary)),
        totalSessions=sum(s.sessionAttendance for s in summary),
    )


def build_attendance_report(
    profiles: list[Row],
    attendance: list[Row],
    *,
    period: str,
    start_date: date,
    end_date: date,
    scope: ScopeFilter | None = None,
) -> AttendanceReport:
    """
    Build the attendance report.

    Args:
        profiles: profile rows (id, full_name, batch_number, unique_id, assigned_coach_id)
        attendance: attendance rows already limited to [start_date, end_date]
        period: one of PERIODS, used for labelling
        start_date / end_date: inclusive bounds
        scope: coach and batch filter

    Returns:
        AttendanceReport
    """
    scope = scope or ScopeFilter()
    batches = batches_of(ScopeFilter(coach_id=scope.coach_id).apply(profiles))
    visible = scope.apply(profiles)

    total_days = days_in_range(start_date, end_date)
    by_user = group_rows(attendance, 'user_id')

    summary = [
        summarize_participant(profile, by_user.get(str(profile['id']), []), total_days)
        for profile in visible
    ]
    logger.debug(f'Attendance report {period} {start_date}..{end_date}: {len(summary)} participants')

    return AttendanceReport(
        period=period,
        start_date=start_date,
        end_date=end_date,
        summary=summary,
        overall=overall_stats(summary),
        batches=batches,
    )


EXPORT_COLUMNS = [
    'full_name',
    'unique_id',
    'batch_number',
    'presentDays',
    'absentDays',
    'totalDays',
    'attendanceRate',
    'sessionAttendance',
]
