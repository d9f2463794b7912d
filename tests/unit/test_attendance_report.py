"""
Unit Tests for the attendance report aggregation.
"""
from datetime import date

import pytest

from services.attendance_report import (
    build_attendance_report,
    days_in_range,
    period_range,
    rate_band,
    summarize_participant,
)
from services.base import ScopeFilter


def _profile(pid, batch='B1', coach=None, name=None):
    return {
        'id': pid,
        'full_name': name or f'User {pid}',
        'batch_number': batch,
        'unique_id': f'U-{pid}',
        'assigned_coach_id': coach,
    }


def _daily(user_id, day):
    return {'user_id': user_id, 'attendance_type': 'daily', 'date': day}


class TestPeriodRange:

    def test_daily_is_single_day(self):
        assert period_range('daily', date(2024, 3, 13)) == (date(2024, 3, 13), date(2024, 3, 13))

    def test_weekly_runs_monday_to_sunday(self):
        # 2024-03-13 is a Wednesday
        assert period_range('weekly', date(2024, 3, 13)) == (date(2024, 3, 11), date(2024, 3, 17))

    def test_monthly_covers_calendar_month(self):
        assert period_range('monthly', date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_custom_defaults_to_anchor(self):
        anchor = date(2024, 3, 13)
        assert period_range('custom', anchor, custom_start=date(2024, 3, 1)) == (date(2024, 3, 1), anchor)

    def test_unknown_period_raises(self):
        with pytest.raises(ValueError):
            period_range('yearly', date(2024, 3, 13))


class TestAttendanceRate:

    def test_zero_days_gives_zero_rate(self):
        """An inverted range has no days; the rate must be 0, not a division error."""
        total = days_in_range(date(2024, 3, 10), date(2024, 3, 1))
        summary = summarize_participant(_profile('a'), [_daily('a', '2024-03-05')], total)

        assert total == 0
        assert summary.attendanceRate == 0
        assert summary.absentDays == 0

    def test_present_days_are_distinct_daily_dates(self):
        rows = [
            _daily('a', '2024-03-01'),
            _daily('a', '2024-03-01'),
            _daily('a', '2024-03-02'),
            {'user_id': 'a', 'attendance_type': 'session', 'date': '2024-03-03'},
        ]
        summary = summarize_participant(_profile('a'), rows, 4)

        assert summary.presentDays == 2
        assert summary.absentDays == 2
        assert summary.attendanceRate == 50
        assert summary.sessionAttendance == 1

    def test_rate_rounds_half_up(self):
        rows = [_daily('a', f'2024-03-0{d}') for d in (1, 2, 3, 4, 5, 6, 7)]
        summary = summarize_participant(_profile('a'), rows, 8)
        # 7 / 8 = 87.5%
        assert summary.attendanceRate == 88

    @pytest.mark.parametrize('rate,band', [(100, 'good'), (90, 'good'), (89, 'fair'), (70, 'fair'), (69, 'low')])
    def test_rate_band(self, rate, band):
        assert rate_band(rate) == band


class TestBuildAttendanceReport:

    def test_batch_filter_limits_summary(self):
        profiles = [_profile('a', 'B1'), _profile('b', 'B2'), _profile('c', 'B1')]
        attendance = [_daily('a', date(2024, 3, 1)), _daily('b', date(2024, 3, 1))]

        report = build_attendance_report(
            profiles,
            attendance,
            period='daily',
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 1),
            scope=ScopeFilter(batch_number='B1'),
        )

        assert [s.user_id for s in report.summary] == ['a', 'c']
        assert report.overall.totalParticipants == 2
        assert report.overall.avgAttendance == 50
        assert report.batches == ['B1', 'B2']

    def test_coach_scope_restricts_profiles_and_batches(self):
        profiles = [_profile('a', 'B1', coach='k1'), _profile('b', 'B2', coach='k2')]

        report = build_attendance_report(
            profiles,
            [],
            period='weekly',
            start_date=date(2024, 3, 11),
            end_date=date(2024, 3, 17),
            scope=ScopeFilter(coach_id='k1'),
        )

        assert [s.user_id for s in report.summary] == ['a']
        assert report.batches == ['B1']
        assert report.summary[0].totalDays == 7

    def test_empty_profiles(self):
        report = build_attendance_report(
            [], [], period='daily', start_date=date(2024, 3, 1), end_date=date(2024, 3, 1),
        )
        assert report.summary == []
        assert report.overall.avgAttendance == 0

    def test_period_label(self):
        report = build_attendance_report(
            [], [], period='monthly', start_date=date(2024, 3, 1), end_date=date(2024, 3, 31),
        )
        assert report.period_label == '2024-03-01_to_2024-03-31'
