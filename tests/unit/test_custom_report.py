"""
Unit Tests for the custom report builder.
"""
from datetime import date

import pytest

from services.custom_report import CustomReportFilters, build_custom_report, default_fields

PROFILES = [
    {'id': 'a', 'full_name': 'Asha', 'email': 'a@example.com', 'batch_number': 'B1', 'phone': '1'},
    {'id': 'b', 'full_name': 'Ravi', 'email': 'b@example.com', 'batch_number': 'B2', 'phone': '2'},
]
SUBMISSIONS = [
    {'user_id': 'a', 'task_id': 'k1', 'status': 'verified', 'submitted_at': '2024-03-01T09:00:00Z', 'verified_at': None},
    {'user_id': 'b', 'task_id': 'k2', 'status': 'submitted', 'submitted_at': '2024-03-10T09:00:00Z', 'verified_at': None},
    {'user_id': 'z', 'task_id': 'k9', 'status': None, 'submitted_at': None, 'verified_at': None},
]


class TestCustomReport:

    def test_default_columns_and_lookups(self):
        report = build_custom_report('task_submissions', SUBMISSIONS, PROFILES, task_titles={'k1': 'Register IEC'})

        assert report.columns == default_fields('task_submissions')
        assert report.rows[0]['user_name'] == 'Asha'
        assert report.rows[0]['task_title'] == 'Register IEC'
        assert report.rows[1]['task_title'] == 'Unknown'
        assert report.rows[2]['user_name'] == 'Unknown'

    def test_status_chart_counts_missing_as_unknown(self):
        report = build_custom_report('task_submissions', SUBMISSIONS, PROFILES)
        assert report.statusChart == [
            {'name': 'verified', 'value': 1},
            {'name': 'submitted', 'value': 1},
            {'name': 'unknown', 'value': 1},
        ]

    def test_batch_status_and_date_filters(self):
        filters = CustomReportFilters(status='all', batch='B2', start_date=date(2024, 3, 5), end_date=date(2024, 3, 31))
        report = build_custom_report('task_submissions', SUBMISSIONS, PROFILES, filters=filters)

        assert [r['user_name'] for r in report.rows] == ['Ravi']

    def test_date_filter_drops_rows_without_date(self):
        filters = CustomReportFilters(start_date=date(2024, 1, 1))
        report = build_custom_report('task_submissions', SUBMISSIONS, PROFILES, filters=filters)
        assert len(report.rows) == 2

    def test_profiles_ignore_status_filter(self):
        report = build_custom_report(
            'profiles', PROFILES, PROFILES,
            filters=CustomReportFilters(status='approved'),
            fields=['full_name', 'phone', 'bogus'],
        )
        assert report.columns == ['full_name', 'phone']
        assert report.labels == {'full_name': 'Name', 'phone': 'Phone'}
        assert len(report.rows) == 2
        assert report.statusChart == []

    def test_export_name(self):
        assert build_custom_report('trades', [], PROFILES).export_name == 'custom_report_trades'

    def test_unknown_source(self):
        with pytest.raises(ValueError):
            build_custom_report('payments', [], PROFILES)
