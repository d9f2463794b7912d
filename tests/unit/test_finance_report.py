"""
Unit Tests for the finance (fee stage) report.
"""
import pytest

from services.finance_report import build_finance_report, export_rows, fee_drill_down, fee_stats

FEE_STAGE = {'id': 'fee', 'name': 'Fees Paid', 'stage_order': 2}


def _profile(pid, batch, name=None):
    return {'id': pid, 'full_name': name or pid.upper(), 'email': f'{pid}@example.com', 'batch_number': batch}


def _progress(user_id, status, stage_id='fee'):
    return {'user_id': user_id, 'stage_id': stage_id, 'status': status, 'started_at': None, 'completed_at': None}


PROFILES = [_profile('a', 'B1'), _profile('b', 'B1'), _profile('c', 'B2'), _profile('d', None)]
PROGRESS = [
    _progress('a', 'completed'),
    _progress('b', 'in_progress'),
    _progress('c', 'completed'),
    _progress('d', 'completed', stage_id='other'),
]


class TestFeeStats:

    def test_overall_counts(self):
        report = build_finance_report(FEE_STAGE, PROFILES, PROGRESS)

        assert report.stats.totalParticipants == 4
        assert report.stats.feesPaid == 2
        assert report.stats.inProgress == 1
        assert report.stats.pending == 1
        assert report.stats.completionRate == 50

    def test_batch_counts_only_that_batch(self):
        """A completed row owned by someone outside the batch must not count."""
        report = build_finance_report(FEE_STAGE, PROFILES, PROGRESS)
        by_batch = {b.batch: b for b in report.batches}

        assert set(by_batch) == {'B1', 'B2'}
        assert by_batch['B1'].total == 2
        assert by_batch['B1'].completed == 1
        assert by_batch['B1'].inProgress == 1
        assert by_batch['B1'].completionRate == 50
        assert by_batch['B2'].completed == 1
        assert by_batch['B2'].completionRate == 100

    def test_no_fee_stage_counts_everyone_pending(self):
        report = build_finance_report(None, PROFILES, PROGRESS)
        assert report.stage_id is None
        assert report.stats.feesPaid == 0
        assert report.stats.pending == 4

    def test_empty_population(self):
        stats = fee_stats([], [])
        assert stats.completionRate == 0
        assert stats.pending == 0


class TestFinanceExport:

    def test_rows_default_to_not_started(self):
        rows = export_rows(FEE_STAGE, PROFILES, PROGRESS)
        by_name = {r['name']: r for r in rows}

        assert by_name['A']['status'] == 'completed'
        assert by_name['D']['status'] == 'not_started'
        assert by_name['D']['batch_number'] == ''


class TestFeeDrillDown:

    def test_completed_segment(self):
        records = fee_drill_down(FEE_STAGE, PROFILES, PROGRESS, 'completed')
        assert [r['id'] for r in records] == ['a', 'c']

    def test_pending_means_no_fee_row(self):
        records = fee_drill_down(FEE_STAGE, PROFILES, PROGRESS, 'pending')
        assert [r['id'] for r in records] == ['d']
        assert records[0]['status'] == 'not_started'
        assert records[0]['batch'] == '-'

    def test_unknown_segment(self):
        with pytest.raises(ValueError):
            fee_drill_down(FEE_STAGE, PROFILES, PROGRESS, 'overdue')
