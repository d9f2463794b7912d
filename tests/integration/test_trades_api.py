"""
Integration Tests for the Trades API
"""
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.core.models import Trade
from tests.factories import TradeFactory


def trade_form(**overrides):
    form = {
        'trade_type': 'export',
        'product_service': 'Turmeric',
        'country': 'UAE',
        'amount': '150000.00',
        'trade_date': '2024-03-01',
        'attachment': SimpleUploadedFile('invoice.pdf', b'%PDF', content_type='application/pdf'),
    }
    form.update(overrides)
    return form


@pytest.mark.django_db
class TestLogTrade:

    def test_participant_logs_trade(self, participant_client, participant_profile, mock_upload):
        response = participant_client.post('/api/trades', trade_form(), format='multipart')

        assert response.status_code == 201
        trade = Trade.objects.get(user=participant_profile)
        assert trade.status == 'pending'
        assert trade.currency == 'INR'
        assert trade.amount == Decimal('150000.00')
        assert trade.attachment_url.endswith('trade_receipt.pdf')

    def test_attachment_is_required(self, participant_client, mock_upload):
        form = trade_form()
        form.pop('attachment')

        response = participant_client.post('/api/trades', form, format='multipart')

        assert response.status_code == 400
        assert not Trade.objects.exists()

    def test_staff_cannot_log_trades(self, coach_client, mock_upload):
        response = coach_client.post('/api/trades', trade_form(), format='multipart')
        assert response.status_code == 403

    def test_totals_count_only_approved_volume(self, participant_client, participant_profile):
        TradeFactory(user=participant_profile, status='approved', amount=Decimal('1000.00'))
        TradeFactory(user=participant_profile, trade_type='import', amount=Decimal('500.00'))

        totals = participant_client.get('/api/trades').json()['totals']

        assert totals['total'] == 2
        assert totals['exports'] == 1
        assert totals['imports'] == 1
        assert totals['approved_volume'] == 1000.0


@pytest.mark.django_db
class TestReviewTrade:

    def test_coach_approves_pending_trade(self, coach_client, coach_profile, participant_profile):
        trade = TradeFactory(user=participant_profile)

        response = coach_client.post(f'/api/trades/{trade.id}/review', {'decision': 'approve'}, format='json')

        assert response.status_code == 200
        trade.refresh_from_db()
        assert trade.status == 'approved'
        assert trade.approved_by == coach_profile.id

    def test_decided_trade_cannot_be_reviewed_again(self, admin_client, participant_profile):
        trade = TradeFactory(user=participant_profile, status='rejected')
        response = admin_client.post(f'/api/trades/{trade.id}/review', {'decision': 'approve'}, format='json')
        assert response.status_code == 409
