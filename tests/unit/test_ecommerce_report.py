"""
Unit Tests for the e-commerce setup report.
"""
from services.ecommerce_report import build_ecommerce_report, export_rows

PROFILES = [
    {'id': 'a', 'full_name': 'Asha', 'email': 'a@example.com', 'batch_number': 'B1'},
    {'id': 'b', 'full_name': 'Ravi', 'email': 'b@example.com', 'batch_number': 'B1'},
    {'id': 'c', 'full_name': 'Meera', 'email': 'c@example.com', 'batch_number': 'B2'},
]
SETUPS = [
    {'user_id': 'a', 'platform': 'amazon', 'status': 'completed'},
    {'user_id': 'a', 'platform': 'flipkart', 'status': 'in_progress'},
    {'user_id': 'b', 'platform': None, 'status': 'pending'},
]


class TestECommerceReport:

    def test_stats(self):
        stats = build_ecommerce_report(PROFILES, SETUPS).stats

        assert stats.completed == 1
        assert stats.inProgress == 2
        # only 'c' has no setup at all
        assert stats.pending == 1
        assert stats.total == 3

    def test_platforms_list_every_known_platform(self):
        platforms = {p.platform: p for p in build_ecommerce_report(PROFILES, SETUPS).platforms}

        assert platforms['amazon'].completed == 1
        assert platforms['flipkart'].pending == 1
        assert platforms['other'].total == 1
        assert platforms['shopify'].total == 0

    def test_export_rows_join_owner(self):
        rows = export_rows(PROFILES, SETUPS)
        assert rows[2] == {
            'name': 'Ravi',
            'email': 'b@example.com',
            'batch_number': 'B1',
            'platform': '',
            'status': 'pending',
        }
