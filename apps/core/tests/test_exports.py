"""
CSV Export Unit Tests
"""
from datetime import date

import pytest

from apps.core.exceptions import ValidationError
from apps.core.exports import build_csv, column_label, csv_response, export_filename


class TestColumnLabel:

    def test_english_label(self):
        assert column_label('attendanceRate') == 'Attendance Rate (%)'

    def test_localized_label(self):
        assert column_label('batch_number', 'hi') == 'बैच'
        assert column_label('batch_number', 'mr') == 'बॅच'

    def test_unknown_language_falls_back_to_english(self):
        assert column_label('email', 'fr') == 'Email'

    def test_unknown_key_is_returned_as_is(self):
        assert column_label('mystery_column', 'hi') == 'mystery_column'


class TestBuildCsv:

    def test_header_then_rows_without_trailing_newline(self):
        rows = [
            {'full_name': 'Asha', 'batch_number': 'B1'},
            {'full_name': 'Ravi', 'batch_number': 'B2'},
        ]
        text = build_csv(rows, ['full_name', 'batch_number'])
        assert text == 'Participant,Batch\nAsha,B1\nRavi,B2'

    def test_values_with_commas_and_quotes_are_quoted(self):
        rows = [{'name': 'Rao, "Sr"', 'email': 'a@b.c'}]
        text = build_csv(rows, ['name', 'email'])
        assert text.splitlines()[1] == '"Rao, ""Sr""",a@b.c'

    def test_none_written_as_empty_field(self):
        text = build_csv([{'name': 'Asha', 'email': None}], ['name', 'email'])
        assert text.splitlines()[1] == 'Asha,'

    def test_extra_keys_are_ignored(self):
        text = build_csv([{'name': 'Asha', 'secret': 'x'}], ['name'])
        assert 'x' not in text

    def test_explicit_labels_win(self):
        text = build_csv([{'name': 'Asha'}], ['name'], 'hi', labels={'name': 'Full Name'})
        assert text.splitlines()[0] == 'Full Name'

    def test_localized_header(self):
        text = build_csv([{'name': 'Asha'}], ['name'], 'mr')
        assert text.splitlines()[0] == 'नाव'

    def test_no_rows_gives_empty_string(self):
        assert build_csv([], ['name']) == ''


class TestCsvResponse:

    def test_filename_uses_date(self):
        assert export_filename('attendance_report', date(2024, 3, 5)) == 'attendance_report_2024-03-05.csv'

    def test_response_headers(self):
        response = csv_response([{'name': 'Asha'}], ['name'], 'finance_report')
        assert response['Content-Type'].startswith('text/csv')
        assert 'attachment; filename="finance_report_' in response['Content-Disposition']
        assert response.content.decode('utf-8') == 'Name\nAsha'

    def test_empty_rows_raise(self):
        with pytest.raises(ValidationError) as exc_info:
            csv_response([], ['name'], 'finance_report')
        assert exc_info.value.status_code == 400
