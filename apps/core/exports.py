"""
CSV export helpers.

Reports hand over a list of row dicts plus the column keys to write; the
header row uses the localized label for each key.
"""
import csv
import io
from datetime import date

from django.http import HttpResponse

from .exceptions import ValidationError

# Column labels per export language. hi and mr share Devanagari labels
# where the terms are the same.
COLUMN_LABELS: dict[str, dict[str, str]] = {
    'en': {
        'full_name': 'Participant',
        'name': 'Name',
        'email': 'Email',
        'unique_id': 'Unique ID',
        'batch_number': 'Batch',
        'presentDays': 'Days Present',
        'absentDays': 'Days Absent',
        'totalDays': 'Total Days',
        'attendanceRate': 'Attendance Rate (%)',
        'sessionAttendance': 'Sessions Attended',
        'status': 'Status',
        'platform': 'Platform',
        'store_name': 'Store Name',
        'task_title': 'Task',
        'stage_name': 'Stage',
        'document_type': 'Document Type',
        'trade_type': 'Trade Type',
        'amount': 'Amount',
        'country': 'Country',
        'date': 'Date',
        'created_at': 'Created',
    },
    'hi': {
        'full_name': 'प्रतिभागी',
        'name': 'नाम',
        'email': 'ईमेल',
        'unique_id': 'यूनिक आईडी',
        'batch_number': 'बैच',
        'presentDays': 'उपस्थित दिन',
        'absentDays': 'अनुपस्थित दिन',
        'totalDays': 'कुल दिन',
        'attendanceRate': 'उपस्थिति दर (%)',
        'sessionAttendance': 'सत्र में उपस्थिति',
        'status': 'स्थिति',
        'platform': 'प्लेटफ़ॉर्म',
        'store_name': 'स्टोर का नाम',
        'task_title': 'कार्य',
        'stage_name': 'चरण',
        'document_type': 'दस्तावेज़ प्रकार',
        'trade_type': 'व्यापार प्रकार',
        'amount': 'राशि',
        'country': 'देश',
        'date': 'तारीख',
        'created_at': 'बनाया गया',
    },
    'mr': {
        'full_name': 'सहभागी',
        'name': 'नाव',
        'email': 'ईमेल',
        'unique_id': 'युनिक आयडी',
        'batch_number': 'बॅच',
        'presentDays': 'उपस्थित दिवस',
        'absentDays': 'अनुपस्थित दिवस',
        'totalDays': 'एकूण दिवस',
        'attendanceRate': 'उपस्थिती दर (%)',
        'sessionAttendance': 'सत्रांना उपस्थिती',
        'status': 'स्थिती',
        'platform': 'प्लॅटफॉर्म',
        'store_name': 'स्टोअरचे नाव',
        'task_title': 'कार्य',
        'stage_name': 'टप्पा',
        'document_type': 'दस्तऐवज प्रकार',
        'trade_type': 'व्यापार प्रकार',
        'amount': 'रक्कम',
        'country': 'देश',
        'date': 'तारीख',
        'created_at': 'तयार केले',
    },
}


def column_label(key: str, language: str = 'en') -> str:
    """Localized header for a column key, falling back to English, then the key."""
    labels = COLUMN_LABELS.get(language) or COLUMN_LABELS['en']
    return labels.get(key) or COLUMN_LABELS['en'].get(key, key)


def build_csv(
    rows: list[dict],
    columns: list[str],
    language: str = 'en',
    labels: dict[str, str] | None = None,
) -> str:
    """
    Render rows as CSV text.

    Values containing a comma, quote or newline are quoted with inner quotes
    doubled. None is written as an empty field. Lines end with a bare \\n.

    Args:
        rows: Row dicts; keys not in `columns` are ignored
        columns: Column keys in output order
        language: Export language for the header row
        labels: Explicit header labels that take precedence over the catalog

    Returns:
        CSV text, or an empty string when there are no rows
    """
    if not rows:
        return ''

    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n', quoting=csv.QUOTE_MINIMAL)
    labels = labels or {}
    writer.writerow([labels.get(key) or column_label(key, language) for key in columns])
    for row in rows:
        writer.writerow(['' if row.get(key) is None else row.get(key) for key in columns])

    # Drop the trailing newline so the last data row ends the file
    return output.getvalue().rstrip('\n')


def export_filename(name: str, on: date | None = None) -> str:
    """`{name}_{YYYY-MM-DD}.csv`"""
    return f'{name}_{(on or date.today()).isoformat()}.csv'


def csv_response(
    rows: list[dict],
    columns: list[str],
    name: str,
    language: str = 'en',
    labels: dict[str, str] | None = None,
) -> HttpResponse:
    """
    Build a CSV download response.

    Raises:
        ValidationError: when there is nothing to export
    """
    if not rows:
        raise ValidationError('No data to export')

    response = HttpResponse(
        build_csv(rows, columns, language, labels),
        content_type='text/csv; charset=utf-8',
    )
    response['Content-Disposition'] = f'attachment; filename="{export_filename(name)}"'
    return response
