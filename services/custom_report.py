"""
Custom Report Service

Ad-hoc tabular reports over one data source at a time, with optional
status, batch and date filters and a selectable set of columns.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .base import Row, as_date, key_of

DATA_SOURCES = (
    'profiles',
    'task_submissions',
    'documents',
    'trades',
    'attendance',
    'participant_progress',
    'ecommerce_setups',
)


@dataclass(frozen=True)
class FieldOption:
    key: str
    label: str
    default: bool = True


DATA_SOURCE_FIELDS: dict[str, list[FieldOption]] = {
    'profiles': [
        FieldOption('full_name', 'Name'),
        FieldOption('email', 'Email'),
        FieldOption('batch_number', 'Batch'),
        FieldOption('phone', 'Phone', False),
        FieldOption('created_at', 'Joined Date', False),
    ],
    'task_submissions': [
        FieldOption('user_name', 'Participant'),
        FieldOption('task_title', 'Task'),
        FieldOption('status', 'Status'),
        FieldOption('submitted_at', 'Submitted'),
        FieldOption('verified_at', 'Verified', False),
    ],
    'documents': [
        FieldOption('user_name', 'Participant'),
        FieldOption('document_type', 'Type'),
        FieldOption('document_name', 'Name'),
        FieldOption('status', 'Status'),
        FieldOption('submitted_at', 'Submitted', False),
    ],
    'trades': [
        FieldOption('user_name', 'Participant'),
        FieldOption('trade_type', 'Type'),
        FieldOption('product_service', 'Product/Service'),
        FieldOption('amount', 'Amount'),
        FieldOption('country', 'Country'),
        FieldOption('status', 'Status'),
        FieldOption('trade_date', 'Date', False),
    ],
    'attendance': [
        FieldOption('user_name', 'Participant'),
        FieldOption('date', 'Date'),
        FieldOption('attendance_type', 'Type'),
        FieldOption('session_name', 'Session', False),
        FieldOption('check_in_time', 'Check-in', False),
    ],
    'participant_progress': [
        FieldOption('user_name', 'Participant'),
        FieldOption('stage_name', 'Stage'),
        FieldOption('status', 'Status'),
        FieldOption('started_at', 'Started', False),
        FieldOption('completed_at', 'Completed', False),
    ],
    'ecommerce_setups': [
        FieldOption('user_name', 'Participant'),
        FieldOption('store_name', 'Store'),
        FieldOption('platform', 'Platform'),
        FieldOption('status', 'Status'),
        FieldOption('created_at', 'Created', False),
    ],
}

# Column each source is date-filtered on. Profiles are only batch filtered.
DATE_FIELDS: dict[str, str | None] = {
    'profiles': None,
    'task_submissions': 'submitted_at',
    'documents': 'submitted_at',
    'trades': 'trade_date',
    'attendance': 'date',
    'participant_progress': 'completed_at',
    'ecommerce_setups': 'created_at',
}

# Sources without a status column ignore the status filter
UNFILTERED_STATUS = {'profiles', 'attendance'}


@dataclass
class CustomReportFilters:
    status: str = 'all'
    batch: str = 'all'
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class CustomReport:
    source: str
    columns: list[str]
    labels: dict[str, str]
    rows: list[Row] = field(default_factory=list)
    statusChart: list[dict] = field(default_factory=list)

    @property
    def export_name(self) -> str:
        return f'custom_report_{self.source}'


def default_fields(source: str) -> list[str]:
    return [f.key for f in DATA_SOURCE_FIELDS[source] if f.default]


def field_labels(source: str) -> dict[str, str]:
    return {f.key: f.label for f in DATA_SOURCE_FIELDS[source]}


def _in_range(value, start: date | None, end: date | None) -> bool:
    if start is None and end is None:
        return True
    d = as_date(value)
    if d is None:
        return False
    if start and d < start:
        return False
    if end and d > end:
        return False
    return True


def filter_source_rows(source: str, rows: list[Row], profiles_by_id: dict[str, Row], filters: CustomReportFilters) -> list[Row]:
    date_field = DATE_FIELDS[source]
    result = []
    for row in rows:
        if source == 'profiles':
            owner = row
        else:
            owner = profiles_by_id.get(key_of(row, 'user_id'), {})
        if filters.batch != 'all' and owner.get('batch_number') != filters.batch:
            continue
        if source not in UNFILTERED_STATUS and filters.status != 'all' and row.get('status') != filters.status:
            continue
        if date_field and not _in_range(row.get(date_field), filters.start_date, filters.end_date):
            continue
        result.append(row)
    return result


def enrich_rows(
    source: str,
    rows: list[Row],
    profiles_by_id: dict[str, Row],
    *,
    task_titles: dict[str, str] | None = None,
    stage_names: dict[str, str] | None = None,
) -> list[Row]:
    """Attach user_name, task_title and stage_name lookups; missing ones read 'Unknown'."""
    if source == 'profiles':
        return [dict(row) for row in rows]

    enriched = []
    for row in rows:
        item = dict(row)
        item['user_name'] = profiles_by_id.get(key_of(row, 'user_id'), {}).get('full_name') or 'Unknown'
        if source == 'task_submissions':
            item['task_title'] = (task_titles or {}).get(key_of(row, 'task_id')) or 'Unknown'
        elif source == 'participant_progress':
            item['stage_name'] = (stage_names or {}).get(key_of(row, 'stage_id')) or 'Unknown'
        enriched.append(item)
    return enriched


def status_chart(rows: list[Row]) -> list[dict]:
    """Row counts per status, 'unknown' for rows without one, in first-seen order."""
    counts: dict[str, int] = {}
    for row in rows:
        status = row.get('status') or 'unknown'
        counts[status] = counts.get(status, 0) + 1
    return [{'name': name, 'value': value} for name, value in counts.items()]


def build_custom_report(
    source: str,
    rows: list[Row],
    profiles: list[Row],
    *,
    filters: CustomReportFilters | None = None,
    fields: list[str] | None = None,
    task_titles: dict[str, str] | None = None,
    stage_names: dict[str, str] | None = None,
) -> CustomReport:
    """
    Build a custom report.

    Args:
        source: one of DATA_SOURCES
        rows: the source table's rows, already role scoped
        profiles: profile rows used for names and batch filtering
        filters: status / batch / date range
        fields: selected column keys; defaults to the source's default set.
            Unknown keys are dropped.

    Raises:
        ValueError: for an unknown source
    """
    if source not in DATA_SOURCE_FIELDS:
        raise ValueError(f'Unknown data source: {source}')

    filters = filters or CustomReportFilters()
    labels = field_labels(source)
    columns = [key for key in (fields or default_fields(source)) if key in labels]
    if not columns:
        columns = default_fields(source)

    profiles_by_id = {str(p['id']): p for p in profiles}
    matched = filter_source_rows(source, rows, profiles_by_id, filters)
    enriched = enrich_rows(source, matched, profiles_by_id, task_titles=task_titles, stage_names=stage_names)

    projected = [{key: row.get(key) for key in columns} for row in enriched]
    chart = status_chart(enriched) if 'status' in labels else []

    return CustomReport(
        source=source,
        columns=columns,
        labels={key: labels[key] for key in columns},
        rows=projected,
        statusChart=chart,
    )
