"""
Base helpers for report aggregation services.

Every report in this package is a pure function of already-fetched rows
(plain dicts as returned by QuerySet.values()) and filter parameters.
Nothing here touches the database, so reports can be unit tested with
literal rows.
"""
from __future__ import annotations

import math
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from typing import Any

Row = dict[str, Any]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, the way the web client shows percentages."""
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """Whole-number percentage; 0 when the denominator is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def ratio(part: float, whole: float) -> float:
    """Plain division that yields 0.0 for an empty denominator."""
    if not whole:
        return 0.0
    return part / whole


def key_of(row: Row, field: str) -> str | None:
    """Row value as a string key so UUIDs and strings compare equal."""
    value = row.get(field)
    return None if value is None else str(value)


def group_rows(rows: Iterable[Row], field: str) -> dict[str | None, list[Row]]:
    """Group rows by one field, keyed by its string form."""
    grouped: dict[str | None, list[Row]] = defaultdict(list)
    for row in rows:
        grouped[key_of(row, field)].append(row)
    return grouped


def count_by(rows: Iterable[Row], field: str, keys: Iterable[str]) -> dict[str, int]:
    """Count rows per value of `field`, reporting every key in `keys` even when 0."""
    counts = Counter(row.get(field) for row in rows)
    return {key: counts.get(key, 0) for key in keys}


def sum_amount(rows: Iterable[Row], field: str = 'amount') -> float:
    """Sum a numeric column, treating missing or malformed values as 0."""
    total = 0.0
    for row in rows:
        try:
            total += float(row.get(field) or 0)
        except (TypeError, ValueError):
            continue
    return total


def to_dict(obj: Any) -> Any:
    """Convert DTO dataclasses (and lists of them) into JSON-ready dicts."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, list):
        return [to_dict(item) for item in obj]
    return obj


@dataclass
class ScopeFilter:
    """
    Role scoping applied before aggregation.

    coach_id: when set, only profiles assigned to this coach are counted
    batch_number: when set (and not 'all'), only profiles in this batch
    """
    coach_id: str | None = None
    batch_number: str | None = None

    def apply(self, profiles: Iterable[Row]) -> list[Row]:
        result = list(profiles)
        if self.coach_id:
            result = [p for p in result if key_of(p, 'assigned_coach_id') == str(self.coach_id)]
        if self.batch_number and self.batch_number != 'all':
            result = [p for p in result if p.get('batch_number') == self.batch_number]
        return result


def batches_of(profiles: Iterable[Row]) -> list[str]:
    """Sorted distinct non-empty batch labels."""
    return sorted({p['batch_number'] for p in profiles if p.get('batch_number')})


def as_date(value: Any) -> date | None:
    """Coerce a date, datetime or ISO string to a date; None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
