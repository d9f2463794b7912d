"""
Sequential bulk writes.

Bulk actions write one row at a time with no surrounding transaction. The
first failure stops the loop; rows already written stay written and only
the count of processed items is reported back.
"""
import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from django.db import DatabaseError

from .exceptions import APIException, BulkOperationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def run_sequentially(items: Iterable[T], action: Callable[[T], object], *, label: str) -> int:
    """
    Apply `action` to each item in order.

    Args:
        items: Work items, e.g. record ids
        action: Callable performing one write
        label: Short description used in logs and the error message

    Returns:
        Number of items processed

    Raises:
        BulkOperationError: on the first database or API failure
    """
    items = list(items)
    processed = 0
    for item in items:
        try:
            action(item)
        except (DatabaseError, APIException) as e:
            logger.error(f'Bulk {label} stopped after {processed}/{len(items)}: {e}')
            raise BulkOperationError(f'Failed to {label}', processed=processed, total=len(items)) from e
        processed += 1

    logger.info(f'Bulk {label}: {processed} processed')
    return processed
