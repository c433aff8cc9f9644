"""
Table occupancy coordinator.

Occupancy must move in lockstep with the order that causes it, so both
operations refuse to run outside an atomic block.
"""

import logging

from django.db import transaction
from django.db.transaction import TransactionManagementError
from django.utils import timezone

from .models import DiningTable

logger = logging.getLogger(__name__)


def _require_atomic():
    if not transaction.get_connection().in_atomic_block:
        raise TransactionManagementError(
            "Table occupancy can only change inside the order's transaction."
        )


def occupy(table_id) -> DiningTable:
    """
    Mark a table occupied.

    Raises DiningTable.DoesNotExist when the table is unknown.
    """
    _require_atomic()
    table = DiningTable.objects.select_for_update().get(pk=table_id)
    if not table.is_occupied:
        table.is_occupied = True
        table.save(update_fields=['is_occupied', 'updated_at'])
    logger.debug("Table %s occupied", table.table_number)
    return table


def release(table_id) -> bool:
    """Mark a table free. Returns False when no such table exists."""
    _require_atomic()
    updated = DiningTable.objects.filter(pk=table_id).update(
        is_occupied=False, updated_at=timezone.now(),
    )
    if updated:
        logger.debug("Table %s released", table_id)
    return bool(updated)
