"""
Order Store

Read side of the orders module: single orders, filtered lists, the audit
trail and the kitchen queue. Every order returned here is fully hydrated
with its table, creator, items (with the product as it reads now) and
payments (with the processing user).
"""

import logging
from contextlib import contextmanager
from typing import List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models import Prefetch
from django.utils import timezone

from .. import module
from ..exceptions import InvalidStatus, OrderNotFound, StorageFailure
from ..models import Order, OrderItem, OrderStatusHistory, Payment

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str):
    """Translate unexpected database errors into StorageFailure."""
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Order storage failure during %s", operation)
        raise StorageFailure(f"Failed to {operation}") from exc


def hydrate(queryset):
    return queryset.select_related('table', 'user').prefetch_related(
        Prefetch(
            'items',
            queryset=OrderItem.objects.select_related('product').order_by('line_number', 'created_at'),
        ),
        Prefetch(
            'payments',
            queryset=Payment.objects.select_related('processed_by').order_by('created_at'),
        ),
    )


def get_order(order_id) -> Order:
    with storage_errors('fetch order'):
        try:
            return hydrate(Order.objects.all()).get(pk=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise OrderNotFound(order_id=str(order_id))


def list_orders(
    status: Optional[str] = None,
    order_type: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[Order], int]:
    """
    Return one page of orders, newest first, and the count of all matches.

    Filters are conjunctive; an empty filter places no constraint.
    """
    if limit is None:
        limit = getattr(settings, 'ORDERS_PAGE_SIZE', module.SETTINGS['page_size'])
    limit = max(0, int(limit))
    offset = max(0, int(offset))

    queryset = Order.objects.all()
    if status:
        queryset = queryset.filter(status=status)
    if order_type:
        queryset = queryset.filter(order_type=order_type)

    with storage_errors('list orders'):
        total = queryset.count()
        orders = list(hydrate(queryset.order_by('-created_at', '-id'))[offset:offset + limit])
    return orders, total


def status_history(order_id) -> List[OrderStatusHistory]:
    """Audit trail of an order, oldest change first."""
    with storage_errors('fetch status history'):
        try:
            exists = Order.objects.filter(pk=order_id).exists()
        except ValidationError:
            exists = False
        if not exists:
            raise OrderNotFound(order_id=str(order_id))
        return list(
            OrderStatusHistory.objects.filter(order_id=order_id)
            .select_related('changed_by')
            .order_by('created_at', 'id')
        )


def kitchen_queue(status: Optional[str] = None) -> List[Order]:
    """
    Today's active orders, oldest first.

    `status` narrows the queue to one active status; None or 'all' keeps them all.
    """
    if status in (None, '', 'all'):
        statuses = Order.ACTIVE_STATUSES
    elif status in Order.ACTIVE_STATUSES:
        statuses = (status,)
    else:
        raise InvalidStatus(f"Kitchen queue has no '{status}' orders")

    with storage_errors('fetch kitchen queue'):
        return list(
            hydrate(Order.objects.filter(
                status__in=statuses,
                created_at__date=timezone.localdate(),
            )).order_by('created_at')
        )
