"""
Order Service

Order lifecycle: priced creation and audited status transitions, each as a
single atomic operation together with its table occupancy side effect.
"""

import logging
import time
import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from catalog.lookup import price_of
from catalog.models import Product
from tables import occupancy
from tables.models import DiningTable

from .. import module, signals
from ..exceptions import (
    DeadlineExceeded,
    DuplicateOrderNumber,
    EmptyOrder,
    InvalidOrderItem,
    InvalidOrderType,
    InvalidStatus,
    InvalidTransition,
    OrderItemNotFound,
    OrderNotFound,
    PriceChanged,
    ProductUnavailable,
    TableNotFound,
    TableRequired,
)
from ..models import Order, OrderItem, OrdersSettings, OrderStatusHistory
from . import order_store

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _check_deadline(deadline: Optional[float]):
    """Abort when the caller's time.monotonic() deadline has passed."""
    if deadline is not None and time.monotonic() >= deadline:
        raise DeadlineExceeded()


def _strict_transitions() -> bool:
    return getattr(settings, 'ORDERS_STRICT_TRANSITIONS', module.SETTINGS['strict_transitions'])


def _clean_items(items) -> List[Dict]:
    if not items:
        raise EmptyOrder()

    lines = []
    for position, item in enumerate(items, start=1):
        product_id = item.get('product_id')
        quantity = item.get('quantity')
        if not product_id:
            raise InvalidOrderItem(f"Item {position} has no product", position=position)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidOrderItem(
                f"Item {position} needs a positive quantity", position=position,
            )
        lines.append({
            'product_id': product_id,
            'quantity': quantity,
            'special_instructions': item.get('special_instructions') or None,
        })
    return lines


def _current_price(product_id) -> Decimal:
    try:
        quote = price_of(product_id, lock=True)
    except (Product.DoesNotExist, ValidationError):
        raise ProductUnavailable(product_id=str(product_id))
    if not quote.is_available:
        raise ProductUnavailable(product_id=str(product_id))
    return quote.unit_price


def _ensure_table(table_id):
    try:
        exists = DiningTable.objects.filter(pk=table_id).exists()
    except ValidationError:
        exists = False
    if not exists:
        raise TableNotFound(table_id=str(table_id))


def _release_table(order: Order):
    """
    Free the order's table without putting the status change at risk.

    Runs in a savepoint so a failure rolls back only the release.
    """
    try:
        with transaction.atomic():
            occupancy.release(order.table_id)
    except DatabaseError:
        logger.warning(
            "Could not release table %s for order %s",
            order.table_id, order.order_number, exc_info=True,
        )


class OrderService:
    """Service for managing the order lifecycle."""

    # ---- Create ----

    @staticmethod
    def create_order(
        user_id,
        items: List[Dict],
        order_type: str = Order.TYPE_DINE_IN,
        table_id=None,
        customer_name: Optional[str] = None,
        notes: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> uuid.UUID:
        """
        Create a priced order with its items.

        Args:
            user_id: Creating user (already authenticated by the caller)
            items: List of dicts with product_id, quantity, special_instructions
            order_type: dine_in, takeaway or delivery
            table_id: Dining table, required for dine_in
            customer_name: Optional customer name
            notes: Optional order notes
            deadline: time.monotonic() value after which the operation aborts

        Returns:
            The new order's id
        """
        lines = _clean_items(items)
        if order_type not in dict(Order.ORDER_TYPE_CHOICES):
            raise InvalidOrderType(f"Invalid order type: {order_type}")
        if order_type == Order.TYPE_DINE_IN and not table_id:
            raise TableRequired()
        _check_deadline(deadline)

        with order_store.storage_errors('create order'):
            with transaction.atomic():
                config = OrdersSettings.get_settings()
                if table_id:
                    _ensure_table(table_id)

                subtotal = Decimal('0.00')
                for line in lines:
                    _check_deadline(deadline)
                    line['unit_price'] = _current_price(line['product_id'])
                    subtotal += line['unit_price'] * line['quantity']

                subtotal = quantize_money(subtotal)
                tax_amount = quantize_money(subtotal * config.tax_rate)
                discount_amount = Decimal('0.00')
                total_amount = subtotal + tax_amount - discount_amount

                order_number = Order.generate_order_number()
                try:
                    with transaction.atomic():
                        order = Order.objects.create(
                            order_number=order_number,
                            table_id=table_id or None,
                            user_id=user_id,
                            customer_name=customer_name or None,
                            order_type=order_type,
                            status=Order.STATUS_PENDING,
                            subtotal=subtotal,
                            tax_amount=tax_amount,
                            discount_amount=discount_amount,
                            total_amount=total_amount,
                            notes=notes or None,
                        )
                except IntegrityError as exc:
                    if not Order.objects.filter(order_number=order_number).exists():
                        raise
                    logger.warning("Order number collision on %s", order_number)
                    raise DuplicateOrderNumber(order_number=order_number) from exc

                for position, line in enumerate(lines, start=1):
                    # The snapshot must match the price the subtotal was built from
                    unit_price = _current_price(line['product_id'])
                    if unit_price != line['unit_price']:
                        raise PriceChanged(product_id=str(line['product_id']))
                    OrderItem.objects.create(
                        order=order,
                        product_id=line['product_id'],
                        quantity=line['quantity'],
                        unit_price=unit_price,
                        special_instructions=line['special_instructions'],
                        line_number=position,
                    )

                if order_type == Order.TYPE_DINE_IN and table_id:
                    occupancy.occupy(table_id)

                _check_deadline(deadline)

        logger.info(
            "Order %s created: %d item(s), total %s",
            order.order_number, len(lines), order.total_amount,
        )
        transaction.on_commit(
            lambda: signals.order_created.send(sender=Order, order=order),
        )
        return order.pk

    # ---- Status ----

    @staticmethod
    def update_status(
        order_id,
        new_status: str,
        user_id,
        notes: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> Order:
        """
        Move an order to `new_status` and record the change.

        Any recognized status is accepted from any state unless
        ORDERS_STRICT_TRANSITIONS is on. Completing or cancelling frees the table.
        """
        if not Order.is_valid_status(new_status):
            raise InvalidStatus(f"Invalid order status: {new_status}")
        _check_deadline(deadline)

        with order_store.storage_errors('update order status'):
            with transaction.atomic():
                try:
                    order = Order.objects.select_for_update().get(pk=order_id)
                except (Order.DoesNotExist, ValidationError):
                    raise OrderNotFound(order_id=str(order_id))

                previous_status = order.status
                if _strict_transitions() and new_status not in Order.allowed_next(previous_status):
                    raise InvalidTransition(
                        f"Cannot change order from {previous_status} to {new_status}",
                    )

                now = timezone.now()
                order.save(update_fields=order.apply_status(new_status, now))

                OrderStatusHistory.objects.create(
                    order=order,
                    previous_status=previous_status,
                    new_status=new_status,
                    changed_by_id=user_id,
                    notes=notes or None,
                    created_at=now,
                )

                if new_status in Order.TERMINAL_STATUSES and order.table_id:
                    _release_table(order)

                _check_deadline(deadline)

        logger.info(
            "Order %s status %s -> %s",
            order.order_number, previous_status, new_status,
        )
        transaction.on_commit(
            lambda: signals.order_status_changed.send(
                sender=Order, order=order,
                previous_status=previous_status, new_status=new_status,
            ),
        )
        return order_store.get_order(order.pk)

    @staticmethod
    def update_item_status(order_id, item_id, status: str) -> OrderItem:
        """Kitchen-facing status change of a single item."""
        if status not in dict(OrderItem.STATUS_CHOICES):
            raise InvalidStatus(f"Invalid item status: {status}")

        with order_store.storage_errors('update item status'):
            with transaction.atomic():
                try:
                    item = OrderItem.objects.select_for_update().get(pk=item_id, order_id=order_id)
                except (OrderItem.DoesNotExist, ValidationError):
                    raise OrderItemNotFound(order_id=str(order_id), item_id=str(item_id))
                item.status = status
                item.save(update_fields=['status', 'updated_at'])

        logger.info("Order item %s status -> %s", item.pk, status)
        return item

    # ---- Read ----

    @staticmethod
    def get_order(order_id) -> Order:
        return order_store.get_order(order_id)

    @staticmethod
    def list_orders(status=None, order_type=None, limit=None, offset=0):
        return order_store.list_orders(
            status=status, order_type=order_type, limit=limit, offset=offset,
        )

    @staticmethod
    def get_status_history(order_id):
        return order_store.status_history(order_id)

    @staticmethod
    def get_kitchen_queue(status=None):
        return order_store.kitchen_queue(status)
