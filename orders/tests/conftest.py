"""
Pytest fixtures for Orders module tests.
"""

import pytest
from decimal import Decimal

from django.contrib.auth import get_user_model

from catalog.models import Product
from tables.models import DiningTable
from orders.models import Order, OrderItem, Payment
from orders.services import OrderService


@pytest.fixture
def user(db):
    """Create a test user."""
    return get_user_model().objects.create_user(
        username='waiter',
        password='secret-pass',
        first_name='Test',
        last_name='Waiter',
    )


@pytest.fixture
def cashier(db):
    return get_user_model().objects.create_user(
        username='cashier',
        password='secret-pass',
        first_name='Cash',
        last_name='Ier',
    )


@pytest.fixture
def auth_client(client, user):
    """Return an authenticated client."""
    client.force_login(user)
    return client


@pytest.fixture
def burger(db):
    return Product.objects.create(
        name='Burger',
        description='Beef burger',
        price=Decimal('5.00'),
        preparation_time=12,
    )


@pytest.fixture
def soda(db):
    return Product.objects.create(
        name='Soda',
        price=Decimal('3.00'),
        preparation_time=1,
    )


@pytest.fixture
def sold_out(db):
    return Product.objects.create(
        name='Seasonal Pie',
        price=Decimal('7.50'),
        is_available=False,
    )


@pytest.fixture
def table(db):
    return DiningTable.objects.create(
        table_number='T1',
        seating_capacity=4,
        location='Terrace',
    )


@pytest.fixture
def items(burger, soda):
    """Two burgers and one soda: subtotal 13.00."""
    return [
        {'product_id': burger.pk, 'quantity': 2, 'special_instructions': 'No onions'},
        {'product_id': soda.pk, 'quantity': 1},
    ]


@pytest.fixture
def order(user, table, items):
    """A pending dine-in order created through the engine."""
    order_id = OrderService.create_order(
        user_id=user.pk,
        items=items,
        order_type=Order.TYPE_DINE_IN,
        table_id=table.pk,
        customer_name='Alice',
    )
    return Order.objects.get(pk=order_id)


@pytest.fixture
def takeaway_order(user, items):
    order_id = OrderService.create_order(
        user_id=user.pk,
        items=items,
        order_type=Order.TYPE_TAKEAWAY,
    )
    return Order.objects.get(pk=order_id)


@pytest.fixture
def payment(order, cashier):
    return Payment.objects.create(
        order=order,
        payment_method='card',
        amount=Decimal('14.30'),
        reference_number='AUTH-001',
        status='completed',
        processed_by=cashier,
    )


@pytest.fixture
def order_item(order):
    return order.items.order_by('line_number').first()


@pytest.fixture
def row_counts():
    """Snapshot of the tables the engine writes to."""
    from orders.models import OrderStatusHistory

    def counts():
        return {
            'orders': Order.objects.count(),
            'items': OrderItem.objects.count(),
            'history': OrderStatusHistory.objects.count(),
            'occupied': DiningTable.objects.filter(is_occupied=True).count(),
        }
    return counts
