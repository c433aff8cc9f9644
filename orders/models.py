"""
Orders Module Models

Order tickets for hospitality businesses.
Features:
- Orders with line items priced from the catalog at placement time
- Status workflow (pending -> confirmed -> preparing -> ready -> served -> completed)
- Append-only status history for auditing
- Order types (dine-in, takeaway, delivery)
- Financial tracking (subtotal, tax, discount, total)
- Payments attached to orders (read-only here)
"""

import secrets
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel

from . import module


# =============================================================================
# Settings
# =============================================================================

class OrdersSettings(models.Model):
    """Singleton configuration for the orders module."""

    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=4,
        default=Decimal(module.SETTINGS['tax_rate']),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name=_('Tax Rate'),
    )
    default_order_type = models.CharField(
        max_length=20, default=module.SETTINGS['default_order_type'],
        verbose_name=_('Default Order Type'),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders_settings'
        verbose_name = _('Orders Settings')
        verbose_name_plural = _('Orders Settings')

    def __str__(self):
        return "Orders Settings"

    @classmethod
    def get_settings(cls):
        config, _ = cls.objects.get_or_create(
            pk=1,
            defaults={
                'tax_rate': Decimal(str(getattr(
                    settings, 'ORDERS_TAX_RATE', module.SETTINGS['tax_rate'],
                ))),
            },
        )
        return config


# =============================================================================
# Orders
# =============================================================================

class Order(BaseModel):
    """Restaurant order ticket."""

    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_PREPARING = 'preparing'
    STATUS_READY = 'ready'
    STATUS_SERVED = 'served'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING, _('Pending')),
        (STATUS_CONFIRMED, _('Confirmed')),
        (STATUS_PREPARING, _('Preparing')),
        (STATUS_READY, _('Ready')),
        (STATUS_SERVED, _('Served')),
        (STATUS_COMPLETED, _('Completed')),
        (STATUS_CANCELLED, _('Cancelled')),
    ]

    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_PREPARING, STATUS_READY)

    # Forward path of the workflow; cancelled is reachable from any non-terminal status.
    NEXT_STATUS = {
        STATUS_PENDING: STATUS_CONFIRMED,
        STATUS_CONFIRMED: STATUS_PREPARING,
        STATUS_PREPARING: STATUS_READY,
        STATUS_READY: STATUS_SERVED,
        STATUS_SERVED: STATUS_COMPLETED,
    }

    TYPE_DINE_IN = 'dine_in'
    TYPE_TAKEAWAY = 'takeaway'
    TYPE_DELIVERY = 'delivery'

    ORDER_TYPE_CHOICES = [
        (TYPE_DINE_IN, _('Dine In')),
        (TYPE_TAKEAWAY, _('Takeaway')),
        (TYPE_DELIVERY, _('Delivery')),
    ]

    # Identification
    order_number = models.CharField(max_length=50, unique=True, verbose_name=_('Order Number'))

    # Links
    table = models.ForeignKey(
        'tables.DiningTable',
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='orders',
        verbose_name=_('Table'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('Created By'),
    )

    # Order info
    customer_name = models.CharField(max_length=255, blank=True, null=True, verbose_name=_('Customer Name'))
    order_type = models.CharField(
        max_length=20, choices=ORDER_TYPE_CHOICES,
        default=TYPE_DINE_IN, verbose_name=_('Order Type'),
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES,
        default=STATUS_PENDING, verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, null=True)

    # Financial
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    # Timing
    served_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Served At'))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completed At'))

    class Meta:
        db_table = 'orders'
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='orders_status_idx'),
            models.Index(fields=['order_type'], name='orders_order_type_idx'),
            models.Index(fields=['created_at'], name='orders_created_at_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(subtotal__gte=0)
                    & models.Q(tax_amount__gte=0)
                    & models.Q(discount_amount__gte=0)
                    & models.Q(total_amount__gte=0)
                ),
                name='orders_amounts_non_negative',
            ),
        ]

    def __str__(self):
        return f"Order #{self.order_number}"

    # ---- Properties ----

    @property
    def table_display(self):
        if self.table:
            return self.table.display_name
        return '-'

    @property
    def item_count(self):
        return self.items.count()

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    # ---- Workflow ----

    @classmethod
    def is_valid_status(cls, status):
        return status in dict(cls.STATUS_CHOICES)

    @classmethod
    def allowed_next(cls, status):
        """Statuses reachable from `status` when adjacency is enforced."""
        if status in cls.TERMINAL_STATUSES:
            return set()
        allowed = {cls.STATUS_CANCELLED}
        if status in cls.NEXT_STATUS:
            allowed.add(cls.NEXT_STATUS[status])
        return allowed

    def apply_status(self, new_status, now=None):
        """
        Set the status and its timestamps in memory.

        Returns the update_fields list to persist: status and updated_at always,
        served_at or completed_at only for the statuses that stamp them.
        """
        now = now or timezone.now()
        self.status = new_status
        fields = ['status', 'updated_at']
        if new_status == self.STATUS_SERVED:
            self.served_at = now
            fields.append('served_at')
        elif new_status == self.STATUS_COMPLETED:
            self.completed_at = now
            fields.append('completed_at')
        return fields

    # ---- Number generation ----

    @classmethod
    def generate_order_number(cls):
        now = timezone.now()
        return f"ORD-{now:%Y%m%d-%H%M%S}-{secrets.token_hex(3).upper()}"


# =============================================================================
# Order Items
# =============================================================================

class OrderItem(BaseModel):
    """Line item of an order, priced at placement time."""

    STATUS_PENDING = 'pending'
    STATUS_PREPARING = 'preparing'
    STATUS_READY = 'ready'
    STATUS_SERVED = 'served'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING, _('Pending')),
        (STATUS_PREPARING, _('Preparing')),
        (STATUS_READY, _('Ready')),
        (STATUS_SERVED, _('Served')),
        (STATUS_CANCELLED, _('Cancelled')),
    ]

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE,
        related_name='items', verbose_name=_('Order'),
    )
    product = models.ForeignKey(
        'catalog.Product', on_delete=models.PROTECT,
        related_name='order_items', verbose_name=_('Product'),
    )

    quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)],
        verbose_name=_('Quantity'),
    )
    # Snapshot of the catalog price when the order was placed
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Unit Price'),
    )
    total_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Total Price'),
    )

    special_instructions = models.TextField(blank=True, null=True, verbose_name=_('Special Instructions'))

    line_number = models.PositiveIntegerField(default=1, verbose_name=_('Line'))

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES,
        default=STATUS_PENDING, verbose_name=_('Status'),
    )

    class Meta:
        db_table = 'order_items'
        verbose_name = _('Order Item')
        verbose_name_plural = _('Order Items')
        ordering = ['line_number', 'created_at']
        indexes = [
            models.Index(fields=['order', 'status'], name='order_items_order_status_idx'),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.product.name}"

    def save(self, *args, **kwargs):
        self.total_price = self.unit_price * self.quantity
        super().save(*args, **kwargs)


# =============================================================================
# Status History
# =============================================================================

class OrderStatusHistory(models.Model):
    """Append-only audit row, one per accepted status change."""

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE,
        related_name='status_history', verbose_name=_('Order'),
    )
    previous_status = models.CharField(max_length=20, verbose_name=_('Previous Status'))
    new_status = models.CharField(max_length=20, verbose_name=_('New Status'))
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='order_status_changes',
        verbose_name=_('Changed By'),
    )
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'order_status_history'
        verbose_name = _('Order Status Change')
        verbose_name_plural = _('Order Status History')
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.order_id}: {self.previous_status} -> {self.new_status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Order status history is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Order status history is append-only")


# =============================================================================
# Payments
# =============================================================================

class Payment(BaseModel):
    """Payment recorded against an order. Processing happens elsewhere."""

    METHOD_CHOICES = [
        ('cash', _('Cash')),
        ('card', _('Card')),
        ('digital_wallet', _('Digital Wallet')),
    ]

    STATUS_CHOICES = [
        ('pending', _('Pending')),
        ('completed', _('Completed')),
        ('failed', _('Failed')),
        ('refunded', _('Refunded')),
    ]

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE,
        related_name='payments', verbose_name=_('Order'),
    )
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES, verbose_name=_('Payment Method'))
    amount = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_('Amount'))
    reference_number = models.CharField(max_length=100, blank=True, null=True, verbose_name=_('Reference'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', verbose_name=_('Status'))
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='processed_payments',
        verbose_name=_('Processed By'),
    )
    processed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Processed At'))

    class Meta:
        db_table = 'payments'
        verbose_name = _('Payment')
        verbose_name_plural = _('Payments')
        ordering = ['created_at']

    def __str__(self):
        return f"{self.get_payment_method_display()} {self.amount}"
