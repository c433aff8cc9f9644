"""
Catalog Models

Menu products sold through the POS. Product CRUD lives outside the order
engine; orders only read the current price and availability.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Product(BaseModel):
    """Menu product with its live catalog price."""

    name = models.CharField(max_length=255, verbose_name=_('Name'))
    description = models.TextField(blank=True, null=True, verbose_name=_('Description'))
    price = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Price'),
    )
    preparation_time = models.PositiveIntegerField(
        default=0, verbose_name=_('Preparation Time (minutes)'),
    )
    is_available = models.BooleanField(default=True, verbose_name=_('Available'))
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'products'
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name
