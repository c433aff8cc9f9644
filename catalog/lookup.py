"""
Catalog price lookup.

The order engine prices line items through this module only, so the price
written to an order always comes from the catalog row, never from the caller.
"""

from decimal import Decimal
from typing import NamedTuple

from .models import Product


class PriceQuote(NamedTuple):
    unit_price: Decimal
    is_available: bool


def price_of(product_id, lock: bool = False) -> PriceQuote:
    """
    Return the current unit price and availability of a product.

    With `lock=True` the product row stays locked until the surrounding
    transaction ends; that form must run inside an atomic block.

    Raises Product.DoesNotExist when the product is unknown.
    """
    queryset = Product.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    price, is_available = queryset.values_list(
        'price', 'is_available',
    ).get(pk=product_id)
    return PriceQuote(unit_price=price, is_available=is_available)
