"""
Orders Module Configuration

Order lifecycle for restaurants, bars and cafes: priced order creation,
audited status transitions and table occupancy.
"""
from django.utils.translation import gettext_lazy as _

MODULE_ID = "orders"
MODULE_NAME = _("Orders")
MODULE_VERSION = "1.0.0"

# Fallbacks used when the Django settings do not define ORDERS_* values.
SETTINGS = {
    "tax_rate": "0.10",
    "default_order_type": "dine_in",
    "strict_transitions": False,
    "page_size": 20,
    "max_page_size": 100,
}
