"""
Orders Module Signals

Sent through transaction.on_commit, so receivers run only once the
order's transaction has committed and never for a rolled-back change.
"""

import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Signals this module emits
order_created = Signal()  # Provides: order
order_status_changed = Signal()  # Provides: order, previous_status, new_status
order_closed = Signal()  # Provides: order, status


@receiver(order_status_changed)
def _announce_closed_orders(sender, order, new_status, **kwargs):
    if new_status in sender.TERMINAL_STATUSES:
        logger.debug("Order %s closed as %s", order.order_number, new_status)
        order_closed.send(sender=sender, order=order, status=new_status)
