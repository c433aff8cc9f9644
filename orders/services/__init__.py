from . import order_store
from .order_service import OrderService

__all__ = ['OrderService', 'order_store']
