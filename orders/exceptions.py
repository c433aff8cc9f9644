"""
Order Errors

Typed failures raised by the order engine. Handlers serialize them with
`to_response()`; nothing here knows about HTTP beyond the suggested status.

Categories:
- validation: rejected before any storage access, safe to retry with fixed input
- conflict: domain state prevents the operation, surfaced verbatim
- storage: unexpected persistence failure, the transaction is rolled back
"""


class OrderError(Exception):
    """Base exception for all order engine failures."""

    code = 'order_error'
    category = 'internal'
    http_status = 500
    retryable = False
    default_message = 'Order operation failed'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_response(self):
        return {
            'success': False,
            'message': self.message,
            'error': self.code,
        }


# ─── Validation ──────────────────────────────────────────────

class OrderValidationError(OrderError):
    category = 'validation'
    http_status = 400
    code = 'validation_error'
    default_message = 'Invalid order request'


class EmptyOrder(OrderValidationError):
    code = 'empty_order'
    default_message = 'Order must contain at least one item'


class InvalidOrderItem(OrderValidationError):
    code = 'invalid_order_item'
    default_message = 'Order items need a product and a positive quantity'


class InvalidOrderType(OrderValidationError):
    code = 'invalid_order_type'
    default_message = 'Invalid order type'


class TableRequired(OrderValidationError):
    code = 'table_required'
    default_message = 'Dine-in orders require a table'


class InvalidStatus(OrderValidationError):
    code = 'invalid_status'
    default_message = 'Invalid order status'


class InvalidTransition(OrderValidationError):
    code = 'invalid_transition'
    default_message = 'Status change not allowed from the current status'


# ─── Domain conflicts ────────────────────────────────────────

class OrderConflictError(OrderError):
    category = 'conflict'
    http_status = 409
    code = 'conflict'


class ProductUnavailable(OrderConflictError):
    http_status = 400
    code = 'product_not_found'
    default_message = 'Product not found or not available'


class OrderNotFound(OrderConflictError):
    http_status = 404
    code = 'order_not_found'
    default_message = 'Order not found'


class OrderItemNotFound(OrderConflictError):
    http_status = 404
    code = 'order_item_not_found'
    default_message = 'Order item not found'


class TableNotFound(OrderConflictError):
    http_status = 404
    code = 'table_not_found'
    default_message = 'Table not found'


class DuplicateOrderNumber(OrderConflictError):
    code = 'duplicate_order_number'
    retryable = True
    default_message = 'Order number already in use, please retry'


class PriceChanged(OrderConflictError):
    code = 'price_changed'
    retryable = True
    default_message = 'A product price changed while the order was placed, please retry'


# ─── Storage ─────────────────────────────────────────────────

class StorageFailure(OrderError):
    category = 'storage'
    code = 'storage_failure'
    default_message = 'Order storage failed'


class DeadlineExceeded(StorageFailure):
    http_status = 504
    code = 'deadline_exceeded'
    retryable = True
    default_message = 'Order operation timed out'
