"""
Orders Module Views

JSON API over the order engine. Authentication is handled by Django; the
views only parse requests, call OrderService and serialize the outcome.
"""

import json
import logging
import math
from functools import wraps

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from . import module
from .exceptions import OrderError
from .forms import (
    OrderCreateForm,
    OrderFilterForm,
    OrderItemForm,
    OrderItemStatusForm,
    OrderStatusForm,
)
from .services import OrderService

logger = logging.getLogger(__name__)


def _bad_request(message, error):
    return JsonResponse({'success': False, 'message': message, 'error': error}, status=400)


def _json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def order_errors(view):
    """Serialize OrderError raised by the engine into the API envelope."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except OrderError as exc:
            log = logger.error if exc.http_status >= 500 else logger.info
            log("%s %s -> %s: %s", request.method, request.path, exc.code, exc.message)
            return JsonResponse(exc.to_response(), status=exc.http_status)
    return wrapper


# =============================================================================
# Serialization
# =============================================================================

def _user_payload(user):
    if user is None:
        return None
    return {
        'id': user.pk,
        'username': user.username,
        'first_name': user.first_name,
        'last_name': user.last_name,
    }


def _dt(value):
    return value.isoformat() if value else None


def _item_payload(item):
    product = item.product
    return {
        'id': str(item.pk),
        'product_id': str(item.product_id),
        'quantity': item.quantity,
        'unit_price': str(item.unit_price),
        'total_price': str(item.total_price),
        'special_instructions': item.special_instructions,
        'status': item.status,
        'created_at': _dt(item.created_at),
        'updated_at': _dt(item.updated_at),
        'product': {
            'id': str(product.pk),
            'name': product.name,
            'description': product.description,
            'price': str(product.price),
            'preparation_time': product.preparation_time,
        },
    }


def _payment_payload(payment):
    return {
        'id': str(payment.pk),
        'payment_method': payment.payment_method,
        'amount': str(payment.amount),
        'reference_number': payment.reference_number,
        'status': payment.status,
        'processed_by': payment.processed_by_id,
        'processed_by_user': _user_payload(payment.processed_by),
        'processed_at': _dt(payment.processed_at),
        'created_at': _dt(payment.created_at),
    }


def _order_payload(order):
    table = order.table
    return {
        'id': str(order.pk),
        'order_number': order.order_number,
        'table_id': str(order.table_id) if order.table_id else None,
        'table': {
            'table_number': table.table_number,
            'location': table.location,
        } if table else None,
        'user_id': order.user_id,
        'user': _user_payload(order.user),
        'customer_name': order.customer_name,
        'order_type': order.order_type,
        'status': order.status,
        'subtotal': str(order.subtotal),
        'tax_amount': str(order.tax_amount),
        'discount_amount': str(order.discount_amount),
        'total_amount': str(order.total_amount),
        'notes': order.notes,
        'created_at': _dt(order.created_at),
        'updated_at': _dt(order.updated_at),
        'served_at': _dt(order.served_at),
        'completed_at': _dt(order.completed_at),
        'items': [_item_payload(item) for item in order.items.all()],
        'payments': [_payment_payload(payment) for payment in order.payments.all()],
    }


def _history_payload(entry):
    return {
        'id': entry.pk,
        'previous_status': entry.previous_status,
        'new_status': entry.new_status,
        'changed_by': _user_payload(entry.changed_by),
        'notes': entry.notes,
        'created_at': _dt(entry.created_at),
    }


# =============================================================================
# Orders
# =============================================================================

@login_required
@require_http_methods(['GET', 'POST'])
@order_errors
def api_orders(request):
    if request.method == 'POST':
        return _create_order(request)
    return _list_orders(request)


def _list_orders(request):
    form = OrderFilterForm(request.GET)
    if not form.is_valid():
        return _bad_request('Invalid query parameters', 'invalid_request')
    filters = form.cleaned_data

    page = filters.get('page') or 1
    per_page = filters.get('per_page') or getattr(
        settings, 'ORDERS_PAGE_SIZE', module.SETTINGS['page_size'],
    )
    orders, total = OrderService.list_orders(
        status=filters.get('status') or None,
        order_type=filters.get('order_type') or None,
        limit=per_page,
        offset=(page - 1) * per_page,
    )

    return JsonResponse({
        'success': True,
        'message': 'Orders retrieved successfully',
        'data': [_order_payload(o) for o in orders],
        'meta': {
            'current_page': page,
            'per_page': per_page,
            'total': total,
            'total_pages': math.ceil(total / per_page),
        },
    })


def _create_order(request):
    data = _json_body(request)
    if data is None:
        return _bad_request('Invalid request body', 'invalid_json')

    form = OrderCreateForm(data)
    if not form.is_valid():
        return _bad_request('Invalid request body', 'invalid_request')

    raw_items = data.get('items') or []
    if not isinstance(raw_items, list):
        return _bad_request('Invalid request body', 'invalid_request')

    items = []
    for raw in raw_items:
        item_form = OrderItemForm(raw if isinstance(raw, dict) else {})
        if not item_form.is_valid():
            return _bad_request('Invalid order item', 'invalid_order_item')
        items.append(item_form.cleaned_data)

    order_id = OrderService.create_order(
        user_id=request.user.pk,
        items=items,
        order_type=form.cleaned_data['order_type'],
        table_id=form.cleaned_data.get('table_id'),
        customer_name=form.cleaned_data.get('customer_name'),
        notes=form.cleaned_data.get('notes'),
    )
    order = OrderService.get_order(order_id)

    return JsonResponse({
        'success': True,
        'message': 'Order created successfully',
        'data': _order_payload(order),
    }, status=201)


@login_required
@require_GET
@order_errors
def api_get_order(request, order_id):
    order = OrderService.get_order(order_id)
    return JsonResponse({
        'success': True,
        'message': 'Order retrieved successfully',
        'data': _order_payload(order),
    })


@login_required
@require_http_methods(['PATCH', 'POST'])
@order_errors
def api_update_status(request, order_id):
    data = _json_body(request)
    if data is None:
        return _bad_request('Invalid request body', 'invalid_json')

    form = OrderStatusForm(data)
    if not form.is_valid():
        return _bad_request('Invalid request body', 'invalid_request')

    order = OrderService.update_status(
        order_id,
        form.cleaned_data['status'],
        user_id=request.user.pk,
        notes=form.cleaned_data.get('notes'),
    )
    return JsonResponse({
        'success': True,
        'message': 'Order status updated successfully',
        'data': _order_payload(order),
    })


@login_required
@require_GET
@order_errors
def api_status_history(request, order_id):
    history = OrderService.get_status_history(order_id)
    return JsonResponse({
        'success': True,
        'message': 'Order status history retrieved successfully',
        'data': [_history_payload(entry) for entry in history],
    })


# =============================================================================
# Kitchen
# =============================================================================

@login_required
@require_GET
@order_errors
def api_kitchen_orders(request):
    orders = OrderService.get_kitchen_queue(request.GET.get('status', 'all'))
    return JsonResponse({
        'success': True,
        'message': 'Kitchen orders retrieved successfully',
        'data': [{
            'id': str(o.pk),
            'order_number': o.order_number,
            'table_id': str(o.table_id) if o.table_id else None,
            'table_number': o.table.table_number if o.table else '',
            'order_type': o.order_type,
            'status': o.status,
            'customer_name': o.customer_name or '',
            'created_at': _dt(o.created_at),
            'items': [_item_payload(item) for item in o.items.all()],
        } for o in orders],
    })


@login_required
@require_http_methods(['PATCH', 'POST'])
@order_errors
def api_update_item_status(request, order_id, item_id):
    data = _json_body(request)
    if data is None:
        return _bad_request('Invalid request body', 'invalid_json')

    form = OrderItemStatusForm(data)
    if not form.is_valid():
        return _bad_request('Invalid request body', 'invalid_request')

    item = OrderService.update_item_status(order_id, item_id, form.cleaned_data['status'])
    return JsonResponse({
        'success': True,
        'message': 'Order item status updated successfully',
        'data': {'id': str(item.pk), 'status': item.status},
    })
