"""
Integration tests for Orders module views.
"""

import json
import uuid

import pytest
from django.urls import resolve, reverse

from orders import views
from orders.models import Order, OrderItem


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


def _patch(client, url, payload):
    return client.patch(url, data=json.dumps(payload), content_type='application/json')


# ==============================================================================
# URL ROUTING TESTS
# ==============================================================================

class TestURLRouting:
    """Tests for URL routing and resolution."""

    def test_orders_url_resolves(self):
        assert resolve('/api/orders/').func == views.api_orders

    def test_detail_url_resolves(self):
        order_id = uuid.uuid4()
        resolver = resolve(f'/api/orders/{order_id}/')
        assert resolver.func == views.api_get_order
        assert resolver.kwargs == {'order_id': order_id}

    def test_status_url_resolves(self):
        assert resolve(f'/api/orders/{uuid.uuid4()}/status/').func == views.api_update_status

    def test_history_url_resolves(self):
        assert resolve(f'/api/orders/{uuid.uuid4()}/history/').func == views.api_status_history

    def test_kitchen_urls_resolve(self):
        assert resolve('/api/kitchen/orders/').func == views.api_kitchen_orders
        url = f'/api/kitchen/orders/{uuid.uuid4()}/items/{uuid.uuid4()}/status/'
        assert resolve(url).func == views.api_update_item_status


# ==============================================================================
# AUTHENTICATION TESTS
# ==============================================================================

@pytest.mark.django_db
class TestAuthentication:
    """Every endpoint requires a logged-in user."""

    @pytest.mark.parametrize('url_name', ['orders:orders', 'orders:kitchen_orders'])
    def test_redirects_anonymous(self, client, url_name):
        response = client.get(reverse(url_name))
        assert response.status_code == 302
        assert '/admin/login/' in response.url

    def test_create_requires_login(self, client, table, items, row_counts):
        before = row_counts()
        response = _post(client, reverse('orders:orders'), {'table_id': str(table.pk), 'items': []})

        assert response.status_code == 302
        assert row_counts() == before


# ==============================================================================
# CREATE ORDER API TESTS
# ==============================================================================

@pytest.mark.django_db
class TestCreateOrderAPI:
    """Tests for POST /api/orders/."""

    def test_create_dine_in(self, auth_client, user, table, burger, soda):
        response = _post(auth_client, reverse('orders:orders'), {
            'table_id': str(table.pk),
            'customer_name': 'Alice',
            'items': [
                {'product_id': str(burger.pk), 'quantity': 2, 'special_instructions': 'No onions'},
                {'product_id': str(soda.pk), 'quantity': 1},
            ],
        })

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        data = body['data']
        assert data['status'] == 'pending'
        assert data['order_type'] == 'dine_in'
        assert data['subtotal'] == '13.00'
        assert data['tax_amount'] == '1.30'
        assert data['total_amount'] == '14.30'
        assert data['user']['username'] == user.username
        assert data['table']['table_number'] == 'T1'
        assert [i['product']['name'] for i in data['items']] == ['Burger', 'Soda']
        assert data['items'][0]['special_instructions'] == 'No onions'
        assert data['payments'] == []

        table.refresh_from_db()
        assert table.is_occupied is True

    def test_create_takeaway(self, auth_client, burger):
        response = _post(auth_client, reverse('orders:orders'), {
            'order_type': 'takeaway',
            'items': [{'product_id': str(burger.pk), 'quantity': 1}],
        })

        assert response.status_code == 201
        assert response.json()['data']['table'] is None

    def test_empty_items(self, auth_client, table, row_counts):
        before = row_counts()
        response = _post(auth_client, reverse('orders:orders'), {
            'table_id': str(table.pk), 'items': [],
        })

        assert response.status_code == 400
        assert response.json() == {
            'success': False,
            'message': 'Order must contain at least one item',
            'error': 'empty_order',
        }
        assert row_counts() == before

    def test_invalid_item(self, auth_client, table, burger):
        response = _post(auth_client, reverse('orders:orders'), {
            'table_id': str(table.pk),
            'items': [{'product_id': str(burger.pk), 'quantity': 0}],
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_order_item'

    def test_invalid_json(self, auth_client):
        response = auth_client.post(
            reverse('orders:orders'), data='{not json', content_type='application/json',
        )
        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_json'

    def test_unavailable_product(self, auth_client, table, sold_out, row_counts):
        before = row_counts()
        response = _post(auth_client, reverse('orders:orders'), {
            'table_id': str(table.pk),
            'items': [{'product_id': str(sold_out.pk), 'quantity': 1}],
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'product_not_found'
        assert row_counts() == before

    def test_unknown_table(self, auth_client, burger):
        response = _post(auth_client, reverse('orders:orders'), {
            'table_id': str(uuid.uuid4()),
            'items': [{'product_id': str(burger.pk), 'quantity': 1}],
        })
        assert response.status_code == 404
        assert response.json()['error'] == 'table_not_found'


# ==============================================================================
# READ API TESTS
# ==============================================================================

@pytest.mark.django_db
class TestReadAPI:
    """Tests for order detail, list and history endpoints."""

    def test_get_order(self, auth_client, order, payment):
        response = auth_client.get(reverse('orders:detail', args=[order.pk]))

        assert response.status_code == 200
        data = response.json()['data']
        assert data['id'] == str(order.pk)
        assert data['order_number'] == order.order_number
        assert len(data['items']) == 2
        assert data['payments'][0]['amount'] == '14.30'
        assert data['payments'][0]['processed_by_user']['username'] == 'cashier'

    def test_get_order_not_found(self, auth_client):
        response = auth_client.get(reverse('orders:detail', args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.json()['error'] == 'order_not_found'

    def test_list_orders(self, auth_client, order, takeaway_order):
        response = auth_client.get(reverse('orders:orders'), {'per_page': 1})

        assert response.status_code == 200
        body = response.json()
        assert len(body['data']) == 1
        assert body['meta'] == {
            'current_page': 1,
            'per_page': 1,
            'total': 2,
            'total_pages': 2,
        }

    @pytest.mark.parametrize('params', [{'per_page': 500}, {'page': 0}, {'per_page': 'ten'}])
    def test_list_rejects_bad_paging(self, auth_client, order, params):
        response = auth_client.get(reverse('orders:orders'), params)

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_request'

    def test_list_filters(self, auth_client, order, takeaway_order):
        response = auth_client.get(reverse('orders:orders'), {'order_type': 'takeaway'})

        data = response.json()['data']
        assert [o['id'] for o in data] == [str(takeaway_order.pk)]

    def test_list_unknown_status_matches_nothing(self, auth_client, order):
        response = auth_client.get(reverse('orders:orders'), {'status': 'teleported'})

        body = response.json()
        assert body['data'] == []
        assert body['meta']['total'] == 0

    def test_status_history(self, auth_client, order):
        _patch(auth_client, reverse('orders:update_status', args=[order.pk]), {'status': 'confirmed'})

        response = auth_client.get(reverse('orders:status_history', args=[order.pk]))

        assert response.status_code == 200
        data = response.json()['data']
        assert len(data) == 1
        assert data[0]['previous_status'] == 'pending'
        assert data[0]['new_status'] == 'confirmed'
        assert data[0]['changed_by']['username'] == 'waiter'


# ==============================================================================
# STATUS API TESTS
# ==============================================================================

@pytest.mark.django_db
class TestStatusAPI:
    """Tests for the status update endpoint."""

    def test_update_status(self, auth_client, order):
        response = _patch(auth_client, reverse('orders:update_status', args=[order.pk]), {
            'status': 'served', 'notes': 'Table served',
        })

        assert response.status_code == 200
        data = response.json()['data']
        assert data['status'] == 'served'
        assert data['served_at'] is not None
        assert data['completed_at'] is None

    def test_complete_frees_table(self, auth_client, order, table):
        response = _post(
            auth_client, reverse('orders:update_status', args=[order.pk]), {'status': 'completed'},
        )

        assert response.status_code == 200
        table.refresh_from_db()
        assert table.is_occupied is False

    def test_invalid_status(self, auth_client, order):
        response = _patch(
            auth_client, reverse('orders:update_status', args=[order.pk]), {'status': 'teleported'},
        )

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_status'
        order.refresh_from_db()
        assert order.status == Order.STATUS_PENDING

    def test_missing_status(self, auth_client, order):
        response = _patch(auth_client, reverse('orders:update_status', args=[order.pk]), {})
        assert response.status_code == 400

    def test_unknown_order(self, auth_client):
        response = _patch(
            auth_client, reverse('orders:update_status', args=[uuid.uuid4()]), {'status': 'ready'},
        )
        assert response.status_code == 404

    def test_get_not_allowed(self, auth_client, order):
        response = auth_client.get(reverse('orders:update_status', args=[order.pk]))
        assert response.status_code == 405


# ==============================================================================
# KITCHEN API TESTS
# ==============================================================================

@pytest.mark.django_db
class TestKitchenAPI:
    """Tests for the kitchen endpoints."""

    def test_kitchen_orders(self, auth_client, order, takeaway_order):
        response = auth_client.get(reverse('orders:kitchen_orders'))

        assert response.status_code == 200
        data = response.json()['data']
        assert [o['id'] for o in data] == [str(order.pk), str(takeaway_order.pk)]
        assert data[0]['table_number'] == 'T1'
        assert data[1]['table_number'] == ''

    def test_kitchen_orders_bad_status(self, auth_client):
        response = auth_client.get(reverse('orders:kitchen_orders'), {'status': 'completed'})
        assert response.status_code == 400

    def test_update_item_status(self, auth_client, order, order_item):
        url = reverse('orders:update_item_status', args=[order.pk, order_item.pk])
        response = _patch(auth_client, url, {'status': 'ready'})

        assert response.status_code == 200
        assert response.json()['data'] == {'id': str(order_item.pk), 'status': 'ready'}
        assert OrderItem.objects.get(pk=order_item.pk).status == OrderItem.STATUS_READY

    def test_update_unknown_item(self, auth_client, order):
        url = reverse('orders:update_item_status', args=[order.pk, uuid.uuid4()])
        response = _patch(auth_client, url, {'status': 'ready'})

        assert response.status_code == 404
        assert response.json()['error'] == 'order_item_not_found'


# ==============================================================================
# HEALTH TESTS
# ==============================================================================

class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
