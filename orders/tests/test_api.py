from decimal import Decimal

import pytest

from orders.models import Order
from orders.services import lifecycle

pytestmark = pytest.mark.django_db


def payload(product, **overrides):
    data = {
        'product_id': product.product_id,
        'product_name': product.name,
        'sale_price': '100.00',
        'quantity': 2,
        'payment_method': 'Cash',
    }
    data.update(overrides)
    return data


def test_requires_authentication(api_client):
    response = api_client.get('/api/orders/')

    assert response.status_code in (401, 403)
    assert response.data['success'] is False


def test_create_order(auth_client, product):
    response = auth_client.post('/api/orders/', payload(product), format='json')

    assert response.status_code == 201
    assert response.data['success'] is True
    order = response.data['data']
    assert order['product_id'] == product.product_id
    assert order['grand_total'] == Decimal('200.00')
    assert order['due_amount'] == Decimal('0.00')
    assert order['remaining_stock'] == 8
    assert order['created_by'] == 'cashier'
    product.refresh_from_db()
    assert product.stock_qty == 8


def test_create_with_insufficient_stock(auth_client, product):
    response = auth_client.post('/api/orders/', payload(product, quantity=50), format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'insufficient_stock'
    assert response.data['available'] == 10
    assert response.data['requested'] == 50
    assert Order.objects.count() == 0


def test_create_missing_fields(auth_client):
    response = auth_client.post('/api/orders/', {'quantity': 1}, format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'validation_error'
    assert 'product_id' in response.data['fields']


def test_create_unknown_product(auth_client, product):
    response = auth_client.post('/api/orders/', payload(product, product_id='PRODUCT9999'), format='json')

    assert response.status_code == 404
    assert response.data['error'] == 'product_not_found'


def test_retrieve_missing_order(auth_client):
    response = auth_client.get('/api/orders/999/')

    assert response.status_code == 404
    assert response.data['error'] == 'order_not_found'


def test_update_quantity(auth_client, product):
    order = lifecycle.create_order(payload(product, quantity=5))

    response = auth_client.put(f'/api/orders/{order.pk}/', {'quantity': 3}, format='json')

    assert response.status_code == 200
    assert response.data['data']['quantity'] == 3
    assert response.data['data']['updated_by'] == 'cashier'
    product.refresh_from_db()
    assert product.stock_qty == 7


def test_patch_status_to_cancelled_restores(auth_client, product):
    order = lifecycle.create_order(payload(product, quantity=4))

    response = auth_client.patch(f'/api/orders/{order.pk}/', {'status': 'Cancelled'}, format='json')

    assert response.status_code == 200
    assert response.data['data']['status'] == 'Cancelled'
    product.refresh_from_db()
    assert product.stock_qty == 10


def test_patch_rejects_product_change(auth_client, product, make_product):
    order = lifecycle.create_order(payload(product))
    other = make_product(name='Tablet')

    response = auth_client.patch(f'/api/orders/{order.pk}/', {'product_id': other.product_id}, format='json')

    assert response.status_code == 400
    assert 'product_id' in response.data['errors']


def test_invalid_transition_returns_400(auth_client, product):
    order = lifecycle.create_order(payload(product, status='Completed'))

    response = auth_client.patch(f'/api/orders/{order.pk}/', {'status': 'Cancelled'}, format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'invalid_status_transition'
    assert response.data['from_status'] == 'Completed'


def test_delete_reports_restored_units(auth_client, product):
    order = lifecycle.create_order(payload(product, quantity=3))

    response = auth_client.delete(f'/api/orders/{order.pk}/')

    assert response.status_code == 200
    assert response.data['data']['restored'] == 3
    assert response.data['data']['order']['id'] == order.pk
    assert response.data['data']['order']['order_no'] == order.order_no
    assert '3 units restored' in response.data['message']
    assert not Order.objects.filter(pk=order.pk).exists()


def test_list_is_paginated_and_filtered(auth_client, product):
    for name in ('Karim', 'Salma', 'Nabil'):
        lifecycle.create_order(payload(product, quantity=1, customer_name=name))

    response = auth_client.get('/api/orders/', {'limit': 2})
    assert response.data['total'] == 3
    assert response.data['total_pages'] == 2
    assert len(response.data['data']) == 2

    response = auth_client.get('/api/orders/', {'search': 'salma'})
    assert [order['customer_name'] for order in response.data['data']] == ['Salma']


def test_list_rejects_malformed_dates(auth_client):
    response = auth_client.get('/api/orders/', {'start_date': '19-10-2026'})

    assert response.status_code == 400
    assert response.data['field'] == 'start_date'


# ============================================
# SUMMARIES
# ============================================

def test_financial_summary(auth_client, product):
    lifecycle.create_order(payload(product, quantity=2))

    response = auth_client.get('/api/orders/summary/financial/')

    assert response.status_code == 200
    assert response.data['data']['daily']['orders'] == 1
    assert response.data['data']['daily']['sales'] == Decimal('200.00')
    assert len(response.data['data']['chart_data']) == 7


def test_daily_summary_days_param(auth_client):
    response = auth_client.get('/api/orders/summary/daily/', {'days': 3})

    assert response.status_code == 200
    assert len(response.data['data']) == 3

    response = auth_client.get('/api/orders/summary/daily/', {'days': 'week'})
    assert response.status_code == 400


def test_range_report_requires_both_dates(auth_client):
    response = auth_client.get('/api/orders/summary/range/', {'start_date': '2026-10-01'})

    assert response.status_code == 400
    assert response.data['field'] == 'end_date'


def test_range_report(auth_client):
    response = auth_client.get('/api/orders/summary/range/', {'start_date': '2026-10-01', 'end_date': '2026-10-03'})

    assert response.status_code == 200
    assert len(response.data['data']['daily']) == 3
    assert response.data['data']['total_orders'] == 0
