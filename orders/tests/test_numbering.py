import datetime
from unittest import mock

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from orders.models import Order, SalesOrder
from orders.services.numbering import fallback_number, get_scheme, next_order_number, next_serial

TODAY = datetime.date(2026, 10, 19)


def make_order(product, order_no):
    return Order.objects.create(
        order_no=order_no,
        product=product,
        product_name=product.name,
        sale_price=product.sale_price,
        quantity=1,
    )


def test_next_serial():
    assert next_serial(None, '2610') == 1
    assert next_serial('2610007', '2610') == 8
    assert next_serial('2610abc', '2610') == 1


def test_fallback_uses_last_digits_of_epoch_millis():
    assert fallback_number('2610', 3, now_ms=1760870400123) == '2610123'
    assert fallback_number('1019', 2, now_ms=1760870400123) == '101923'


def test_unknown_scheme():
    with pytest.raises(ImproperlyConfigured):
        get_scheme('weekly')


@pytest.mark.django_db
def test_first_order_of_the_month():
    assert next_order_number(TODAY, 'monthly') == '2610001'
    assert next_order_number(TODAY, 'daily') == '101901'


@pytest.mark.django_db
def test_follows_latest_order_in_period(product):
    make_order(product, '2610001')
    make_order(product, '2610002')
    make_order(product, '2609050')

    assert next_order_number(TODAY, 'monthly') == '2610003'


@pytest.mark.django_db
def test_serial_grows_past_width(product):
    make_order(product, '2610999')

    assert next_order_number(TODAY, 'monthly') == '26101000'


@pytest.mark.django_db
def test_lookup_failure_falls_back_to_timestamp():
    with mock.patch.object(Order.objects, 'filter', side_effect=DatabaseError('down')):
        with mock.patch('orders.services.numbering.time.time', return_value=1760870400.5):
            assert next_order_number(TODAY, 'monthly') == '2610500'


def test_default_scheme_comes_from_settings(settings):
    settings.ORDERS_CONFIG = {**settings.ORDERS_CONFIG, 'ORDER_NUMBER_SCHEME': 'daily'}

    assert get_scheme().name == 'daily'


@pytest.mark.django_db
def test_sales_orders_count_separately(product):
    make_order(product, '101905')
    SalesOrder.objects.create(
        order_no='101902', customer_name='Karim', customer_phone='01700000000', customer_address='Dhaka',
    )

    assert next_order_number(TODAY, 'daily', model=SalesOrder) == '101903'
    assert next_order_number(TODAY, 'daily') == '101906'
