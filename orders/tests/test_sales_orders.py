import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from backoffice.exceptions import OrderNotFound, ProductNotFound, ValidationError
from orders.models import OrderStatus, SalesOrder, SalesOrderItem
from orders.services import reports, sales_orders

pytestmark = pytest.mark.django_db

TODAY = datetime.date(2026, 10, 19)


def order_data(*items, **overrides):
    data = {
        'customer_name': 'Karim',
        'customer_phone': '01700000000',
        'customer_address': 'Road 5, Dhaka',
        'items': list(items),
    }
    data.update(overrides)
    return data


def line(product, quantity=1, sale_price='100.00', **extra):
    item = {'product_id': product.product_id, 'quantity': quantity, 'sale_price': sale_price}
    item.update(extra)
    return item


def test_line_total_includes_vat_and_tax():
    assert sales_orders.line_total(Decimal('100.00'), 3, Decimal('15.00'), Decimal('4.50')) == Decimal('319.50')


def test_grand_total_never_negative():
    assert sales_orders.grand_total(Decimal('50.00'), Decimal('10.00'), Decimal('100.00')) == Decimal('0.00')


def test_create_with_several_lines(make_product, user):
    phone = make_product(name='Handset')
    charger = make_product(name='Charger', sale_price='20.00', unit_price='12.00')

    order = sales_orders.create_sales_order(
        order_data(
            line(phone, quantity=2, vat='10.00'),
            line(charger, quantity=3, sale_price='20.00', tax='1.50'),
            delivery_charge='60',
            discount='25',
        ),
        created_by='cashier',
    )

    assert [item.total for item in order.items.all()] == [Decimal('210.00'), Decimal('61.50')]
    assert order.total_amount == Decimal('271.50')
    assert order.grand_total == Decimal('306.50')
    assert order.total_items == 5
    assert order.created_by == 'cashier'
    assert order.status == OrderStatus.PENDING

    charger_line = order.items.get(product=charger)
    assert charger_line.product_name == 'Charger'
    assert charger_line.category == 'Phones'
    assert charger_line.unit_price == Decimal('12.00')


def test_order_number_uses_day_prefix(product):
    prefix = timezone.localdate().strftime('%m%d')

    first = sales_orders.create_sales_order(order_data(line(product)))
    second = sales_orders.create_sales_order(order_data(line(product)))

    assert first.order_no == f'{prefix}01'
    assert second.order_no == f'{prefix}02'


def test_stock_is_not_touched(product):
    sales_orders.create_sales_order(order_data(line(product, quantity=4)))

    product.refresh_from_db()
    assert product.stock_qty == 10


@pytest.mark.parametrize('missing', ['customer_name', 'customer_phone', 'customer_address'])
def test_customer_details_required(product, missing):
    with pytest.raises(ValidationError) as excinfo:
        sales_orders.create_sales_order(order_data(line(product), **{missing: ''}))

    assert excinfo.value.details['fields'] == [missing]
    assert not SalesOrder.objects.exists()


def test_needs_at_least_one_item():
    with pytest.raises(ValidationError) as excinfo:
        sales_orders.create_sales_order(order_data())

    assert excinfo.value.details['field'] == 'items'


def test_incomplete_line_names_missing_fields(product):
    with pytest.raises(ValidationError) as excinfo:
        sales_orders.create_sales_order(order_data(line(product), {'product_id': product.product_id}))

    assert excinfo.value.details['item'] == 1
    assert excinfo.value.details['fields'] == ['quantity', 'sale_price']


def test_unknown_product_leaves_nothing_behind(product):
    with pytest.raises(ProductNotFound):
        sales_orders.create_sales_order(order_data(line(product), {'product_id': 'PRODUCT9999', 'quantity': 1, 'sale_price': '5'}))

    assert not SalesOrder.objects.exists()
    assert not SalesOrderItem.objects.exists()


def test_update_replaces_lines_and_recomputes(make_product):
    phone = make_product(name='Handset')
    case = make_product(name='Case', sale_price='15.00')
    order = sales_orders.create_sales_order(order_data(line(phone, quantity=2), delivery_charge='50'))

    updated = sales_orders.update_sales_order(
        order.pk,
        {'items': [line(case, quantity=4, sale_price='15.00')], 'discount': '10', 'status': 'Processing'},
        updated_by='boss',
    )

    assert [(item.product_name, item.quantity) for item in updated.items.all()] == [('Case', 4)]
    assert SalesOrderItem.objects.filter(order=order).count() == 1
    assert updated.total_amount == Decimal('60.00')
    assert updated.grand_total == Decimal('100.00')
    assert updated.status == OrderStatus.PROCESSING
    assert updated.updated_by == 'boss'


def test_update_without_items_keeps_lines(product):
    order = sales_orders.create_sales_order(order_data(line(product, quantity=2)))

    updated = sales_orders.update_sales_order(order.pk, {'customer_phone': '01811111111', 'delivery_charge': '30'})

    assert updated.total_items == 2
    assert updated.customer_phone == '01811111111'
    assert updated.grand_total == Decimal('230.00')


def test_soft_delete_hides_order(product):
    order = sales_orders.create_sales_order(order_data(line(product)))

    sales_orders.delete_sales_order(order.pk, deleted_by='boss')

    stored = SalesOrder.objects.get(pk=order.pk)
    assert stored.is_deleted is True
    assert stored.status == OrderStatus.CANCELLED
    assert stored.updated_by == 'boss'
    assert stored.items.count() == 1
    assert list(sales_orders.list_sales_orders()) == []
    with pytest.raises(OrderNotFound):
        sales_orders.get_sales_order(order.pk)
    with pytest.raises(OrderNotFound):
        sales_orders.delete_sales_order(order.pk)
    with pytest.raises(OrderNotFound):
        sales_orders.update_sales_order(order.pk, {'discount': '1'})


def test_list_filters(product):
    sales_orders.create_sales_order(order_data(line(product), customer_name='Salma'))
    sales_orders.create_sales_order(order_data(line(product), status='Completed'))

    assert [order.customer_name for order in sales_orders.list_sales_orders(search='salm')] == ['Salma']
    assert [order.status for order in sales_orders.list_sales_orders(status='Completed')] == ['Completed']


def test_summaries_skip_deleted_and_cancelled(product):
    noon = timezone.make_aware(datetime.datetime.combine(TODAY, datetime.time(12)))
    kept = sales_orders.create_sales_order(order_data(line(product, quantity=3), order_date=noon))
    deleted = sales_orders.create_sales_order(order_data(line(product, quantity=5), order_date=noon))
    cancelled = sales_orders.create_sales_order(order_data(line(product, quantity=7), order_date=noon))
    sales_orders.delete_sales_order(deleted.pk)
    sales_orders.update_sales_order(cancelled.pk, {'status': 'Cancelled'})

    financial = reports.sales_order_financial_summary(today=TODAY)
    daily = reports.sales_order_daily_summary(days=2, today=TODAY)

    assert financial['daily'] == {'sales': kept.grand_total, 'orders': 1, 'items': 3}
    assert financial['monthly'] == financial['daily']
    assert daily == [
        {'date': '2026-10-18', 'daily_sales': Decimal('0.00'), 'total_orders': 0, 'total_items': 0},
        {'date': '2026-10-19', 'daily_sales': Decimal('300.00'), 'total_orders': 1, 'total_items': 3},
    ]
