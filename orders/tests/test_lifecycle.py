from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from backoffice.exceptions import (
    DuplicateOrderNumber,
    InsufficientStock,
    InvalidQuantity,
    InvalidStatusTransition,
    OrderNotFound,
    PersistenceError,
    ProductNotFound,
    ValidationError,
)
from inventory.models import Product
from orders.models import Order, OrderStatus
from orders.services import lifecycle

pytestmark = pytest.mark.django_db


@pytest.fixture
def place(product):
    def place_order(**overrides):
        data = {
            'product_id': product.product_id,
            'product_name': product.name,
            'sale_price': Decimal('100.00'),
            'quantity': 5,
            'payment_method': 'Cash',
        }
        data.update(overrides)
        return lifecycle.create_order(data, created_by='cashier')
    return place_order


def stock(product):
    product.refresh_from_db()
    return product.stock_qty


def set_stock(product, quantity):
    Product.objects.filter(pk=product.pk).update(stock_qty=quantity)


# ============================================
# CREATE
# ============================================

def test_create_deducts_stock_and_settles_cash_order(place, product):
    order = place()

    assert stock(product) == 5
    assert order.status == OrderStatus.PENDING
    assert order.grand_total == Decimal('500.00')
    assert order.paid_amount == order.grand_total
    assert order.due_amount == Decimal('0.00')
    assert order.original_stock == 10
    assert order.remaining_stock == 5
    assert order.category == 'Phones'
    assert order.unit_price == product.unit_price
    assert order.customer_name == 'Walk-in Customer'
    assert order.created_by == 'cashier'
    assert product.stock_entries.get(entry_type='sale').reference_id == order.order_no


def test_create_beyond_stock_creates_nothing(place, product):
    with pytest.raises(InsufficientStock):
        place(quantity=20)

    assert stock(product) == 10
    assert Order.objects.count() == 0


@pytest.mark.parametrize('missing', ['product_id', 'product_name', 'sale_price', 'quantity'])
def test_create_requires_fields(place, product, missing):
    with pytest.raises(ValidationError) as excinfo:
        place(**{missing: None})

    assert missing in excinfo.value.details['fields']
    assert stock(product) == 10


@pytest.mark.parametrize('quantity', [0, -1])
def test_create_rejects_non_positive_quantity(place, quantity):
    with pytest.raises(InvalidQuantity):
        place(quantity=quantity)


def test_create_as_cancelled_rejected(place, product):
    with pytest.raises(ValidationError):
        place(status='Cancelled')

    assert stock(product) == 10


def test_create_unknown_product(place):
    with pytest.raises(ProductNotFound):
        place(product_id='PRODUCT0000')


def test_create_unknown_payment_method_rolls_back_deduction(place, product):
    with pytest.raises(ValidationError):
        place(payment_method='Barter')

    assert stock(product) == 10
    assert not product.stock_entries.filter(entry_type='sale').exists()


def test_create_partial_payment_with_delivery_and_discount(place):
    order = place(quantity=2, payment_method='Partial', paid_amount=Decimal('50'),
                  delivery_charge=Decimal('30'), discount=Decimal('10'))

    assert order.total == Decimal('200.00')
    assert order.grand_total == Decimal('220.00')
    assert order.paid_amount == Decimal('50.00')
    assert order.due_amount == Decimal('170.00')


def test_order_numbers_increase(place):
    first = place(quantity=1)
    second = place(quantity=1)

    assert first.order_no[:4] == second.order_no[:4]
    assert int(second.order_no[4:]) == int(first.order_no[4:]) + 1


def test_duplicate_order_number_rolls_back_stock(place, product):
    taken = place(quantity=1)

    with mock.patch('orders.services.lifecycle.next_order_number', return_value=taken.order_no):
        with pytest.raises(DuplicateOrderNumber) as excinfo:
            place(quantity=2)

    assert excinfo.value.details['retryable'] is True
    assert stock(product) == 9
    assert Order.objects.count() == 1


def test_storage_failure_is_persistence_error(place, product):
    with mock.patch.object(Order, 'save', side_effect=DatabaseError('disk full')):
        with pytest.raises(PersistenceError):
            place()

    assert stock(product) == 10


# ============================================
# UPDATE
# ============================================

def test_lowering_quantity_restores_difference(place, product):
    order = place(quantity=5)

    updated = lifecycle.update_order(order.pk, {'quantity': 3})

    assert stock(product) == 7
    assert updated.quantity == 3
    assert updated.total == Decimal('300.00')
    assert updated.grand_total == Decimal('300.00')
    assert updated.remaining_stock == 7


def test_raising_quantity_beyond_stock_changes_nothing(place, product):
    order = place(quantity=5)

    with pytest.raises(InsufficientStock):
        lifecycle.update_order(order.pk, {'quantity': 11})

    order.refresh_from_db()
    assert order.quantity == 5
    assert stock(product) == 5


def test_cancel_then_reactivate_round_trip(place, product):
    order = place(quantity=4)
    set_stock(product, 6)

    lifecycle.update_order(order.pk, {'status': 'Cancelled'})
    assert stock(product) == 10

    reactivated = lifecycle.update_order(order.pk, {'status': 'Pending'})
    assert stock(product) == 6
    assert reactivated.status == OrderStatus.PENDING


def test_reactivation_without_stock_keeps_order_cancelled(place, product):
    order = place(quantity=4)
    lifecycle.update_order(order.pk, {'status': 'Cancelled'})
    set_stock(product, 2)

    with pytest.raises(InsufficientStock):
        lifecycle.update_order(order.pk, {'status': 'Processing'})

    order.refresh_from_db()
    assert order.status == OrderStatus.CANCELLED
    assert stock(product) == 2


def test_repeated_cancel_restores_only_once(place, product):
    order = place(quantity=4)

    lifecycle.update_order(order.pk, {'status': 'Cancelled'})
    lifecycle.update_order(order.pk, {'status': 'Cancelled'})

    assert stock(product) == 10


def test_invalid_transition(place, product):
    order = place(quantity=2)
    lifecycle.update_order(order.pk, {'status': 'Completed'})

    with pytest.raises(InvalidStatusTransition):
        lifecycle.update_order(order.pk, {'status': 'Cancelled'})

    assert stock(product) == 8


def test_payment_change_recomputes_split(place):
    order = place(quantity=2)

    due = lifecycle.update_order(order.pk, {'payment_method': 'Due'})
    assert (due.paid_amount, due.due_amount) == (Decimal('0.00'), Decimal('200.00'))

    partial = lifecycle.update_order(order.pk, {'payment_method': 'Partial', 'paid_amount': Decimal('120')})
    assert (partial.paid_amount, partial.due_amount) == (Decimal('120.00'), Decimal('80.00'))


def test_price_change_recomputes_total(place, product):
    order = place(quantity=2)

    updated = lifecycle.update_order(order.pk, {'sale_price': Decimal('90')})

    assert updated.total == Decimal('180.00')
    assert stock(product) == 8


def test_update_without_changes_keeps_amounts(place):
    order = place(quantity=2, total=Decimal('150'), payment_method='Partial', paid_amount=Decimal('20'))

    updated = lifecycle.update_order(order.pk, {'customer_name': 'Rahim'})

    assert updated.customer_name == 'Rahim'
    assert updated.total == Decimal('150.00')
    assert updated.paid_amount == Decimal('20.00')
    assert updated.due_amount == Decimal('130.00')


def test_update_missing_order():
    with pytest.raises(OrderNotFound):
        lifecycle.update_order(999, {'quantity': 1})


# ============================================
# DELETE
# ============================================

def test_delete_completed_order_restores_quantity(place, product):
    order = place(quantity=3)
    lifecycle.update_order(order.pk, {'status': 'Completed'})

    result = lifecycle.delete_order(order.pk)

    assert result.restored == 3
    assert result.order_id == order.pk
    assert stock(product) == 10
    assert not Order.objects.filter(pk=order.pk).exists()


def test_delete_cancelled_order_restores_nothing(place, product):
    order = place(quantity=3)
    lifecycle.update_order(order.pk, {'status': 'Cancelled'})

    result = lifecycle.delete_order(order.pk)

    assert result.restored == 0
    assert stock(product) == 10


def test_delete_missing_order():
    with pytest.raises(OrderNotFound):
        lifecycle.delete_order(12345)


def test_stock_conservation_across_lifecycle(place, product):
    orders = [place(quantity=q) for q in (1, 2, 3)]
    lifecycle.update_order(orders[0].pk, {'quantity': 2})
    lifecycle.update_order(orders[1].pk, {'status': 'Cancelled'})
    lifecycle.delete_order(orders[2].pk)

    held = sum(
        order.quantity
        for order in Order.objects.filter(product=product).exclude(status=OrderStatus.CANCELLED)
    )
    assert 10 - stock(product) == held == 2
    assert product.ledger_quantity == product.stock_qty


# ============================================
# READS
# ============================================

def test_list_filters(place):
    first = place(quantity=1, customer_name='Karim', customer_phone='01711000000')
    second = place(quantity=1, customer_name='Salma')
    lifecycle.update_order(second.pk, {'status': 'Cancelled'})

    assert list(lifecycle.list_orders(search='karim')) == [first]
    assert list(lifecycle.list_orders(search='01711')) == [first]
    assert list(lifecycle.list_orders(status='Cancelled')) == [lifecycle.get_order(second.pk)]
    assert list(lifecycle.list_orders(status='all')) == [lifecycle.get_order(second.pk), first]


def test_get_order_not_found():
    with pytest.raises(OrderNotFound):
        lifecycle.get_order(404)
