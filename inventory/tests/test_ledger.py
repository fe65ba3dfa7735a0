from decimal import Decimal
from unittest import mock

import pytest

from backoffice.exceptions import InsufficientStock, InvalidQuantity, ProductNotFound, ValidationError
from inventory.models import StockEntry
from inventory.services import ledger
from inventory.services.ledger import StockOperation

pytestmark = pytest.mark.django_db


def test_deduct_lowers_stock_and_records_sale_entry(product):
    updated = ledger.adjust(product.product_id, 4, StockOperation.DEDUCT, reference_id='2610001')

    assert updated.stock_qty == 6
    product.refresh_from_db()
    assert product.stock_qty == 6

    entry = product.stock_entries.get(entry_type='sale')
    assert entry.quantity == -4
    assert entry.stock_after == 6
    assert entry.reference_id == '2610001'
    assert entry.total_amount == Decimal('400.00')


def test_restore_adds_stock_without_upper_bound(product):
    updated = ledger.restore(product.product_id, 25)

    assert updated.stock_qty == 35
    entry = product.stock_entries.get(entry_type='return')
    assert entry.quantity == 25


def test_ledger_quantity_matches_stock_after_moves(product):
    ledger.deduct(product.product_id, 3)
    ledger.restore(product.product_id, 1)
    ledger.deduct(product.product_id, 5)

    product.refresh_from_db()
    assert product.stock_qty == 3
    assert product.ledger_quantity == product.stock_qty


def test_deduct_more_than_available_changes_nothing(product):
    with pytest.raises(InsufficientStock) as excinfo:
        ledger.deduct(product.product_id, 11)

    assert excinfo.value.available == 10
    assert excinfo.value.requested == 11
    assert excinfo.value.as_dict()['error'] == 'insufficient_stock'
    product.refresh_from_db()
    assert product.stock_qty == 10
    assert not product.stock_entries.filter(entry_type='sale').exists()


def test_deduct_exact_stock_reaches_zero(product):
    updated = ledger.deduct(product.product_id, 10)

    assert updated.stock_qty == 0
    assert updated.stock_status == 'outofstock'


@pytest.mark.parametrize('quantity', [0, -3, 1.5, '2', True, None])
def test_invalid_quantity_rejected(product, quantity):
    with pytest.raises(InvalidQuantity):
        ledger.deduct(product.product_id, quantity)

    product.refresh_from_db()
    assert product.stock_qty == 10


def test_unknown_product():
    with pytest.raises(ProductNotFound):
        ledger.restore('PRODUCT9999', 1)


def test_unknown_operation(product):
    with pytest.raises(ValidationError):
        ledger.adjust(product.product_id, 1, 'steal')


def test_lost_race_on_conditional_update_raises_insufficient_stock(product):
    # The guarded UPDATE matches no row when another request took the stock first
    with mock.patch('django.db.models.query.QuerySet.update', return_value=0):
        with pytest.raises(InsufficientStock):
            ledger.deduct(product.product_id, 2)

    assert StockEntry.objects.filter(product=product, entry_type='sale').count() == 0
