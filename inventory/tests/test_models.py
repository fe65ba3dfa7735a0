from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from inventory.models import Category, Product

pytestmark = pytest.mark.django_db


def test_category_code_generated_and_upper_cased():
    generated = Category.objects.create(name='Audio', category_type='audio_video')
    given = Category.objects.create(name='Games', category_type='gaming', category_code='cat-games')

    assert generated.category_code.startswith('CAT-')
    assert given.category_code == 'CAT-GAMES'


def test_product_ids_are_sequential_within_the_year(category):
    first = Product.objects.create(name='A', category=category, sale_price=1)
    second = Product.objects.create(name='B', category=category, sale_price=1)

    prefix = f"PRODUCT{timezone.localdate():%y}"
    assert first.product_id == f'{prefix}01'
    assert second.product_id == f'{prefix}02'


def test_opening_stock_entry_written_for_new_product(product):
    entry = product.stock_entries.get()

    assert entry.entry_type == 'opening'
    assert entry.quantity == 10
    assert entry.stock_after == 10
    assert entry.total_amount == Decimal('800.00')
    assert product.ledger_quantity == 10


def test_no_opening_entry_without_stock(make_product):
    product = make_product(stock_qty=0)

    assert not product.stock_entries.exists()
    assert product.stock_status == 'outofstock'


def test_stock_status_thresholds(make_product):
    assert make_product(stock_qty=5).stock_status == 'lowstock'
    assert make_product(stock_qty=6).stock_status == 'available'


def test_products_count_ignores_inactive(category, make_product):
    make_product()
    hidden = make_product()
    hidden.is_active = False
    hidden.save()

    assert category.products_count == 1


def test_reconcile_stock_reports_drift(make_product):
    balanced = make_product(name='Balanced')
    drifted = make_product(name='Drifted')
    Product.objects.filter(pk=drifted.pk).update(stock_qty=7)

    out = StringIO()
    call_command('reconcile_stock', stdout=out)

    output = out.getvalue()
    assert drifted.product_id in output
    assert 'drift=-3' in output
    assert balanced.product_id not in output
    assert '1 of 2 products out of balance' in output


def test_reconcile_stock_all_balanced(product):
    out = StringIO()
    call_command('reconcile_stock', product=product.product_id, stdout=out)

    assert 'All 1 products balanced' in out.getvalue()
