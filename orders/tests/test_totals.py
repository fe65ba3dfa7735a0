from decimal import Decimal

import pytest

from backoffice.exceptions import ValidationError
from orders.models import PaymentMethod
from orders.services.totals import compute_totals


@pytest.mark.parametrize('method', ['Cash', 'Card', 'Digital'])
def test_full_payment_methods_settle_grand_total(method):
    totals = compute_totals('100', 5, method)

    assert totals.total == Decimal('500.00')
    assert totals.total_amount == totals.total
    assert totals.grand_total == Decimal('500.00')
    assert totals.paid_amount == totals.grand_total
    assert totals.due_amount == Decimal('0.00')


def test_due_method_leaves_everything_owing():
    totals = compute_totals(Decimal('12.50'), 2, PaymentMethod.DUE, paid_amount=10)

    assert totals.paid_amount == Decimal('0.00')
    assert totals.due_amount == Decimal('25.00')


@pytest.mark.parametrize('paid, expected_paid', [
    (None, '0.00'),
    ('40', '40.00'),
    ('-5', '0.00'),
    ('999', '100.00'),
])
def test_partial_payment_is_clamped(paid, expected_paid):
    totals = compute_totals('50', 2, 'Partial', paid_amount=paid)

    assert totals.paid_amount == Decimal(expected_paid)
    assert totals.paid_amount + totals.due_amount == totals.grand_total
    assert totals.due_amount >= 0


def test_explicit_total_wins_over_price_times_quantity():
    totals = compute_totals('100', 3, 'Cash', total='250')

    assert totals.total == Decimal('250.00')
    assert totals.grand_total == Decimal('250.00')


def test_delivery_and_discount_adjust_grand_total():
    totals = compute_totals('100', 2, 'Partial', paid_amount='50', delivery_charge='60', discount='10')

    assert totals.total == Decimal('200.00')
    assert totals.grand_total == Decimal('250.00')
    assert totals.due_amount == Decimal('200.00')


def test_grand_total_never_negative():
    totals = compute_totals('10', 1, 'Cash', discount='50')

    assert totals.grand_total == Decimal('0.00')
    assert totals.paid_amount == Decimal('0.00')


def test_recomputing_from_stored_fields_is_idempotent():
    first = compute_totals('33.33', 3, 'Partial', paid_amount='45.5', delivery_charge='5', discount='1')
    again = compute_totals(
        '33.33', 3, 'Partial',
        paid_amount=first.paid_amount,
        total=first.total,
        delivery_charge=first.delivery_charge,
        discount=first.discount,
    )

    assert again == first


def test_unknown_payment_method():
    with pytest.raises(ValidationError) as excinfo:
        compute_totals('10', 1, 'Cheque')

    assert 'Partial' in excinfo.value.details['choices']


@pytest.mark.parametrize('kwargs', [
    {'sale_price': 'ten'},
    {'sale_price': '-1'},
    {'discount': '-2'},
])
def test_bad_amounts_rejected(kwargs):
    arguments = {'sale_price': '10', 'quantity': 1, 'payment_method': 'Cash', **kwargs}
    with pytest.raises(ValidationError):
        compute_totals(**arguments)
