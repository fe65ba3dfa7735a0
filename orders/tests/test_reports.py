import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from backoffice.exceptions import ValidationError
from expenses.models import Expense
from orders.services import lifecycle, reports

pytestmark = pytest.mark.django_db

TODAY = datetime.date(2026, 10, 19)


def at(day, hour=12):
    return timezone.make_aware(datetime.datetime.combine(day, datetime.time(hour)))


@pytest.fixture
def sell(make_product):
    product = make_product(stock_qty=100)

    def sell_on(day, quantity=1, **extra):
        data = {
            'product_id': product.product_id,
            'product_name': product.name,
            'sale_price': Decimal('100'),
            'quantity': quantity,
            'order_date': at(day),
        }
        data.update(extra)
        return lifecycle.create_order(data)
    return sell_on


def test_range_report_zero_filled_without_orders():
    report = reports.range_report(TODAY - datetime.timedelta(days=2), TODAY)

    assert [day['date'] for day in report['daily']] == ['2026-10-17', '2026-10-18', '2026-10-19']
    assert all(day['sales'] == Decimal('0.00') and day['orders'] == 0 for day in report['daily'])
    assert report['total_sales'] == Decimal('0.00')
    assert report['by_status'] == {'Pending': 0, 'Processing': 0, 'Completed': 0, 'Cancelled': 0}
    assert report['by_payment_method']['Cash'] == {'orders': 0, 'amount': Decimal('0.00')}


def test_range_report_buckets_by_day_and_skips_cancelled(sell):
    yesterday = TODAY - datetime.timedelta(days=1)
    sell(yesterday, quantity=2)
    sell(TODAY, quantity=1, payment_method='Due')
    cancelled = sell(TODAY, quantity=5)
    lifecycle.update_order(cancelled.pk, {'status': 'Cancelled'})

    report = reports.range_report(yesterday, TODAY)

    assert report['daily'] == [
        {'date': '2026-10-18', 'sales': Decimal('200.00'), 'orders': 1, 'items': 2},
        {'date': '2026-10-19', 'sales': Decimal('100.00'), 'orders': 1, 'items': 1},
    ]
    assert report['total_sales'] == Decimal('300.00')
    assert report['total_orders'] == 2
    assert report['total_items'] == 3
    assert report['total_due'] == Decimal('100.00')
    assert report['by_status']['Pending'] == 2
    assert report['by_status']['Cancelled'] == 1
    assert report['by_payment_method']['Cash'] == {'orders': 1, 'amount': Decimal('200.00')}
    assert report['by_payment_method']['Due'] == {'orders': 1, 'amount': Decimal('100.00')}


def test_range_report_rejects_reversed_or_huge_ranges():
    with pytest.raises(ValidationError):
        reports.range_report(TODAY, TODAY - datetime.timedelta(days=1))
    with pytest.raises(ValidationError):
        reports.range_report(TODAY - datetime.timedelta(days=400), TODAY)


def test_financial_summary(sell):
    sell(TODAY, quantity=2)
    sell(TODAY.replace(day=2), quantity=1)
    sell(datetime.date(2026, 9, 30), quantity=4)

    summary = reports.financial_summary(today=TODAY)

    assert summary['daily'] == {'sales': Decimal('200.00'), 'orders': 1, 'items': 2}
    assert summary['monthly'] == {'sales': Decimal('300.00'), 'orders': 2, 'items': 3}
    assert len(summary['chart_data']) == 7
    assert summary['chart_data'][-1] == {
        'date': '2026-10-19', 'daily_sales': Decimal('200.00'), 'total_orders': 1, 'total_items': 2,
    }


def test_daily_summary_includes_recorded_expenses(sell):
    sell(TODAY, quantity=1)
    Expense.objects.create(
        expense_type='rent', amount=Decimal('40'), reason='October rent',
        expense_date=TODAY, expense_by='owner',
    )
    Expense.objects.create(
        expense_type='misc', amount=Decimal('5.50'), reason='Tea',
        expense_date=TODAY, expense_by='owner',
    )

    summary = reports.daily_summary(days=3, today=TODAY)

    assert [day['date'] for day in summary] == ['2026-10-17', '2026-10-18', '2026-10-19']
    assert summary[0]['daily_expense'] == Decimal('0.00')
    assert summary[-1] == {
        'date': '2026-10-19',
        'daily_sales': Decimal('100.00'),
        'total_orders': 1,
        'total_items': 1,
        'daily_expense': Decimal('45.50'),
    }


@pytest.mark.parametrize('days', [0, -1, 1000, '7'])
def test_daily_summary_rejects_bad_day_counts(days):
    with pytest.raises(ValidationError):
        reports.daily_summary(days=days, today=TODAY)
