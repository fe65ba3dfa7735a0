"""
Read-only sales summaries. Cancelled orders never count towards sales, and
neither do deleted sales orders. Days without orders are present with zero
values.
"""

import datetime
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from backoffice.exceptions import ValidationError
from expenses.models import Expense
from orders.models import Order, OrderStatus, PaymentMethod, SalesOrder, SalesOrderItem

ZERO = Decimal('0.00')
MAX_RANGE_DAYS = 366


def _active_orders():
    return Order.objects.exclude(status=OrderStatus.CANCELLED)


def _in_dates(queryset, start, end):
    return queryset.filter(order_date__date__gte=start, order_date__date__lte=end)


def _days(start, end):
    day = start
    while day <= end:
        yield day
        day += datetime.timedelta(days=1)


def _daily_sales(start, end):
    """{date: (sales, orders, items)} for non-cancelled orders in the range."""
    rows = (
        _in_dates(_active_orders(), start, end)
        .annotate(day=TruncDate('order_date'))
        .values('day')
        .annotate(sales=Sum('grand_total'), orders=Count('id'), items=Sum('quantity'))
    )
    return {row['day']: (row['sales'] or ZERO, row['orders'], row['items'] or 0) for row in rows}


def _day_count(days):
    days = settings.ORDERS_CONFIG['SUMMARY_DAYS'] if days is None else days
    if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= MAX_RANGE_DAYS:
        raise ValidationError(f'days must be between 1 and {MAX_RANGE_DAYS}', field='days')
    return days


def _totals(queryset):
    result = queryset.aggregate(sales=Sum('grand_total'), orders=Count('id'), items=Sum('quantity'))
    return {
        'sales': result['sales'] or ZERO,
        'orders': result['orders'],
        'items': result['items'] or 0,
    }


def range_report(start, end):
    """
    Sales per day between `start` and `end` (inclusive) with totals, order
    counts by status, and counts and amounts by payment method.
    """
    if start > end:
        raise ValidationError('start_date must not be after end_date')
    if (end - start).days >= MAX_RANGE_DAYS:
        raise ValidationError(f'Date range cannot exceed {MAX_RANGE_DAYS} days')

    daily = _daily_sales(start, end)
    days = []
    for day in _days(start, end):
        sales, orders, items = daily.get(day, (ZERO, 0, 0))
        days.append({'date': day.isoformat(), 'sales': sales, 'orders': orders, 'items': items})

    all_orders = _in_dates(Order.objects.all(), start, end)
    by_status = {value: 0 for value in OrderStatus.values}
    for row in all_orders.values('status').annotate(count=Count('id')):
        by_status[row['status']] = row['count']

    active = _in_dates(_active_orders(), start, end)
    by_payment_method = {value: {'orders': 0, 'amount': ZERO} for value in PaymentMethod.values}
    for row in active.values('payment_method').annotate(count=Count('id'), amount=Sum('grand_total')):
        by_payment_method[row['payment_method']] = {
            'orders': row['count'],
            'amount': row['amount'] or ZERO,
        }

    totals = _totals(active)
    return {
        'start_date': start.isoformat(),
        'end_date': end.isoformat(),
        'total_sales': totals['sales'],
        'total_orders': totals['orders'],
        'total_items': totals['items'],
        'total_due': active.aggregate(due=Sum('due_amount'))['due'] or ZERO,
        'by_status': by_status,
        'by_payment_method': by_payment_method,
        'daily': days,
    }


def financial_summary(today=None):
    """Today's and this month's sales, plus a chart of the last few days."""
    today = today or timezone.localdate()
    month_start = today.replace(day=1)
    chart_days = settings.ORDERS_CONFIG['SUMMARY_DAYS']
    chart_start = today - datetime.timedelta(days=chart_days - 1)

    daily = _daily_sales(chart_start, today)
    chart = []
    for day in _days(chart_start, today):
        sales, orders, items = daily.get(day, (ZERO, 0, 0))
        chart.append({'date': day.isoformat(), 'daily_sales': sales, 'total_orders': orders, 'total_items': items})

    return {
        'daily': _totals(_in_dates(_active_orders(), today, today)),
        'monthly': _totals(_in_dates(_active_orders(), month_start, today)),
        'chart_data': chart,
    }


def daily_summary(days=None, today=None):
    """Sales, order count and recorded expenses for each of the last `days` days."""
    days = _day_count(days)

    today = today or timezone.localdate()
    start = today - datetime.timedelta(days=days - 1)

    daily = _daily_sales(start, today)
    expenses = {
        row['expense_date']: row['amount'] or ZERO
        for row in Expense.objects.filter(expense_date__gte=start, expense_date__lte=today)
        .values('expense_date')
        .annotate(amount=Sum('amount'))
    }

    summary = []
    for day in _days(start, today):
        sales, orders, items = daily.get(day, (ZERO, 0, 0))
        summary.append({
            'date': day.isoformat(),
            'daily_sales': sales,
            'total_orders': orders,
            'total_items': items,
            'daily_expense': expenses.get(day, ZERO),
        })
    return summary


# ============================================
# SALES ORDERS
# ============================================

def _active_sales_orders():
    return SalesOrder.objects.filter(is_deleted=False).exclude(status=OrderStatus.CANCELLED)


def _sales_order_totals(start, end):
    orders = _in_dates(_active_sales_orders(), start, end)
    result = orders.aggregate(sales=Sum('grand_total'), orders=Count('id'))
    items = SalesOrderItem.objects.filter(order__in=orders).aggregate(items=Sum('quantity'))['items']
    return {
        'sales': result['sales'] or ZERO,
        'orders': result['orders'],
        'items': items or 0,
    }


def sales_order_financial_summary(today=None):
    """Today's and this month's multi-item sales, orders and items sold."""
    today = today or timezone.localdate()
    return {
        'daily': _sales_order_totals(today, today),
        'monthly': _sales_order_totals(today.replace(day=1), today),
    }


def sales_order_daily_summary(days=None, today=None):
    days = _day_count(days)
    today = today or timezone.localdate()
    start = today - datetime.timedelta(days=days - 1)

    orders = _in_dates(_active_sales_orders(), start, today)
    sales = {
        row['day']: (row['sales'] or ZERO, row['orders'])
        for row in orders.annotate(day=TruncDate('order_date'))
        .values('day')
        .annotate(sales=Sum('grand_total'), orders=Count('id'))
    }
    items = {
        row['day']: row['items'] or 0
        for row in SalesOrderItem.objects.filter(order__in=orders)
        .annotate(day=TruncDate('order__order_date'))
        .values('day')
        .annotate(items=Sum('quantity'))
    }

    summary = []
    for day in _days(start, today):
        day_sales, day_orders = sales.get(day, (ZERO, 0))
        summary.append({
            'date': day.isoformat(),
            'daily_sales': day_sales,
            'total_orders': day_orders,
            'total_items': items.get(day, 0),
        })
    return summary
