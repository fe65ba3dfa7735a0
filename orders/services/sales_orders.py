"""
Multi-item sales orders.

    line total   = sale_price * quantity + vat + tax
    total_amount = sum of line totals
    grand_total  = max(0, total_amount + delivery_charge - discount)

Sales orders record the sale and the customer; they never touch product
stock. Deleting is soft: the order is flagged `is_deleted`, set to Cancelled
and disappears from lists, lookups and summaries.
"""

import logging
from decimal import ROUND_HALF_UP

from django.conf import settings
from django.db.models import Q

from backoffice.exceptions import OrderNotFound, ProductNotFound, ValidationError
from inventory.models import Product
from orders.models import OrderStatus, PaymentMethod, SalesOrder, SalesOrderItem
from orders.services.lifecycle import parse_quantity, run_atomic, save_order
from orders.services.numbering import next_order_number
from orders.services.totals import CENT, ZERO, parse_payment_method, to_money
from orders.services.transitions import parse_status

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ('customer_name', 'customer_phone', 'customer_address')


def _present(data, field):
    return data.get(field) not in (None, '')


def line_total(sale_price, quantity, vat=ZERO, tax=ZERO):
    return (sale_price * quantity + vat + tax).quantize(CENT, rounding=ROUND_HALF_UP)


def grand_total(total_amount, delivery_charge, discount):
    return max(ZERO, total_amount + delivery_charge - discount)


def build_items(items):
    """
    Validate raw line dicts and return unsaved SalesOrderItem objects.

    Each line needs product_id, quantity and sale_price; product_name,
    category and unit_price default to the product's own values.
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationError('Order must contain at least one item', field='items')

    lines = []
    for index, item in enumerate(items):
        missing = [field for field in ('product_id', 'quantity', 'sale_price') if not _present(item, field)]
        if missing:
            raise ValidationError(
                f"Item {index + 1} is missing: {', '.join(missing)}",
                field='items',
                item=index,
                fields=missing,
            )

        try:
            product = Product.objects.select_related('category').get(product_id=item['product_id'])
        except Product.DoesNotExist:
            raise ProductNotFound(f"Product {item['product_id']} not found", product_id=item['product_id'])

        quantity = parse_quantity(item['quantity'])
        sale_price = to_money(item['sale_price'], 'sale_price')
        vat = to_money(item.get('vat') or 0, 'vat')
        tax = to_money(item.get('tax') or 0, 'tax')

        lines.append(SalesOrderItem(
            product=product,
            product_name=item.get('product_name') or product.name,
            category=item.get('category') or product.category.name,
            unit_price=to_money(item['unit_price'], 'unit_price') if _present(item, 'unit_price') else product.unit_price,
            sale_price=sale_price,
            quantity=quantity,
            vat=vat,
            tax=tax,
            total=line_total(sale_price, quantity, vat, tax),
        ))
    return lines


def _replace_items(order, lines):
    order.items.all().delete()
    for line in lines:
        line.order = order
    SalesOrderItem.objects.bulk_create(lines)


# ============================================
# READS
# ============================================

def get_sales_order(order_id):
    try:
        return SalesOrder.objects.prefetch_related('items').get(pk=order_id, is_deleted=False)
    except (SalesOrder.DoesNotExist, ValueError, TypeError):
        raise OrderNotFound(f'Sales order {order_id} not found', order_id=str(order_id))


def list_sales_orders(status=None, start_date=None, end_date=None, search=None):
    queryset = SalesOrder.objects.filter(is_deleted=False).prefetch_related('items')

    if status and status != 'all':
        queryset = queryset.filter(status=parse_status(status))
    if start_date:
        queryset = queryset.filter(order_date__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(order_date__date__lte=end_date)
    if search:
        queryset = queryset.filter(
            Q(customer_name__icontains=search) |
            Q(customer_phone__icontains=search) |
            Q(order_no__icontains=search)
        )

    return queryset.order_by('-created_at', '-pk')


# ============================================
# WRITES
# ============================================

def create_sales_order(data, created_by=None):
    """
    Raises ValidationError (missing customer details, no items, bad amounts),
    ProductNotFound, DuplicateOrderNumber, PersistenceError.
    """
    missing = [field for field in CUSTOMER_FIELDS if not _present(data, field)]
    if missing:
        raise ValidationError(
            'Customer name, phone and address are required',
            fields=missing,
        )

    payment_method = parse_payment_method(data.get('payment_method') or PaymentMethod.CASH)
    status = parse_status(data.get('status') or OrderStatus.PENDING)
    delivery_charge = to_money(data.get('delivery_charge') or 0, 'delivery_charge')
    discount = to_money(data.get('discount') or 0, 'discount')
    created_by = data.get('created_by') or created_by
    scheme = settings.ORDERS_CONFIG['SALES_ORDER_NUMBER_SCHEME']

    def action():
        lines = build_items(data.get('items'))
        total_amount = sum((line.total for line in lines), ZERO)

        order = SalesOrder(
            order_no=next_order_number(scheme=scheme, model=SalesOrder),
            payment_method=payment_method,
            status=status,
            total_amount=total_amount,
            delivery_charge=delivery_charge,
            discount=discount,
            grand_total=grand_total(total_amount, delivery_charge, discount),
            **{field: data[field] for field in CUSTOMER_FIELDS},
        )
        if _present(data, 'order_date'):
            order.order_date = data['order_date']
        if created_by:
            order.created_by = created_by

        save_order(order, created=True)
        _replace_items(order, lines)
        return order

    order = run_atomic('CREATE', action)

    logger.info(
        f"[SALES ORDER CREATED] #{order.order_no} | Customer: {order.customer_name} | "
        f"Items: {order.total_items} | Grand Total: {order.grand_total} | Payment: {order.payment_method}"
    )
    return get_sales_order(order.pk)


def update_sales_order(order_id, data, updated_by=None):
    """
    Apply a partial change. New `items` replace every line; totals are
    recomputed from the lines and the (new or stored) delivery/discount.
    """

    def action():
        try:
            order = SalesOrder.objects.select_for_update().get(pk=order_id, is_deleted=False)
        except (SalesOrder.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(f'Sales order {order_id} not found', order_id=str(order_id))

        if 'items' in data:
            lines = build_items(data['items'])
            _replace_items(order, lines)
            order.total_amount = sum((line.total for line in lines), ZERO)
        if _present(data, 'delivery_charge'):
            order.delivery_charge = to_money(data['delivery_charge'], 'delivery_charge')
        if _present(data, 'discount'):
            order.discount = to_money(data['discount'], 'discount')
        order.grand_total = grand_total(order.total_amount, order.delivery_charge, order.discount)

        if _present(data, 'status'):
            order.status = parse_status(data['status'])
        if _present(data, 'payment_method'):
            order.payment_method = parse_payment_method(data['payment_method'])
        for field in (*CUSTOMER_FIELDS, 'order_date'):
            if _present(data, field):
                setattr(order, field, data[field])
        user = data.get('updated_by') or updated_by
        if user:
            order.updated_by = user

        save_order(order)
        return order

    order = run_atomic('UPDATE', action)

    logger.info(
        f"[SALES ORDER UPDATED] #{order.order_no} | Status: {order.status} | "
        f"Grand Total: {order.grand_total}"
    )
    return get_sales_order(order.pk)


def delete_sales_order(order_id, deleted_by=None):
    """Soft delete: flag the order and mark it Cancelled."""

    def action():
        try:
            order = SalesOrder.objects.select_for_update().get(pk=order_id, is_deleted=False)
        except (SalesOrder.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(f'Sales order {order_id} not found', order_id=str(order_id))

        order.is_deleted = True
        order.status = OrderStatus.CANCELLED
        if deleted_by:
            order.updated_by = deleted_by
        order.save(update_fields=['is_deleted', 'status', 'updated_by', 'updated_at'])
        return order

    order = run_atomic('DELETE', action)

    logger.info(f"[SALES ORDER DELETED] #{order.order_no} | By: {deleted_by or 'system'}")
    return order
