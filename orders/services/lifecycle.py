"""
Order lifecycle: create, update and delete orders together with the product
stock they hold.

Every operation runs in one database transaction. A failed stock movement or
a failed order write rolls back both, so stock and orders never drift apart
through this module.
"""

import logging
from typing import NamedTuple

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from backoffice.exceptions import (
    DomainError,
    DuplicateOrderNumber,
    InvalidQuantity,
    OrderNotFound,
    PersistenceError,
    ValidationError,
)
from inventory.services import ledger
from orders.models import Order, OrderStatus, PaymentMethod
from orders.services.numbering import next_order_number
from orders.services.totals import compute_totals, parse_payment_method, to_money
from orders.services.transitions import parse_status, stock_delta

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('product_id', 'product_name', 'sale_price', 'quantity')

# Plain fields copied from the request onto the order as given
DESCRIPTIVE_FIELDS = ('product_name', 'category', 'unit', 'customer_name', 'customer_phone', 'customer_address', 'order_date')


class DeletedOrder(NamedTuple):
    order_id: int
    order: Order
    restored: int


def parse_quantity(value):
    if isinstance(value, bool):
        raise InvalidQuantity(f'Quantity must be a positive integer, got {value!r}', quantity=str(value))
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidQuantity(f'Quantity must be a positive integer, got {value!r}', quantity=str(value))
    return value


def _present(data, field):
    return data.get(field) not in (None, '')


def save_order(order, created=False):
    """Save inside a savepoint so a duplicate order number can be reported."""
    try:
        with transaction.atomic():
            order.save()
    except IntegrityError:
        if created and type(order).objects.filter(order_no=order.order_no).exists():
            raise DuplicateOrderNumber(order.order_no)
        raise


def run_atomic(operation, action):
    """Run `action` in a transaction; storage failures become PersistenceError."""
    try:
        with transaction.atomic():
            return action()
    except DomainError:
        raise
    except DatabaseError as e:
        logger.error(f"[ORDER {operation}] Database error: {e}", exc_info=True)
        raise PersistenceError()


# ============================================
# READS
# ============================================

def get_order(order_id):
    try:
        return Order.objects.select_related('product').get(pk=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise OrderNotFound(f'Order {order_id} not found', order_id=str(order_id))


def list_orders(status=None, start_date=None, end_date=None, search=None):
    """Orders newest first, filtered by status, order date range and search text."""
    queryset = Order.objects.select_related('product')

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
# CREATE
# ============================================

def create_order(data, created_by=None):
    """
    Create an order and take its quantity out of the product's stock.

    Raises ValidationError / InvalidQuantity for bad input, ProductNotFound,
    InsufficientStock (no order is created), DuplicateOrderNumber when the
    generated number was taken by a concurrent request, PersistenceError.
    """
    missing = [field for field in REQUIRED_FIELDS if not _present(data, field)]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            fields=missing,
        )

    quantity = parse_quantity(data['quantity'])
    sale_price = to_money(data['sale_price'], 'sale_price')
    payment_method = parse_payment_method(data.get('payment_method') or PaymentMethod.CASH)
    status = parse_status(data.get('status') or OrderStatus.PENDING)
    if status == OrderStatus.CANCELLED:
        raise ValidationError('An order cannot be created as Cancelled', field='status')

    created_by = data.get('created_by') or created_by
    order_no = next_order_number()

    def action():
        product = ledger.deduct(
            data['product_id'],
            quantity,
            reference_id=order_no,
            unit_price=sale_price,
            created_by=created_by or '',
            notes=f"Order {order_no}",
        )

        totals = compute_totals(
            sale_price,
            quantity,
            payment_method,
            paid_amount=data.get('paid_amount'),
            total=data.get('total'),
            delivery_charge=data.get('delivery_charge'),
            discount=data.get('discount'),
        )

        order = Order(
            order_no=order_no,
            product=product,
            sale_price=sale_price,
            quantity=quantity,
            payment_method=payment_method,
            status=status,
            unit_price=to_money(data['unit_price'], 'unit_price') if _present(data, 'unit_price') else product.unit_price,
            category=product.category.name,
            original_stock=product.stock_qty + quantity,
            remaining_stock=product.stock_qty,
            **totals.as_dict(),
        )
        for field in DESCRIPTIVE_FIELDS:
            if _present(data, field):
                setattr(order, field, data[field])
        if created_by:
            order.created_by = created_by

        save_order(order, created=True)
        return order

    order = run_atomic('CREATE', action)

    logger.info(
        f"[ORDER CREATED] #{order.order_no} | Product: {order.product.product_id} | "
        f"Qty: {order.quantity} | Grand Total: {order.grand_total} | "
        f"Payment: {order.payment_method} (paid {order.paid_amount}, due {order.due_amount}) | "
        f"Stock: {order.original_stock} → {order.remaining_stock}"
    )
    return order


# ============================================
# UPDATE
# ============================================

def update_order(order_id, data, updated_by=None):
    """
    Apply a partial change to an order.

    Quantity, sale price, payment details, delivery/discount and status can
    change together. Stock moves by the difference between what the order held
    before and what it holds after; the amounts are recomputed every time.
    Any failure leaves both the order and the stock untouched.
    """

    def action():
        try:
            order = Order.objects.select_for_update().select_related('product').get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(f'Order {order_id} not found', order_id=str(order_id))

        old_status, old_quantity = order.status, order.quantity
        new_status = parse_status(data['status']) if _present(data, 'status') else parse_status(old_status)
        new_quantity = parse_quantity(data['quantity']) if _present(data, 'quantity') else old_quantity

        delta = stock_delta(old_status, new_status, old_quantity, new_quantity)
        user = data.get('updated_by') or updated_by or ''
        if delta > 0:
            product = ledger.deduct(
                order.product.product_id, delta,
                reference_id=order.order_no, created_by=user,
                notes=f"Order {order.order_no} updated",
            )
            order.remaining_stock = product.stock_qty
        elif delta < 0:
            product = ledger.restore(
                order.product.product_id, -delta,
                reference_id=order.order_no, created_by=user,
                notes=f"Order {order.order_no} updated",
            )
            order.remaining_stock = product.stock_qty

        sale_price = to_money(data['sale_price'], 'sale_price') if _present(data, 'sale_price') else order.sale_price
        if _present(data, 'total'):
            total = data['total']
        elif _present(data, 'quantity') or _present(data, 'sale_price'):
            total = None
        else:
            total = order.total

        totals = compute_totals(
            sale_price,
            new_quantity,
            data.get('payment_method') or order.payment_method,
            paid_amount=data['paid_amount'] if _present(data, 'paid_amount') else order.paid_amount,
            total=total,
            delivery_charge=data['delivery_charge'] if _present(data, 'delivery_charge') else order.delivery_charge,
            discount=data['discount'] if _present(data, 'discount') else order.discount,
        )

        order.status = new_status
        order.quantity = new_quantity
        order.sale_price = sale_price
        order.payment_method = parse_payment_method(data.get('payment_method') or order.payment_method)
        if _present(data, 'unit_price'):
            order.unit_price = to_money(data['unit_price'], 'unit_price')
        for field in DESCRIPTIVE_FIELDS:
            if _present(data, field):
                setattr(order, field, data[field])
        for field, value in totals.as_dict().items():
            setattr(order, field, value)
        if user:
            order.updated_by = user

        save_order(order)
        return order, old_status, old_quantity, delta

    order, old_status, old_quantity, delta = run_atomic('UPDATE', action)

    logger.info(
        f"[ORDER UPDATED] #{order.order_no} | Status: {old_status} → {order.status} | "
        f"Qty: {old_quantity} → {order.quantity} | Stock delta: {-delta:+d} | "
        f"Grand Total: {order.grand_total} (paid {order.paid_amount}, due {order.due_amount})"
    )
    return order


# ============================================
# DELETE
# ============================================

def delete_order(order_id, deleted_by=None):
    """Delete an order, giving its quantity back to stock unless it was Cancelled."""

    def action():
        try:
            order = Order.objects.select_for_update().select_related('product').get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(f'Order {order_id} not found', order_id=str(order_id))

        restored = 0
        if order.holds_stock:
            ledger.restore(
                order.product.product_id, order.quantity,
                reference_id=order.order_no, created_by=deleted_by or '',
                notes=f"Order {order.order_no} deleted",
            )
            restored = order.quantity

        pk = order.pk
        order.delete()
        return DeletedOrder(order_id=pk, order=order, restored=restored)

    result = run_atomic('DELETE', action)

    logger.info(
        f"[ORDER DELETED] #{result.order.order_no} | Status: {result.order.status} | "
        f"Restored: {result.restored} units to {result.order.product.product_id}"
    )
    return result
