"""
Inventory ledger adjuster.

Every stock change driven by an order goes through `adjust()`:

    adjust('PRODUCT2601', 5, StockOperation.DEDUCT)   # order placed
    adjust('PRODUCT2601', 2, StockOperation.RESTORE)  # quantity lowered / cancelled

A call writes the product row once (conditional UPDATE, so two requests
racing for the last units cannot both succeed) and records one StockEntry.
Restores are not capped: restoring more than was deducted is accepted.
"""

import enum
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from backoffice.exceptions import InsufficientStock, InvalidQuantity, ProductNotFound, ValidationError
from inventory.models import Product, StockEntry

logger = logging.getLogger(__name__)


class StockOperation(str, enum.Enum):
    DEDUCT = 'deduct'
    RESTORE = 'restore'


def _validate_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(
            f'Quantity must be a positive integer, got {quantity!r}',
            quantity=str(quantity),
        )


def adjust(product_id, quantity, operation, *, reference_id='', unit_price=None, created_by='', notes=''):
    """
    Apply a signed stock movement to a product and return the updated product.

    Raises InvalidQuantity, ProductNotFound, or InsufficientStock (deduct only).
    Nothing is written when an error is raised.
    """
    _validate_quantity(quantity)
    try:
        operation = StockOperation(operation)
    except ValueError:
        raise ValidationError(f'Unknown stock operation: {operation!r}')

    with transaction.atomic():
        try:
            product = Product.objects.get(product_id=product_id)
        except Product.DoesNotExist:
            raise ProductNotFound(f'Product {product_id} not found', product_id=product_id)

        old_quantity = product.stock_qty

        if operation is StockOperation.DEDUCT:
            if product.stock_qty < quantity:
                raise InsufficientStock(product_id, available=product.stock_qty, requested=quantity)

            updated = Product.objects.filter(
                pk=product.pk, stock_qty__gte=quantity
            ).update(stock_qty=F('stock_qty') - quantity, updated_at=timezone.now())

            if not updated:
                # Another request took the stock between the read and the write
                product.refresh_from_db(fields=['stock_qty'])
                raise InsufficientStock(product_id, available=product.stock_qty, requested=quantity)

            signed_quantity = -quantity
            entry_type = 'sale'
        else:
            Product.objects.filter(pk=product.pk).update(
                stock_qty=F('stock_qty') + quantity, updated_at=timezone.now()
            )
            signed_quantity = quantity
            entry_type = 'return'

        product.refresh_from_db()

        price = product.sale_price if unit_price is None else unit_price
        StockEntry.objects.create(
            product=product,
            quantity=signed_quantity,
            entry_type=entry_type,
            stock_after=product.stock_qty,
            unit_price=price,
            total_amount=abs(signed_quantity) * price,
            reference_id=reference_id,
            notes=notes,
            created_by=created_by,
        )

    logger.info(
        f"[STOCK {operation.value.upper()}] Product: {product.product_id} | "
        f"Quantity: {quantity} | Stock: {old_quantity} → {product.stock_qty} | "
        f"Ref: {reference_id or 'N/A'}"
    )

    if product.stock_qty <= settings.INVENTORY_CONFIG['LOW_STOCK_THRESHOLD']:
        logger.warning(
            f"LOW STOCK ALERT: {product.name} ({product.product_id}) "
            f"has only {product.stock_qty} units remaining"
        )

    return product


def deduct(product_id, quantity, **kwargs):
    return adjust(product_id, quantity, StockOperation.DEDUCT, **kwargs)


def restore(product_id, quantity, **kwargs):
    return adjust(product_id, quantity, StockOperation.RESTORE, **kwargs)
