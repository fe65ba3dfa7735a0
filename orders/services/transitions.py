"""
Order status transitions and the stock movement each one implies.

While an order is not Cancelled its quantity is held out of the product's
stock. Leaving Cancelled takes the stock again, entering Cancelled gives it
back. Completed is final.
"""

import enum

from backoffice.exceptions import InvalidStatusTransition, ValidationError
from orders.models import OrderStatus


class InventoryEffect(str, enum.Enum):
    NONE = 'none'
    RESTORE = 'restore'
    DEDUCT = 'deduct'


_P = OrderStatus.PENDING
_R = OrderStatus.PROCESSING
_C = OrderStatus.COMPLETED
_X = OrderStatus.CANCELLED

TRANSITIONS = {
    (_P, _P): InventoryEffect.NONE,
    (_P, _R): InventoryEffect.NONE,
    (_P, _C): InventoryEffect.NONE,
    (_P, _X): InventoryEffect.RESTORE,
    (_R, _R): InventoryEffect.NONE,
    (_R, _C): InventoryEffect.NONE,
    (_R, _X): InventoryEffect.RESTORE,
    (_C, _C): InventoryEffect.NONE,
    (_X, _P): InventoryEffect.DEDUCT,
    (_X, _R): InventoryEffect.DEDUCT,
    (_X, _X): InventoryEffect.NONE,
}


def parse_status(value):
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(
            f'Unknown order status: {value!r}',
            field='status',
            choices=list(OrderStatus.values),
        )


def effect_of(from_status, to_status):
    from_status, to_status = parse_status(from_status), parse_status(to_status)
    try:
        return TRANSITIONS[(from_status, to_status)]
    except KeyError:
        raise InvalidStatusTransition(
            f'Cannot change order status from {from_status.value} to {to_status.value}',
            from_status=from_status.value,
            to_status=to_status.value,
        )


def stock_delta(from_status, to_status, old_quantity, new_quantity):
    """
    Units to take from stock (positive) or give back (negative) when an
    order moves between statuses and quantities in one update.
    """
    effect = effect_of(from_status, to_status)
    if effect is InventoryEffect.RESTORE:
        return -old_quantity
    if effect is InventoryEffect.DEDUCT:
        return new_quantity
    if parse_status(from_status) == OrderStatus.CANCELLED:
        return 0
    return new_quantity - old_quantity
