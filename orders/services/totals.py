"""
Derived order amounts. Pure functions, no database access.

    total        = sale_price * quantity (an explicit total wins)
    total_amount = total
    grand_total  = max(0, total + delivery_charge - discount)

Payment split:
    Cash / Card / Digital  paid = grand_total, due = 0
    Due                    paid = 0,           due = grand_total
    Partial                paid = clamp(paid_amount, 0, grand_total), due = the rest

Feeding a stored order's own fields back in reproduces its stored amounts.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from backoffice.exceptions import ValidationError
from orders.models import PaymentMethod

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


@dataclass(frozen=True)
class Totals:
    total: Decimal
    total_amount: Decimal
    delivery_charge: Decimal
    discount: Decimal
    grand_total: Decimal
    paid_amount: Decimal
    due_amount: Decimal

    def as_dict(self):
        return asdict(self)


def to_money(value, field, *, allow_negative=False):
    """Decimal rounded to cents; raises ValidationError for anything else."""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number', field=field)
    try:
        amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f'{field} must be a number', field=field)
    if not amount.is_finite():
        raise ValidationError(f'{field} must be a number', field=field)
    if amount < 0 and not allow_negative:
        raise ValidationError(f'{field} cannot be negative', field=field)
    return amount


def parse_payment_method(value):
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(
            f'Unknown payment method: {value!r}',
            field='payment_method',
            choices=list(PaymentMethod.values),
        )


def compute_totals(sale_price, quantity, payment_method, *, paid_amount=None, total=None,
                   delivery_charge=0, discount=0):
    payment_method = parse_payment_method(payment_method)
    sale_price = to_money(sale_price, 'sale_price')
    delivery_charge = to_money(delivery_charge or 0, 'delivery_charge')
    discount = to_money(discount or 0, 'discount')

    if total is None:
        total = (sale_price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        total = to_money(total, 'total')

    grand_total = max(ZERO, total + delivery_charge - discount)

    if payment_method in PaymentMethod.full_payment():
        paid = grand_total
    elif payment_method == PaymentMethod.DUE:
        paid = ZERO
    else:
        paid = ZERO if paid_amount is None else to_money(paid_amount, 'paid_amount', allow_negative=True)
        paid = min(max(paid, ZERO), grand_total)

    return Totals(
        total=total,
        total_amount=total,
        delivery_charge=delivery_charge,
        discount=discount,
        grand_total=grand_total,
        paid_amount=paid,
        due_amount=grand_total - paid,
    )
