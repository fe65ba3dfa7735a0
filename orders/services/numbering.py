"""
Human readable order numbers.

An order number is a date prefix followed by a zero padded serial that
restarts with every period:

    monthly  %y%m + 3 digits   2610001, 2610002, ...
    daily    %m%d + 2 digits   101901, 101902, ...

The next serial is read from the most recently created order in the same
period. Two requests racing in one period can compute the same number; the
unique constraint on order_no rejects the second write.

If the lookup itself fails the number falls back to the prefix plus the last
digits of the current epoch milliseconds, so order creation is never blocked
by numbering. Numbers issued this way are not sequential.
"""

import logging
import time
from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.utils import timezone

from orders.models import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumberScheme:
    name: str
    date_format: str
    width: int

    def prefix(self, today):
        return today.strftime(self.date_format)

    def format(self, prefix, serial):
        return f"{prefix}{serial:0{self.width}d}"


SCHEMES = {
    'monthly': NumberScheme('monthly', '%y%m', 3),
    'daily': NumberScheme('daily', '%m%d', 2),
}


def get_scheme(name=None):
    name = name or settings.ORDERS_CONFIG['ORDER_NUMBER_SCHEME']
    try:
        return SCHEMES[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown ORDER_NUMBER_SCHEME {name!r}, expected one of {sorted(SCHEMES)}"
        )


def fallback_number(prefix, width, now_ms=None):
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}{str(now_ms)[-width:]}"


def next_serial(last_number, prefix):
    """Serial following `last_number`; 1 when there is none or it is not numeric."""
    if not last_number:
        return 1
    suffix = last_number[len(prefix):]
    if not suffix.isdigit():
        return 1
    return int(suffix) + 1


def next_order_number(today=None, scheme=None, model=Order):
    """Next number for `model` (Order or SalesOrder) in today's period."""
    scheme = get_scheme(scheme)
    today = today or timezone.localdate()
    prefix = scheme.prefix(today)

    try:
        last_number = (
            model.objects.filter(order_no__startswith=prefix)
            .order_by('-created_at', '-pk')
            .values_list('order_no', flat=True)
            .first()
        )
    except DatabaseError as e:
        order_no = fallback_number(prefix, scheme.width)
        logger.warning(
            f"[ORDER NUMBER] Lookup failed ({e}); using fallback {order_no}, "
            f"sequence not guaranteed"
        )
        return order_no

    return scheme.format(prefix, next_serial(last_number, prefix))
