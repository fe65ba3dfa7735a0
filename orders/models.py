from django.conf import settings
from django.db import models
from django.utils import timezone

from inventory.models import Product


class PaymentMethod(models.TextChoices):
    CASH = 'Cash', 'Cash'
    CARD = 'Card', 'Card'
    DIGITAL = 'Digital', 'Digital'
    DUE = 'Due', 'Due'
    PARTIAL = 'Partial', 'Partial'

    @classmethod
    def full_payment(cls):
        """Methods that settle the grand total when the order is placed."""
        return frozenset({cls.CASH, cls.CARD, cls.DIGITAL})


class OrderStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    PROCESSING = 'Processing', 'Processing'
    COMPLETED = 'Completed', 'Completed'
    CANCELLED = 'Cancelled', 'Cancelled'


def default_customer_name():
    return settings.ORDERS_CONFIG['DEFAULT_CUSTOMER_NAME']


def default_created_by():
    return settings.ORDERS_CONFIG['DEFAULT_CREATED_BY']


class Order(models.Model):
    """
    Single-product customer order.

    Stock for `quantity` units is held against the product while the order is
    not Cancelled. All writes go through orders.services.lifecycle so the
    product stock and the order stay in step.
    """

    order_no = models.CharField(max_length=20, unique=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='orders')
    product_name = models.CharField(max_length=200)
    category = models.CharField(max_length=100, blank=True, default='')

    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()
    unit = models.CharField(max_length=20, default='pcs')

    total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    delivery_charge = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    due_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)

    customer_name = models.CharField(max_length=150, default=default_customer_name)
    customer_phone = models.CharField(max_length=30, default='N/A')
    customer_address = models.CharField(max_length=255, default='N/A')

    # Stock snapshot around the order's own deduction
    original_stock = models.PositiveIntegerField(null=True, blank=True)
    remaining_stock = models.PositiveIntegerField(null=True, blank=True)

    order_date = models.DateTimeField(default=timezone.now)
    created_by = models.CharField(max_length=150, default=default_created_by)
    updated_by = models.CharField(max_length=150, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-pk']
        indexes = [
            models.Index(fields=['status', 'order_date'], name='order_status_date_idx'),
        ]

    def __str__(self):
        return f"Order #{self.order_no} - {self.product_name} x{self.quantity}"

    @property
    def holds_stock(self):
        return self.status != OrderStatus.CANCELLED


class SalesOrder(models.Model):
    """
    Multi-item customer sales order.

    Lines live in SalesOrderItem. The order records what was sold and what the
    customer owes; it does not move product stock. Deleting marks the order
    `is_deleted` and Cancelled, and deleted orders are hidden from lists and
    summaries. Writes go through orders.services.sales_orders.
    """

    order_no = models.CharField(max_length=20, unique=True)
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=30)
    customer_address = models.CharField(max_length=255)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    delivery_charge = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    is_deleted = models.BooleanField(default=False)

    order_date = models.DateTimeField(default=timezone.now)
    created_by = models.CharField(max_length=150, default=default_created_by)
    updated_by = models.CharField(max_length=150, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-pk']
        indexes = [
            models.Index(fields=['is_deleted', 'order_date'], name='salesorder_deleted_date_idx'),
        ]

    def __str__(self):
        return f"Sales order #{self.order_no} - {self.customer_name}"

    @property
    def total_items(self):
        return sum(item.quantity for item in self.items.all())


class SalesOrderItem(models.Model):
    """One product line: total = sale_price * quantity + vat + tax"""

    order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='sales_order_items')
    product_name = models.CharField(max_length=200)
    category = models.CharField(max_length=100, blank=True, default='')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()
    vat = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    class Meta:
        ordering = ['pk']

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
