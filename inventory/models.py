import random

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils import timezone


class Category(models.Model):
    """
    Product category. Soft-deleted through `is_deleted`, never removed while
    products reference it.
    """

    TYPE_CHOICES = [
        ('electronics', 'Electronics'),
        ('accessories', 'Accessories'),
        ('home_appliances', 'Home Appliances'),
        ('computers', 'Computers'),
        ('mobile', 'Mobile'),
        ('audio_video', 'Audio & Video'),
        ('gaming', 'Gaming'),
        ('networking', 'Networking'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('draft', 'Draft'),
    ]

    name = models.CharField(max_length=100)
    category_code = models.CharField(max_length=20, unique=True, blank=True)
    description = models.TextField(max_length=500, blank=True, default='')
    category_type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_by = models.CharField(max_length=150, default='system')
    updated_by = models.CharField(max_length=150, blank=True, default='')
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'categories'

    def __str__(self):
        return f"{self.name} ({self.category_code})"

    def save(self, *args, **kwargs):
        if not self.category_code:
            self.category_code = self.generate_category_code()
        self.category_code = self.category_code.strip().upper()
        super().save(*args, **kwargs)

    @classmethod
    def generate_category_code(cls):
        """CAT-NNNN with a random 4 digit number not yet in use."""
        prefix = settings.INVENTORY_CONFIG['CATEGORY_CODE_PREFIX']
        while True:
            code = f"{prefix}-{random.randint(1000, 9999)}"
            if not cls.objects.filter(category_code=code).exists():
                return code

    @property
    def products_count(self):
        return self.products.filter(is_active=True).count()


class Product(models.Model):
    """
    Sellable product with an on-hand stock count.

    `stock_qty` only moves through StockEntry-backed operations: the opening
    stock at creation, direct edits (adjustment entries) and the order ledger
    in inventory.services.ledger (sale / return entries).
    """

    product_id = models.CharField(max_length=20, unique=True, blank=True, editable=False)
    name = models.CharField(max_length=200)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    description = models.TextField(blank=True, default='')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    stock_qty = models.PositiveIntegerField(default=0)
    image_url = models.URLField(max_length=500, blank=True, default='')
    purchase_by = models.CharField(max_length=150, blank=True, default='')
    created_by = models.CharField(max_length=150, default='system')
    updated_by = models.CharField(max_length=150, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product_id} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.product_id:
            self.product_id = self.generate_product_id()
        super().save(*args, **kwargs)

    @classmethod
    def generate_product_id(cls):
        """PRODUCT<yy><serial>, serial restarting each year."""
        config = settings.INVENTORY_CONFIG
        prefix = f"{config['PRODUCT_ID_PREFIX']}{timezone.localdate():%y}"
        last_id = (
            cls.objects.filter(product_id__startswith=prefix)
            .order_by('-pk')
            .values_list('product_id', flat=True)
            .first()
        )
        serial = 1
        if last_id:
            suffix = last_id[len(prefix):]
            if suffix.isdigit():
                serial = int(suffix) + 1
        return f"{prefix}{serial:0{config['PRODUCT_ID_SERIAL_LENGTH']}d}"

    @property
    def stock_status(self):
        threshold = settings.INVENTORY_CONFIG['LOW_STOCK_THRESHOLD']
        if self.stock_qty <= 0:
            return 'outofstock'
        if self.stock_qty <= threshold:
            return 'lowstock'
        return 'available'

    @property
    def ledger_quantity(self):
        """Stock implied by the audit trail; equals stock_qty when consistent."""
        return self.stock_entries.aggregate(total=Sum('quantity'))['total'] or 0


class StockEntry(models.Model):
    """
    One row per stock movement. Positive quantity = stock in,
    negative = stock out.
    """

    ENTRY_TYPE_CHOICES = [
        ('opening', 'Opening Stock'),
        ('purchase', 'Purchase'),
        ('sale', 'Sale'),
        ('return', 'Return'),
        ('adjustment', 'Adjustment'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='stock_entries')
    quantity = models.IntegerField()
    entry_type = models.CharField(max_length=20, choices=ENTRY_TYPE_CHOICES)
    stock_after = models.IntegerField(default=0)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    reference_id = models.CharField(max_length=100, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    created_by = models.CharField(max_length=150, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-pk']
        verbose_name_plural = 'stock entries'

    def __str__(self):
        return f"{self.get_entry_type_display()} {self.quantity:+d} {self.product.product_id}"

    @property
    def is_stock_in(self):
        return self.quantity > 0

    @property
    def is_stock_out(self):
        return self.quantity < 0

    @property
    def absolute_quantity(self):
        return abs(self.quantity)
