from django.conf import settings
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from .models import Product, StockEntry
import logging

logger = logging.getLogger(__name__)


# ============================================
# PRODUCT SIGNALS
# ============================================

@receiver(post_save, sender=Product)
def product_post_save(sender, instance, created, **kwargs):
    """
    Handle product after saving.

    Actions:
    - Record opening stock for new products so the audit trail adds up
    - Log product creation/updates
    """
    if created:
        if instance.stock_qty > 0:
            StockEntry.objects.create(
                product=instance,
                quantity=instance.stock_qty,
                entry_type='opening',
                stock_after=instance.stock_qty,
                unit_price=instance.unit_price,
                total_amount=instance.unit_price * instance.stock_qty,
                reference_id=instance.product_id,
                notes="Opening stock",
                created_by=instance.created_by,
            )
        logger.info(
            f"Product created: {instance.product_id} - {instance.name} "
            f"(Category: {instance.category.name}, Stock: {instance.stock_qty})"
        )
    else:
        logger.debug(
            f"Product updated: {instance.product_id} - {instance.name} "
            f"(Status: {instance.stock_status}, Stock: {instance.stock_qty})"
        )


@receiver(post_save, sender=Product)
def check_low_stock_alert(sender, instance, **kwargs):
    """Warn when a saved product reaches low stock levels."""
    if not instance.is_active:
        return

    if instance.stock_status == 'lowstock':
        logger.warning(
            f"LOW STOCK ALERT: {instance.name} ({instance.product_id}) "
            f"has only {instance.stock_qty} units remaining "
            f"(threshold {settings.INVENTORY_CONFIG['LOW_STOCK_THRESHOLD']})"
        )
    elif instance.stock_status == 'outofstock':
        logger.error(
            f"OUT OF STOCK: {instance.name} ({instance.product_id}) "
            f"is out of stock"
        )


# ============================================
# AUDIT TRAIL SIGNALS
# ============================================

@receiver(post_save, sender=StockEntry)
def create_audit_trail(sender, instance, created, **kwargs):
    """Log every stock movement to the inventory log."""
    if created:
        logger.info(
            f"[STOCK MOVEMENT] "
            f"Type: {instance.get_entry_type_display()} | "
            f"Product: {instance.product.product_id} ({instance.product.name}) | "
            f"Quantity: {instance.quantity} | "
            f"Stock After: {instance.stock_after} | "
            f"Total: {instance.total_amount} | "
            f"Reference: {instance.reference_id or 'N/A'} | "
            f"User: {instance.created_by or 'System'}"
        )


@receiver(post_delete, sender=StockEntry)
def log_stock_entry_deletion(sender, instance, **kwargs):
    """
    Stock entries are the audit trail and should never be deleted outside a
    product cascade. Any deletion is logged.
    """
    logger.warning(
        f"[AUDIT ALERT] Stock Entry DELETED: "
        f"ID: {instance.id} | "
        f"Type: {instance.entry_type} | "
        f"Quantity: {instance.quantity}"
    )
