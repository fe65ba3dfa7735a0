from django.contrib import admin, messages
from django.utils.html import format_html

from backoffice.exceptions import DomainError
from .models import Order, OrderStatus, SalesOrder, SalesOrderItem
from .services import lifecycle, sales_orders


# ============================================
# ORDER ADMIN
# ============================================

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are read only here. Deleting and cancelling go through the order
    lifecycle so product stock is given back.
    """
    list_display = [
        'order_no',
        'product_name',
        'quantity',
        'grand_total',
        'payment_method',
        'due_amount',
        'status_badge',
        'customer_name',
        'order_date',
    ]
    list_filter = ['status', 'payment_method', 'order_date']
    search_fields = ['order_no', 'product_name', 'customer_name', 'customer_phone']
    date_hierarchy = 'order_date'
    actions = ['cancel_orders']

    fieldsets = (
        ('Order', {'fields': ('order_no', 'status', 'order_date')}),
        ('Product', {'fields': ('product', 'product_name', 'category', 'unit_price', 'sale_price', 'quantity', 'unit')}),
        ('Totals', {'fields': ('total', 'total_amount', 'delivery_charge', 'discount', 'grand_total')}),
        ('Payment', {'fields': ('payment_method', 'paid_amount', 'due_amount')}),
        ('Customer', {'fields': ('customer_name', 'customer_phone', 'customer_address')}),
        ('Stock Snapshot', {'fields': ('original_stock', 'remaining_stock'), 'classes': ('collapse',)}),
        ('Audit', {'fields': ('created_by', 'updated_by', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def delete_model(self, request, obj):
        result = lifecycle.delete_order(obj.pk, deleted_by=request.user.get_username())
        self.message_user(
            request,
            f"Order {obj.order_no} deleted, {result.restored} units restored to stock.",
            messages.SUCCESS,
        )

    def delete_queryset(self, request, queryset):
        restored = 0
        failed = []
        for order in queryset:
            try:
                result = lifecycle.delete_order(order.pk, deleted_by=request.user.get_username())
            except DomainError as e:
                failed.append(order.order_no)
                self.message_user(request, f"Order {order.order_no}: {e.message}", messages.ERROR)
            else:
                restored += result.restored
        if failed:
            self.message_user(
                request,
                f"{len(failed)} order(s) not deleted: {', '.join(failed)}",
                messages.WARNING,
            )
        self.message_user(request, f"{restored} units restored to stock.", messages.SUCCESS)

    @admin.action(description="Cancel selected orders")
    def cancel_orders(self, request, queryset):
        cancelled = 0
        for order in queryset.exclude(status=OrderStatus.CANCELLED):
            try:
                lifecycle.update_order(
                    order.pk,
                    {'status': OrderStatus.CANCELLED},
                    updated_by=request.user.get_username(),
                )
            except DomainError as e:
                self.message_user(request, f"Order {order.order_no}: {e.message}", messages.WARNING)
            else:
                cancelled += 1
        self.message_user(request, f"{cancelled} order(s) cancelled.", messages.SUCCESS)

    # ============================================
    # DISPLAY METHODS
    # ============================================

    @admin.display(description='Status', ordering='status')
    def status_badge(self, obj):
        colors = {
            OrderStatus.PENDING: '#ffc107',
            OrderStatus.PROCESSING: '#17a2b8',
            OrderStatus.COMPLETED: '#28a745',
            OrderStatus.CANCELLED: '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display().upper(),
        )


# ============================================
# SALES ORDER ADMIN
# ============================================

class SalesOrderItemInline(admin.TabularInline):
    model = SalesOrderItem
    extra = 0
    can_delete = False
    fields = ['product', 'product_name', 'category', 'sale_price', 'quantity', 'vat', 'tax', 'total']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    """Deleting from here is the same soft delete the API does."""
    list_display = [
        'order_no',
        'customer_name',
        'customer_phone',
        'grand_total',
        'payment_method',
        'status',
        'is_deleted',
        'order_date',
    ]
    list_filter = ['is_deleted', 'status', 'payment_method', 'order_date']
    search_fields = ['order_no', 'customer_name', 'customer_phone']
    date_hierarchy = 'order_date'
    inlines = [SalesOrderItemInline]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in SalesOrder._meta.fields]

    def has_add_permission(self, request):
        return False

    def delete_model(self, request, obj):
        sales_orders.delete_sales_order(obj.pk, deleted_by=request.user.get_username())

    def delete_queryset(self, request, queryset):
        for order in queryset.filter(is_deleted=False):
            try:
                sales_orders.delete_sales_order(order.pk, deleted_by=request.user.get_username())
            except DomainError as e:
                self.message_user(request, f"Sales order {order.order_no}: {e.message}", messages.ERROR)
