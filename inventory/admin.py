import csv

from django.contrib import admin
from django.http import HttpResponse
from django.urls import reverse
from django.utils.html import format_html

from .models import Category, Product, StockEntry

BADGE = '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>'


# ============================================
# CUSTOM ACTIONS
# ============================================

@admin.action(description="Export to CSV")
def export_to_csv(modeladmin, request, queryset):
    """Export selected rows to CSV"""
    opts = modeladmin.model._meta
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename={opts.verbose_name_plural}.csv'

    writer = csv.writer(response)
    fields = [field for field in opts.get_fields() if field.concrete and not field.many_to_many]
    writer.writerow([field.verbose_name for field in fields])
    for obj in queryset:
        writer.writerow([getattr(obj, field.attname) for field in fields])

    return response


@admin.action(description="Restore soft-deleted categories")
def restore_categories(modeladmin, request, queryset):
    queryset.update(is_deleted=False)


@admin.action(description="Mark products as inactive")
def deactivate_products(modeladmin, request, queryset):
    queryset.update(is_active=False)


# ============================================
# INLINE ADMINS
# ============================================

class StockEntryInline(admin.TabularInline):
    model = StockEntry
    extra = 0
    can_delete = False
    fields = ['entry_type', 'quantity', 'stock_after', 'unit_price', 'total_amount', 'reference_id', 'created_by', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ============================================
# CATEGORY ADMIN
# ============================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'category_code', 'category_type', 'status_badge', 'product_count', 'is_deleted', 'created_at']
    list_filter = ['category_type', 'status', 'is_deleted']
    search_fields = ['name', 'category_code']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Information', {'fields': ('name', 'category_code', 'description')}),
        ('Configuration', {'fields': ('category_type', 'status', 'is_deleted')}),
        ('Audit', {'fields': ('created_by', 'updated_by', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
    actions = [export_to_csv, restore_categories]

    @admin.display(description='Status', ordering='status')
    def status_badge(self, obj):
        colors = {'active': '#28a745', 'inactive': '#6c757d', 'draft': '#ffc107'}
        return format_html(BADGE, colors.get(obj.status, '#6c757d'), obj.get_status_display().upper())

    @admin.display(description='Products')
    def product_count(self, obj):
        url = reverse('admin:inventory_product_changelist') + f'?category__id__exact={obj.id}'
        return format_html('<a href="{}">{} products</a>', url, obj.products_count)


# ============================================
# PRODUCT ADMIN
# ============================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['product_id', 'name', 'category', 'sale_price', 'stock_display', 'stock_status_badge', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['product_id', 'name', 'category__name']
    readonly_fields = ['product_id', 'stock_qty', 'created_by', 'updated_by', 'created_at', 'updated_at']
    fieldsets = (
        ('Product', {'fields': ('product_id', 'name', 'category', 'description', 'image_url')}),
        ('Pricing & Stock', {'fields': ('unit_price', 'sale_price', 'stock_qty')}),
        ('Audit', {'fields': ('purchase_by', 'is_active', 'created_by', 'updated_by', 'created_at', 'updated_at')}),
    )
    inlines = [StockEntryInline]
    actions = [export_to_csv, deactivate_products]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('category')

    @admin.display(description='Stock', ordering='stock_qty')
    def stock_display(self, obj):
        colors = {'available': '#28a745', 'lowstock': '#ffc107', 'outofstock': '#dc3545'}
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors[obj.stock_status],
            obj.stock_qty,
        )

    @admin.display(description='Status')
    def stock_status_badge(self, obj):
        colors = {'available': '#28a745', 'lowstock': '#ffc107', 'outofstock': '#dc3545'}
        return format_html(BADGE, colors[obj.stock_status], obj.stock_status.upper())


# ============================================
# STOCK ENTRY ADMIN
# ============================================

@admin.register(StockEntry)
class StockEntryAdmin(admin.ModelAdmin):
    """Audit trail: read only"""
    list_display = ['id', 'product_link', 'entry_type_badge', 'quantity_display', 'stock_after', 'total_amount', 'reference_id', 'created_by', 'created_at']
    list_filter = ['entry_type', 'created_at']
    search_fields = ['product__product_id', 'product__name', 'reference_id', 'notes', 'created_by']
    date_hierarchy = 'created_at'
    list_per_page = 100
    actions = [export_to_csv]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('product')

    @admin.display(description='Product', ordering='product__name')
    def product_link(self, obj):
        url = reverse('admin:inventory_product_change', args=[obj.product.id])
        return format_html('<a href="{}">{} ({})</a>', url, obj.product.name, obj.product.product_id)

    @admin.display(description='Type', ordering='entry_type')
    def entry_type_badge(self, obj):
        colors = {
            'opening': '#007bff',
            'purchase': '#28a745',
            'sale': '#dc3545',
            'return': '#17a2b8',
            'adjustment': '#ffc107',
        }
        return format_html(BADGE, colors.get(obj.entry_type, '#6c757d'), obj.get_entry_type_display().upper())

    @admin.display(description='Quantity', ordering='quantity')
    def quantity_display(self, obj):
        color = '#28a745' if obj.is_stock_in else '#dc3545'
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, f'{obj.quantity:+d}')
