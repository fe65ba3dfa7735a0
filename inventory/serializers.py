from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework import serializers

from .models import Category, Product, StockEntry


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for Category model"""

    category_type_display = serializers.CharField(source='get_category_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    products_count = serializers.IntegerField(read_only=True)
    category_code = serializers.CharField(max_length=20, required=False, allow_blank=True)

    class Meta:
        model = Category
        fields = [
            'id',
            'name',
            'category_code',
            'description',
            'category_type',
            'category_type_display',
            'status',
            'status_display',
            'products_count',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'updated_by', 'created_at', 'updated_at']

    def validate_category_code(self, value):
        """Codes are stored upper-case and must be unique"""
        value = (value or '').strip().upper()
        if not value:
            return value
        queryset = Category.objects.filter(category_code=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('Category code already exists')
        return value


class CategoryStatusUpdateSerializer(serializers.Serializer):
    """Bulk status change for several categories"""

    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    status = serializers.ChoiceField(choices=Category.STATUS_CHOICES)


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product lists"""

    category_name = serializers.CharField(source='category.name', read_only=True)
    category_code = serializers.CharField(source='category.category_code', read_only=True)
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'product_id',
            'name',
            'category',
            'category_name',
            'category_code',
            'unit_price',
            'sale_price',
            'stock_qty',
            'stock_status',
            'image_url',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class ProductDropdownSerializer(serializers.ModelSerializer):
    """Minimal product payload for order-entry dropdowns"""

    class Meta:
        model = Product
        fields = ['product_id', 'name', 'sale_price', 'stock_qty', 'image_url']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Full serializer for product details"""

    category_detail = CategorySerializer(source='category', read_only=True)
    stock_status = serializers.CharField(read_only=True)
    total_value = serializers.SerializerMethodField()
    stock_entry_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id',
            'product_id',
            'name',
            'category',
            'category_detail',
            'description',
            'unit_price',
            'sale_price',
            'stock_qty',
            'stock_status',
            'total_value',
            'image_url',
            'purchase_by',
            'is_active',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
            'stock_entry_count',
        ]
        read_only_fields = [
            'id',
            'product_id',
            'image_url',
            'is_active',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]

    def get_total_value(self, obj):
        """Inventory value of this product at unit price"""
        return float(obj.unit_price * obj.stock_qty)

    def get_stock_entry_count(self, obj):
        return obj.stock_entries.count()

    def validate_category(self, value):
        if value.is_deleted:
            raise serializers.ValidationError('Category has been deleted')
        return value

    def validate(self, data):
        """Validate pricing"""
        unit_price = data.get('unit_price', getattr(self.instance, 'unit_price', None))
        sale_price = data.get('sale_price', getattr(self.instance, 'sale_price', None))

        if unit_price is not None and unit_price < 0:
            raise serializers.ValidationError({'unit_price': 'Unit price cannot be negative'})
        if sale_price is not None and sale_price < 0:
            raise serializers.ValidationError({'sale_price': 'Sale price cannot be negative'})

        return data

    @transaction.atomic
    def update(self, instance, validated_data):
        """
        Update product fields against the locked row.

        stock_qty is only written when the request sets it, as a difference
        against the current stock recorded by an adjustment entry. Other edits
        never write stock_qty, so concurrent order deductions are kept.
        """
        new_quantity = validated_data.pop('stock_qty', None)
        current = Product.objects.select_for_update().get(pk=instance.pk)

        if new_quantity is not None and new_quantity != current.stock_qty:
            quantity_diff = new_quantity - current.stock_qty
            Product.objects.filter(pk=instance.pk).update(
                stock_qty=F('stock_qty') + quantity_diff, updated_at=timezone.now()
            )
            unit_price = validated_data.get('unit_price', current.unit_price)
            StockEntry.objects.create(
                product=current,
                quantity=quantity_diff,
                entry_type='adjustment',
                stock_after=new_quantity,
                unit_price=unit_price,
                total_amount=abs(quantity_diff) * unit_price,
                created_by=validated_data.get('updated_by', current.updated_by),
                notes=f"Stock adjustment via API: {current.stock_qty} → {new_quantity}"
            )

        instance.refresh_from_db(fields=['stock_qty'])
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save(update_fields=[*validated_data, 'updated_at'])

        return instance


class ProductImageSerializer(serializers.Serializer):
    image = serializers.ImageField()


class StockEntrySerializer(serializers.ModelSerializer):
    """Read-only serializer for stock entries"""

    product_id = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    entry_type_display = serializers.CharField(source='get_entry_type_display', read_only=True)
    is_stock_in = serializers.BooleanField(read_only=True)
    is_stock_out = serializers.BooleanField(read_only=True)
    absolute_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockEntry
        fields = [
            'id',
            'product',
            'product_id',
            'product_name',
            'quantity',
            'absolute_quantity',
            'entry_type',
            'entry_type_display',
            'stock_after',
            'unit_price',
            'total_amount',
            'reference_id',
            'notes',
            'created_by',
            'created_at',
            'is_stock_in',
            'is_stock_out',
        ]
        read_only_fields = fields
