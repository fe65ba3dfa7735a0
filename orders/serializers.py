from rest_framework import serializers

from .models import Order, SalesOrder, SalesOrderItem


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders"""

    product_id = serializers.CharField(source='product.product_id', read_only=True)
    payment_method_display = serializers.CharField(source='get_payment_method_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'order_no',
            'product_id',
            'product_name',
            'category',
            'unit_price',
            'sale_price',
            'quantity',
            'unit',
            'total',
            'total_amount',
            'delivery_charge',
            'discount',
            'grand_total',
            'payment_method',
            'payment_method_display',
            'paid_amount',
            'due_amount',
            'status',
            'status_display',
            'customer_name',
            'customer_phone',
            'customer_address',
            'original_stock',
            'remaining_stock',
            'order_date',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OrderInputSerializer(serializers.Serializer):
    """
    Type coercion for order create/update payloads.

    Every field is optional here; which fields are required, quantity rules,
    payment methods and status transitions are checked by
    orders.services.lifecycle so the same rules apply to every caller.
    """

    product_id = serializers.CharField(max_length=20, required=False)
    product_name = serializers.CharField(max_length=200, required=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    quantity = serializers.IntegerField(required=False)
    unit = serializers.CharField(max_length=20, required=False)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    delivery_charge = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    payment_method = serializers.CharField(max_length=20, required=False)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    status = serializers.CharField(max_length=20, required=False)
    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    customer_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    order_date = serializers.DateTimeField(required=False)
    created_by = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate(self, data):
        if self.partial and 'product_id' in data:
            raise serializers.ValidationError({'product_id': 'The product of an order cannot be changed'})
        return data


class DeletedOrderSerializer(serializers.Serializer):
    order = serializers.SerializerMethodField()
    restored = serializers.IntegerField()

    def get_order(self, obj):
        data = OrderSerializer(obj.order).data
        data['id'] = obj.order_id
        return data


# ============================================
# SALES ORDERS
# ============================================

class SalesOrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source='product.product_id', read_only=True)

    class Meta:
        model = SalesOrderItem
        fields = [
            'id',
            'product_id',
            'product_name',
            'category',
            'unit_price',
            'sale_price',
            'quantity',
            'vat',
            'tax',
            'total',
        ]
        read_only_fields = fields


class SalesOrderSerializer(serializers.ModelSerializer):
    """Read serializer for multi-item sales orders"""

    items = SalesOrderItemSerializer(many=True, read_only=True)
    total_items = serializers.IntegerField(read_only=True)
    payment_method_display = serializers.CharField(source='get_payment_method_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = SalesOrder
        fields = [
            'id',
            'order_no',
            'customer_name',
            'customer_phone',
            'customer_address',
            'items',
            'total_items',
            'total_amount',
            'delivery_charge',
            'discount',
            'grand_total',
            'payment_method',
            'payment_method_display',
            'status',
            'status_display',
            'order_date',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SalesOrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.CharField(max_length=20, required=False)
    product_name = serializers.CharField(max_length=200, required=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    quantity = serializers.IntegerField(required=False)
    vat = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class SalesOrderInputSerializer(serializers.Serializer):
    """Type coercion only; orders.services.sales_orders checks the rules."""

    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    customer_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    items = SalesOrderItemInputSerializer(many=True, required=False, allow_empty=True)
    delivery_charge = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    payment_method = serializers.CharField(max_length=20, required=False)
    status = serializers.CharField(max_length=20, required=False)
    order_date = serializers.DateTimeField(required=False)
    created_by = serializers.CharField(max_length=150, required=False, allow_blank=True)
