from decimal import Decimal

from rest_framework import serializers

from .models import Expense


class ExpenseSerializer(serializers.ModelSerializer):
    expense_type_display = serializers.CharField(source='get_expense_type_display', read_only=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = Expense
        fields = [
            'id',
            'expense_type',
            'expense_type_display',
            'amount',
            'reason',
            'expense_date',
            'expense_by',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'updated_by', 'created_at', 'updated_at']

    def validate_reason(self, value):
        if not value.strip():
            raise serializers.ValidationError('Reason is required')
        return value.strip()
