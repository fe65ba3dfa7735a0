from django.contrib import admin

from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['expense_date', 'expense_type', 'amount', 'reason', 'expense_by', 'created_by']
    list_filter = ['expense_type', 'expense_date']
    search_fields = ['reason', 'expense_by']
    date_hierarchy = 'expense_date'
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
