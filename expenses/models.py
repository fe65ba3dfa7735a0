from django.db import models


class Expense(models.Model):
    """Shop running cost recorded against a date."""

    TYPE_CHOICES = [
        ('rent', 'House Rent'),
        ('electricity', 'Electricity Bill'),
        ('salary', 'Staff Salary'),
        ('porterage', 'Porterage'),
        ('shop', 'Shop Expense'),
        ('misc', 'Miscellaneous'),
    ]

    expense_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=255)
    expense_date = models.DateField()
    expense_by = models.CharField(max_length=150)
    created_by = models.CharField(max_length=150, default='system')
    updated_by = models.CharField(max_length=150, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-expense_date', '-created_at']

    def __str__(self):
        return f"{self.get_expense_type_display()} {self.amount} ({self.expense_date})"
