import logging
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework.decorators import action
from rest_framework.response import Response

from backoffice.exceptions import ValidationError
from backoffice.viewsets import EnvelopeModelViewSet, audit_name, date_param
from .models import Expense
from .serializers import ExpenseSerializer

logger = logging.getLogger(__name__)


class ExpenseViewSet(EnvelopeModelViewSet):
    """API endpoint for shop expenses"""
    serializer_class = ExpenseSerializer
    resource_name = 'Expense'

    def get_queryset(self):
        """?start_date=&end_date=&expense_type="""
        queryset = Expense.objects.all()

        start_date = date_param(self.request, 'start_date')
        if start_date:
            queryset = queryset.filter(expense_date__gte=start_date)

        end_date = date_param(self.request, 'end_date')
        if end_date:
            queryset = queryset.filter(expense_date__lte=end_date)

        expense_type = self.request.query_params.get('expense_type')
        if expense_type:
            queryset = queryset.filter(expense_type=expense_type)

        return queryset

    def perform_create(self, serializer):
        expense = serializer.save(created_by=audit_name(self.request))
        logger.info(
            f"[EXPENSE CREATED] {expense.get_expense_type_display()} | "
            f"Amount: {expense.amount} | Date: {expense.expense_date} | By: {expense.expense_by}"
        )

    def perform_update(self, serializer):
        expense = serializer.save(updated_by=audit_name(self.request))
        logger.info(f"[EXPENSE UPDATED] #{expense.pk} | Amount: {expense.amount}")

    def perform_destroy(self, instance):
        logger.info(f"[EXPENSE DELETED] #{instance.pk} | Amount: {instance.amount}")
        instance.delete()

    @action(detail=False)
    def summary(self, request):
        """Totals by type between start_date and end_date (default: this month)"""
        today = timezone.localdate()
        start = date_param(request, 'start_date') or today.replace(day=1)
        end = date_param(request, 'end_date') or today
        if start > end:
            raise ValidationError('start_date must not be after end_date')

        expenses = Expense.objects.filter(expense_date__gte=start, expense_date__lte=end)
        by_type = {key: {'label': label, 'count': 0, 'amount': Decimal('0.00')} for key, label in Expense.TYPE_CHOICES}
        for row in expenses.values('expense_type').annotate(count=Count('id'), amount=Sum('amount')):
            by_type[row['expense_type']].update(count=row['count'], amount=row['amount'])

        totals = expenses.aggregate(count=Count('id'), amount=Sum('amount'))
        return Response({
            'success': True,
            'data': {
                'start_date': start.isoformat(),
                'end_date': end.isoformat(),
                'total_expenses': totals['count'],
                'total_amount': totals['amount'] or Decimal('0.00'),
                'by_type': by_type,
            },
        })
