import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from backoffice.exceptions import ValidationError
from backoffice.viewsets import audit_name, date_param
from .models import Order, SalesOrder
from .serializers import (
    DeletedOrderSerializer,
    OrderInputSerializer,
    OrderSerializer,
    SalesOrderInputSerializer,
    SalesOrderSerializer,
)
from .services import lifecycle, reports, sales_orders

logger = logging.getLogger(__name__)


def _days_param(request):
    days = request.query_params.get('days')
    if days is None:
        return None
    if not days.isdigit():
        raise ValidationError('days must be a positive integer', field='days')
    return int(days)


class OrderViewSet(viewsets.GenericViewSet):
    """
    API endpoint for single-product orders.

    Writes go through orders.services.lifecycle, which keeps product stock in
    step with the order (deduct on create, restore on cancel or delete).
    """
    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    lookup_value_regex = r'\d+'

    def list(self, request):
        """?status=&start_date=&end_date=&search=&page=&limit="""
        queryset = lifecycle.list_orders(
            status=request.query_params.get('status'),
            start_date=date_param(request, 'start_date'),
            end_date=date_param(request, 'end_date'),
            search=request.query_params.get('search'),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return Response({'success': True, 'data': OrderSerializer(queryset, many=True).data})

    def create(self, request):
        serializer = OrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = lifecycle.create_order(serializer.validated_data, created_by=audit_name(request, fallback=''))
        return Response({
            'success': True,
            'message': 'Order created successfully',
            'data': OrderSerializer(order).data,
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        order = lifecycle.get_order(pk)
        return Response({'success': True, 'data': OrderSerializer(order).data})

    def update(self, request, pk=None):
        serializer = OrderInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        order = lifecycle.update_order(pk, serializer.validated_data, updated_by=audit_name(request, fallback=''))
        return Response({
            'success': True,
            'message': 'Order updated successfully',
            'data': OrderSerializer(order).data,
        })

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        result = lifecycle.delete_order(pk, deleted_by=audit_name(request, fallback=''))
        return Response({
            'success': True,
            'message': f'Order deleted successfully, {result.restored} units restored to stock',
            'data': DeletedOrderSerializer(result).data,
        })

    # ============================================
    # SUMMARIES
    # ============================================

    @action(detail=False, url_path='summary/financial')
    def financial_summary(self, request):
        return Response({'success': True, 'data': reports.financial_summary()})

    @action(detail=False, url_path='summary/daily')
    def daily_summary(self, request):
        return Response({'success': True, 'data': reports.daily_summary(_days_param(request))})

    @action(detail=False, url_path='summary/range')
    def range_report(self, request):
        start = date_param(request, 'start_date', required=True)
        end = date_param(request, 'end_date', required=True)
        return Response({'success': True, 'data': reports.range_report(start, end)})


# ============================================
# SALES ORDERS
# ============================================

class SalesOrderViewSet(viewsets.GenericViewSet):
    """
    API endpoint for multi-item sales orders. DELETE is a soft delete; deleted
    orders are no longer listed, returned or counted in summaries.
    """
    queryset = SalesOrder.objects.filter(is_deleted=False)
    serializer_class = SalesOrderSerializer
    lookup_value_regex = r'\d+'

    def list(self, request):
        """?status=&start_date=&end_date=&search=&page=&limit="""
        queryset = sales_orders.list_sales_orders(
            status=request.query_params.get('status'),
            start_date=date_param(request, 'start_date'),
            end_date=date_param(request, 'end_date'),
            search=request.query_params.get('search'),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(SalesOrderSerializer(page, many=True).data)
        return Response({'success': True, 'data': SalesOrderSerializer(queryset, many=True).data})

    def create(self, request):
        serializer = SalesOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = sales_orders.create_sales_order(serializer.validated_data, created_by=audit_name(request, fallback=''))
        return Response({
            'success': True,
            'message': 'Order created successfully',
            'data': SalesOrderSerializer(order).data,
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        order = sales_orders.get_sales_order(pk)
        return Response({'success': True, 'data': SalesOrderSerializer(order).data})

    def update(self, request, pk=None):
        serializer = SalesOrderInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        order = sales_orders.update_sales_order(
            pk, serializer.validated_data, updated_by=audit_name(request, fallback='')
        )
        return Response({
            'success': True,
            'message': 'Order updated successfully',
            'data': SalesOrderSerializer(order).data,
        })

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        sales_orders.delete_sales_order(pk, deleted_by=audit_name(request, fallback=''))
        return Response({'success': True, 'message': 'Order deleted successfully'})

    @action(detail=False, url_path='summary/financial')
    def financial_summary(self, request):
        return Response({'success': True, 'data': reports.sales_order_financial_summary()})

    @action(detail=False, url_path='summary/daily')
    def daily_summary(self, request):
        return Response({'success': True, 'data': reports.sales_order_daily_summary(_days_param(request))})
