import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from django.conf import settings
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from backoffice.exceptions import PersistenceError, ValidationError
from backoffice.viewsets import EnvelopeModelViewSet, audit_name
from .models import Category, Product, StockEntry
from .serializers import (
    CategorySerializer,
    CategoryStatusUpdateSerializer,
    ProductDropdownSerializer,
    ProductImageSerializer,
    ProductListSerializer,
    ProductSerializer,
    StockEntrySerializer,
)

logger = logging.getLogger(__name__)


# ====================================
# CATEGORIES
# ====================================

class CategoryViewSet(EnvelopeModelViewSet):
    """API endpoint for categories"""
    serializer_class = CategorySerializer
    resource_name = 'Category'

    def get_queryset(self):
        """Non-deleted categories, filtered by query parameters"""
        queryset = Category.objects.filter(is_deleted=False)

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        category_type = self.request.query_params.get('category_type')
        if category_type:
            queryset = queryset.filter(category_type=category_type)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(category_code__icontains=search) |
                Q(description__icontains=search)
            )

        return queryset

    def perform_create(self, serializer):
        category = serializer.save(created_by=audit_name(self.request))
        logger.info(f"[CATEGORY CREATED] {category.category_code} - {category.name}")

    def perform_update(self, serializer):
        category = serializer.save(updated_by=audit_name(self.request))
        logger.info(f"[CATEGORY UPDATED] {category.category_code} - {category.name}")

    def perform_destroy(self, instance):
        """Soft delete"""
        instance.is_deleted = True
        instance.updated_by = audit_name(self.request)
        instance.save(update_fields=['is_deleted', 'updated_by', 'updated_at'])
        logger.info(f"[CATEGORY DELETED] {instance.category_code} - {instance.name}")

    @action(detail=False, url_path=r'code/(?P<code>[^/.]+)')
    def by_code(self, request, code=None):
        category = get_object_or_404(self.get_queryset(), category_code=code.upper())
        return Response({'success': True, 'data': self.get_serializer(category).data})

    @action(detail=False, url_path=r'type/(?P<category_type>[^/.]+)')
    def by_type(self, request, category_type=None):
        valid_types = dict(Category.TYPE_CHOICES)
        if category_type not in valid_types:
            raise ValidationError(f'Unknown category type: {category_type}')
        queryset = Category.objects.filter(is_deleted=False, category_type=category_type)
        return Response({
            'success': True,
            'data': self.get_serializer(queryset, many=True).data,
            'total': queryset.count(),
        })

    @action(detail=False, methods=['post'], url_path='bulk-status')
    def bulk_update_status(self, request):
        serializer = CategoryStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = Category.objects.filter(
            pk__in=serializer.validated_data['ids'], is_deleted=False
        ).update(
            status=serializer.validated_data['status'],
            updated_by=audit_name(request),
        )
        logger.info(
            f"[CATEGORY BULK STATUS] {updated} categories set to "
            f"{serializer.validated_data['status']}"
        )
        return Response({
            'success': True,
            'message': f'{updated} categories updated',
            'data': {'updated': updated},
        })

    @action(detail=False)
    def stats(self, request):
        """Category counts by status and type"""
        queryset = Category.objects.filter(is_deleted=False)
        by_status = {key: 0 for key, _ in Category.STATUS_CHOICES}
        for row in queryset.values('status').annotate(count=Count('id')):
            by_status[row['status']] = row['count']
        by_type = {key: 0 for key, _ in Category.TYPE_CHOICES}
        for row in queryset.values('category_type').annotate(count=Count('id')):
            by_type[row['category_type']] = row['count']

        return Response({
            'success': True,
            'data': {
                'total': queryset.count(),
                'by_status': by_status,
                'by_type': by_type,
            },
        })


# ====================================
# PRODUCTS
# ====================================

class ProductViewSet(EnvelopeModelViewSet):
    """API endpoint for products, addressed by product_id"""
    lookup_field = 'product_id'
    resource_name = 'Product'

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        if self.action == 'dropdown':
            return ProductDropdownSerializer
        if self.action == 'upload_image':
            return ProductImageSerializer
        return ProductSerializer

    def get_queryset(self):
        """Filter products based on query parameters"""
        queryset = Product.objects.select_related('category').filter(is_active=True)

        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category_id=category)

        if self.request.query_params.get('in_stock') in ('1', 'true', 'True'):
            queryset = queryset.filter(stock_qty__gt=0)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(product_id__icontains=search) |
                Q(category__name__icontains=search)
            )

        return queryset

    def perform_create(self, serializer):
        user = audit_name(self.request)
        serializer.save(created_by=user, purchase_by=serializer.validated_data.get('purchase_by') or user)

    def perform_update(self, serializer):
        serializer.save(updated_by=audit_name(self.request))

    def perform_destroy(self, instance):
        """Soft delete (mark as inactive) instead of hard delete"""
        instance.is_active = False
        instance.updated_by = audit_name(self.request)
        instance.save(update_fields=['is_active', 'updated_by', 'updated_at'])
        logger.info(f"[PRODUCT DELETED] {instance.product_id} - {instance.name}")

    @action(detail=False)
    def dropdown(self, request):
        """In-stock products for order entry"""
        queryset = Product.objects.filter(is_active=True, stock_qty__gt=0).order_by('name')
        return Response({'success': True, 'data': self.get_serializer(queryset, many=True).data})

    @action(detail=False, url_path=r'category/(?P<code>[^/.]+)')
    def by_category(self, request, code=None):
        category = get_object_or_404(Category, category_code=code.upper(), is_deleted=False)
        queryset = Product.objects.select_related('category').filter(is_active=True, category=category)
        return Response({
            'success': True,
            'data': ProductListSerializer(queryset, many=True).data,
            'total': queryset.count(),
        })

    @action(
        detail=True,
        methods=['post'],
        url_path='image',
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_image(self, request, product_id=None):
        """Upload a product image to Cloudinary and store its URL"""
        product = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = cloudinary.uploader.upload(
                serializer.validated_data['image'],
                folder=settings.CLOUDINARY_PRODUCT_FOLDER,
                public_id=product.product_id,
                resource_type='image',
                overwrite=True,
                invalidate=True,
                transformation=[{'width': 800, 'crop': 'limit', 'quality': 80}],
            )
        except CloudinaryError as e:
            logger.error(f"[PRODUCT IMAGE] Upload failed for {product.product_id}: {e}")
            raise PersistenceError('Image upload failed, please try again later')

        product.image_url = result.get('secure_url', '')
        product.updated_by = audit_name(request)
        product.save(update_fields=['image_url', 'updated_by', 'updated_at'])
        logger.info(f"[PRODUCT IMAGE] {product.product_id} -> {product.image_url}")

        return Response({
            'success': True,
            'message': 'Image uploaded successfully',
            'data': ProductSerializer(product).data,
        })

    @action(detail=True, url_path='stock-entries')
    def stock_entries(self, request, product_id=None):
        product = self.get_object()
        entries = product.stock_entries.all()
        page = self.paginate_queryset(entries)
        if page is not None:
            return self.get_paginated_response(StockEntrySerializer(page, many=True).data)
        return Response({'success': True, 'data': StockEntrySerializer(entries, many=True).data})


# ====================================
# STOCK ENTRIES
# ====================================

class StockEntryViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only audit trail of stock movements"""
    serializer_class = StockEntrySerializer

    def get_queryset(self):
        """Filter stock entries by product or entry type"""
        queryset = StockEntry.objects.select_related('product')

        product_id = self.request.query_params.get('product')
        if product_id:
            queryset = queryset.filter(product__product_id=product_id)

        entry_type = self.request.query_params.get('entry_type')
        if entry_type:
            queryset = queryset.filter(entry_type=entry_type)

        reference_id = self.request.query_params.get('reference')
        if reference_id:
            queryset = queryset.filter(reference_id=reference_id)

        return queryset

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data},
                        status=status.HTTP_200_OK)
