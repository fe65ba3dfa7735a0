from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'categories', views.CategoryViewSet, basename='category')
router.register(r'products', views.ProductViewSet, basename='product')
router.register(r'stock-entries', views.StockEntryViewSet, basename='stockentry')

urlpatterns = [
    path('', include(router.urls)),
]
