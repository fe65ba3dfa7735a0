from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r'orders', views.OrderViewSet, basename='order')
router.register(r'sales-orders', views.SalesOrderViewSet, basename='sales-order')

urlpatterns = [
    path('', include(router.urls)),
]
