from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # Auth & user accounts
    path('api/auth/', include('users.urls')),

    # REST API
    path('api/', include('inventory.urls')),
    path('api/', include('orders.urls')),
    path('api/', include('expenses.urls')),
]
