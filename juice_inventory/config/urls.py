"""
URL configuration for the juice inventory dashboard API.

Every app mounts its routes under ``api/v1/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Juice Inventory Admin Panel"
admin.site.site_title = "Juice Inventory Admin Portal"
admin.site.index_title = "Welcome to the Juice Inventory Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('juice_inventory.core.urls')),
    path('api/v1/', include('juice_inventory.locations.urls')),
    path('api/v1/', include('juice_inventory.catalog.urls')),
    path('api/v1/', include('juice_inventory.inventory.urls')),
    path('api/v1/', include('juice_inventory.restock.urls')),
    path('api/v1/', include('juice_inventory.sales.urls')),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
