from django.urls import path
from . import views

urlpatterns = [
    path('inventory/', views.inventory_list_create, name='inventory-list'),
    path('inventory/overview/', views.inventory_overview, name='inventory-overview'),
    path('inventory/expiring/', views.expiring_items, name='inventory-expiring'),
    path('inventory/<int:pk>/', views.inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/notify/', views.send_expiration_notification, name='inventory-notify'),
]
