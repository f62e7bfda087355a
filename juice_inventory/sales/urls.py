from django.urls import path
from . import views

urlpatterns = [
    path('sales/', views.sale_list_create, name='sale-list'),
    path('sales/summary/', views.sales_summary, name='sales-summary'),
    path('sales/<int:pk>/', views.sale_detail, name='sale-detail'),
]
