from django.urls import path
from . import views

urlpatterns = [
    path('restock-requests/', views.restock_request_list_create, name='restock-request-list'),
    path('restock-requests/<int:pk>/', views.restock_request_detail, name='restock-request-detail'),
    path('restock-requests/<int:pk>/approve/', views.restock_request_approve, name='restock-request-approve'),
    path('restock-requests/<int:pk>/reject/', views.restock_request_reject, name='restock-request-reject'),
]
