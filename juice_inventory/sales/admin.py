from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'location', 'quantity', 'unit_price', 'total_amount', 'sale_type', 'created_at']
    list_filter = ['sale_type', 'location', 'created_at']
    search_fields = ['product__name', 'location__name']
    readonly_fields = ['total_amount', 'created_at']
