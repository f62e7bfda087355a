from django.contrib import admin
from .models import InventoryRecord


@admin.register(InventoryRecord)
class InventoryRecordAdmin(admin.ModelAdmin):
    list_display = ['product', 'location', 'quantity', 'expiration_date', 'batch_number', 'updated_at']
    list_filter = ['location', 'expiration_date', 'product__category']
    search_fields = ['product__name', 'product__sku', 'batch_number']
    ordering = ['expiration_date']
    readonly_fields = ['created_at', 'updated_at']
