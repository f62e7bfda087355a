from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'sku', 'unit_price', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['name', 'sku', 'category']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
