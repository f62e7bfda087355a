from django.contrib import admin
from .models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'address', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['name', 'address']
    ordering = ['name']
