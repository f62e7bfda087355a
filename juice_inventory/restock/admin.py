from django.contrib import admin
from .models import RestockRequest


@admin.register(RestockRequest)
class RestockRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'location', 'employee', 'requested_quantity', 'confirmed_quantity', 'status', 'created_at']
    list_filter = ['status', 'location', 'created_at']
    search_fields = ['product__name', 'employee__username', 'employee__profile__first_name', 'employee__profile__last_name']
    readonly_fields = ['created_at', 'updated_at', 'reviewed_at']
