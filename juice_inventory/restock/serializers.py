from decimal import Decimal, InvalidOperation
from rest_framework import serializers
from .models import RestockRequest


class RestockRequestSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_category = serializers.CharField(source='product.category', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    employee_first_name = serializers.SerializerMethodField()
    employee_last_name = serializers.SerializerMethodField()
    reviewed_by_username = serializers.CharField(source='reviewed_by.username', read_only=True, default=None)
    requested_quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = RestockRequest
        fields = ['id', 'product', 'product_name', 'product_category', 'location', 'location_name',
                  'employee', 'employee_first_name', 'employee_last_name',
                  'requested_quantity', 'confirmed_quantity', 'status', 'notes',
                  'reviewed_by', 'reviewed_by_username', 'reviewed_at', 'created_at', 'updated_at']
        read_only_fields = ['employee', 'confirmed_quantity', 'status', 'reviewed_by', 'reviewed_at',
                            'created_at', 'updated_at']

    def _employee_profile(self, obj):
        return getattr(obj.employee, 'profile', None)

    def get_employee_first_name(self, obj):
        profile = self._employee_profile(obj)
        return profile.first_name if profile else obj.employee.first_name

    def get_employee_last_name(self, obj):
        profile = self._employee_profile(obj)
        return profile.last_name if profile else obj.employee.last_name


def resolve_confirmed_quantity(value, requested_quantity):
    """Confirmed quantity falls back to the requested one when missing, not a number, or below one"""
    if value is None or isinstance(value, bool):
        return requested_quantity
    try:
        # Fractions are truncated toward zero
        quantity = int(Decimal(str(value).strip()))
    except (InvalidOperation, TypeError, ValueError, OverflowError):
        return requested_quantity
    if quantity <= 0:
        return requested_quantity
    return quantity
