from rest_framework import serializers
from .models import Sale


class SaleSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_category = serializers.CharField(source='product.category', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = Sale
        fields = ['id', 'product', 'product_name', 'product_category', 'location', 'location_name',
                  'quantity', 'unit_price', 'total_amount', 'sale_type', 'customer_info',
                  'created_by', 'created_by_username', 'created_at']
        # total_amount is computed in Sale.save()
        read_only_fields = ['total_amount', 'created_by', 'created_at']

    def validate_customer_info(self, value):
        if value is not None and not isinstance(value, dict):
            raise serializers.ValidationError("customer_info must be an object")
        return value or None
