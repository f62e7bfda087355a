from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'sku', 'unit_price', 'description', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_sku(self, value):
        # Blank SKUs are stored as NULL so the unique constraint only applies to real codes
        if not value or not value.strip():
            return None
        return value.strip()
