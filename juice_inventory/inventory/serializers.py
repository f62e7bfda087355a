from rest_framework import serializers
from juice_inventory.catalog.models import Product
from juice_inventory.catalog.serializers import ProductSerializer
from juice_inventory.locations.models import Location
from juice_inventory.locations.serializers import LocationSerializer
from .models import InventoryRecord


class InventoryRecordSerializer(serializers.ModelSerializer):
    product = ProductSerializer(read_only=True)
    product_id = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all(), source='product', write_only=True)
    location = LocationSerializer(read_only=True)
    location_id = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), source='location', write_only=True)

    class Meta:
        model = InventoryRecord
        fields = ['id', 'product', 'product_id', 'location', 'location_id', 'quantity',
                  'expiration_date', 'batch_number', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ExpiringItemSerializer(serializers.ModelSerializer):
    """Alert row: an inventory record plus its day difference and urgency"""
    product_name = serializers.CharField(source='product.name', read_only=True)
    category = serializers.CharField(source='product.category', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    days_until_expiration = serializers.SerializerMethodField()
    urgency = serializers.SerializerMethodField()

    class Meta:
        model = InventoryRecord
        fields = ['id', 'product', 'product_name', 'category', 'location', 'location_name',
                  'quantity', 'expiration_date', 'batch_number', 'days_until_expiration', 'urgency']

    def get_days_until_expiration(self, obj):
        return self.context['days'][obj.pk]

    def get_urgency(self, obj):
        return self.context['urgency'][obj.pk]
