from django.db import models
from juice_inventory.catalog.models import Product
from juice_inventory.locations.models import Location


class InventoryRecord(models.Model):
    """Stock of one product batch at one location, with its expiration date"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='inventory_records')
    location = models.ForeignKey(Location, on_delete=models.CASCADE, related_name='inventory_records')
    quantity = models.PositiveIntegerField(default=0)
    expiration_date = models.DateField(db_index=True)
    batch_number = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product.name} @ {self.location.name}: {self.quantity}"

    class Meta:
        db_table = 'inventory'
        ordering = ['quantity', 'id']
        indexes = [
            models.Index(fields=['product', 'location'], name='idx_inventory_product_loc'),
        ]
