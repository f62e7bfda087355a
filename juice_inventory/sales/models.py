from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings
from django.db import models
from juice_inventory.catalog.models import Product
from juice_inventory.locations.models import Location


def compute_total_amount(quantity, unit_price):
    """quantity x unit_price rounded to cents"""
    return (Decimal(quantity) * Decimal(unit_price)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class Sale(models.Model):
    """A recorded sales transaction"""
    SALE_TYPE_WHOLESALE = 'wholesale'
    SALE_TYPE_RETAIL = 'retail'
    SALE_TYPE_CHOICES = [
        (SALE_TYPE_WHOLESALE, 'Wholesale'),
        (SALE_TYPE_RETAIL, 'Retail'),
    ]

    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='sales')
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='sales')
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    sale_type = models.CharField(max_length=20, choices=SALE_TYPE_CHOICES, default=SALE_TYPE_RETAIL, db_index=True)
    customer_info = models.JSONField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def save(self, *args, **kwargs):
        self.total_amount = compute_total_amount(self.quantity, self.unit_price)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"Sale #{self.pk} {self.product.name} x{self.quantity} = {self.total_amount}"

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at', '-id']
