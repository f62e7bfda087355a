"""
Cache invalidation signals
Automatically invalidate cached lists when reference data changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .model_cache import invalidate_location_cache, invalidate_product_cache

logger = logging.getLogger('juice_inventory.core')


@receiver([post_save, post_delete], sender='locations.Location')
def invalidate_locations_on_change(sender, instance, **kwargs):
    """Invalidate location lists when a location is saved or deleted"""
    try:
        invalidate_location_cache()
    except Exception as e:
        logger.warning(f"Error invalidating location cache: {e}")


@receiver([post_save, post_delete], sender='catalog.Product')
def invalidate_products_on_change(sender, instance, **kwargs):
    """Invalidate product lists when a product is saved or deleted"""
    try:
        invalidate_product_cache()
    except Exception as e:
        logger.warning(f"Error invalidating product cache: {e}")
