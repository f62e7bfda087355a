"""
Caching for reference data that the dashboard forms refetch constantly:
locations and products.

List payloads are stored under versioned keys. Saving or deleting a row bumps
the model's version (see cache_signals), so the next read after a mutation
always misses and hits the database.
"""
from django.core.cache import cache
import logging

logger = logging.getLogger('juice_inventory.core')

LOCATION_LIST_KEY_PREFIX = 'location_list:'
PRODUCT_LIST_KEY_PREFIX = 'product_list:'

VERSION_KEY_TEMPLATE = '{prefix}version'

# Locations change rarely, products a little more often
LOCATION_LIST_CACHE_TTL = 600  # 10 minutes
PRODUCT_LIST_CACHE_TTL = 180  # 3 minutes


def _get_version(prefix: str) -> int:
    version_key = VERSION_KEY_TEMPLATE.format(prefix=prefix)
    version = cache.get(version_key)
    if version is None:
        version = 1
        cache.set(version_key, version, None)
    return version


def bump_version(prefix: str) -> None:
    """Invalidate every list cached under prefix"""
    version_key = VERSION_KEY_TEMPLATE.format(prefix=prefix)
    try:
        cache.incr(version_key)
    except ValueError:
        cache.set(version_key, 2, None)
    logger.debug(f"Bumped cache version for {prefix}")


def get_location_list_cache_key(suffix: str = 'all') -> str:
    """Get cache key for location list (suffix encodes the filters)"""
    return f"{LOCATION_LIST_KEY_PREFIX}v{_get_version(LOCATION_LIST_KEY_PREFIX)}:{suffix}"


def get_product_list_cache_key(suffix: str = 'all') -> str:
    """Get cache key for product list (suffix encodes the filters)"""
    return f"{PRODUCT_LIST_KEY_PREFIX}v{_get_version(PRODUCT_LIST_KEY_PREFIX)}:{suffix}"


def invalidate_location_cache():
    bump_version(LOCATION_LIST_KEY_PREFIX)


def invalidate_product_cache():
    bump_version(PRODUCT_LIST_KEY_PREFIX)
