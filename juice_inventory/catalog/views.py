import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models.deletion import ProtectedError
from django.core.cache import cache
from juice_inventory.core.model_cache import get_product_list_cache_key, PRODUCT_LIST_CACHE_TTL
from juice_inventory.core.permissions import is_admin_user
from juice_inventory.core.utils import create_audit_log, describe_changes
from .filters import ProductFilter
from .models import Product
from .serializers import ProductSerializer

logger = logging.getLogger('juice_inventory.catalog')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List all products or create a new product (create requires admin)"""
    if request.method == 'GET':
        search = request.query_params.get('search', '')
        category = request.query_params.get('category', '')

        cache_key = get_product_list_cache_key(f"{category.lower()}:{search.lower()}")
        cached_data = cache.get(cache_key)
        if cached_data is not None:
            logger.debug(f"Cache hit for product list (category={category}, search={search})")
            return Response(cached_data)

        filterset = ProductFilter(request.query_params, queryset=Product.objects.all())
        response_data = ProductSerializer(filterset.qs, many=True).data
        cache.set(cache_key, response_data, PRODUCT_LIST_CACHE_TTL)
        return Response(response_data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to create product without admin privileges")
        return Response({'error': 'Only administrators can create products'}, status=status.HTTP_403_FORBIDDEN)

    serializer = ProductSerializer(data=request.data)
    if serializer.is_valid():
        product = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Product',
            object_id=product.id,
            object_name=product.name,
            changes={'category': product.category, 'sku': product.sku},
        )
        logger.info(f"Product '{product.name}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    logger.warning(f"Product creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product (update/delete requires admin)"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        return Response(ProductSerializer(product).data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to modify product {pk} without admin privileges")
        return Response({'error': 'Only administrators can modify products'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Product',
                object_id=product.id,
                object_name=product.name,
                changes=describe_changes(serializer.validated_data),
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # DELETE
    try:
        product.delete()
    except ProtectedError:
        return Response(
            {'error': 'Product has restock requests or sales and cannot be deleted'},
            status=status.HTTP_400_BAD_REQUEST
        )
    create_audit_log(
        request=request,
        action='delete',
        model_name='Product',
        object_id=pk,
        object_name=product.name,
    )
    logger.info(f"Product {pk} deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_categories(request):
    """Distinct product categories, for filter dropdowns"""
    categories = Product.objects.order_by('category').values_list('category', flat=True).distinct()
    return Response(list(categories))
