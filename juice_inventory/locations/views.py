import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import IntegrityError
from django.db.models.deletion import ProtectedError
from django.core.cache import cache
from juice_inventory.core.model_cache import get_location_list_cache_key, LOCATION_LIST_CACHE_TTL
from juice_inventory.core.permissions import is_admin_user
from juice_inventory.core.utils import create_audit_log, describe_changes
from .models import Location
from .serializers import LocationSerializer

logger = logging.getLogger('juice_inventory.locations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def location_list_create(request):
    """List all locations or create a new location (create requires admin)"""
    if request.method == 'GET':
        location_type = request.query_params.get('type', None)

        cache_key = get_location_list_cache_key(location_type or 'all')
        cached_data = cache.get(cache_key)
        if cached_data is not None:
            logger.debug(f"Cache hit for location list (type: {location_type})")
            return Response(cached_data)

        locations = Location.objects.all()
        if location_type:
            locations = locations.filter(type=location_type)

        response_data = LocationSerializer(locations, many=True).data
        cache.set(cache_key, response_data, LOCATION_LIST_CACHE_TTL)
        return Response(response_data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to create location without admin privileges")
        return Response({'error': 'Only administrators can create locations'}, status=status.HTTP_403_FORBIDDEN)

    logger.info(f"User {request.user.username} creating location with data: {request.data}")
    serializer = LocationSerializer(data=request.data)
    if serializer.is_valid():
        try:
            location = serializer.save()
        except IntegrityError as e:
            logger.error(f"IntegrityError creating location: {str(e)}", exc_info=True)
            return Response({'error': 'A location with this name already exists'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='create',
            model_name='Location',
            object_id=location.id,
            object_name=location.name,
            changes={'type': location.type},
        )
        logger.info(f"Location '{location.name}' created successfully by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Location creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def location_detail(request, pk):
    """Retrieve, update or delete a location (update/delete requires admin)"""
    location = get_object_or_404(Location, pk=pk)

    if request.method == 'GET':
        serializer = LocationSerializer(location)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to modify location {pk} without admin privileges")
        return Response({'error': 'Only administrators can modify locations'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = LocationSerializer(location, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Location',
                object_id=location.id,
                object_name=location.name,
                changes=describe_changes(serializer.validated_data),
            )
            logger.info(f"Location {pk} updated successfully")
            return Response(serializer.data)
        logger.warning(f"Location update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # DELETE
    logger.info(f"User {request.user.username} deleting location {pk} ({location.name})")
    try:
        location.delete()
    except ProtectedError:
        return Response(
            {'error': 'Location has restock requests or sales and cannot be deleted'},
            status=status.HTTP_400_BAD_REQUEST
        )
    create_audit_log(
        request=request,
        action='delete',
        model_name='Location',
        object_id=pk,
        object_name=location.name,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)
