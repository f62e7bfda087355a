import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from .models import Profile, Notification, AuditLog
from .permissions import IsAdminRole, is_admin_user
from .serializers import (
    UserSerializer, UserCreateSerializer, ProfileSerializer,
    NotificationSerializer, AuditLogSerializer
)
from .utils import create_audit_log

logger = logging.getLogger('juice_inventory.core')

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        data['is_admin'] = is_admin_user(self.user)
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        profile = getattr(user, 'profile', None)
        token['role'] = profile.role if profile else None
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Custom token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    """Custom token refresh view that handles deleted users gracefully"""
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Sign-up endpoint: creates user + profile and returns a token pair"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"Registered user {user.username} with role {user.profile.role}")
        create_audit_log(
            request=request,
            user=user,
            action='register',
            model_name='User',
            object_id=user.id,
            object_name=user.username,
            changes={'role': user.profile.role},
        )
        token = CustomTokenObtainPairSerializer.get_token(user)
        return Response({
            'user': UserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    logger.warning(f"Registration validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Sign-out by blacklisting the refresh token"""
    refresh_token = request.data.get('refresh')
    if not refresh_token:
        return Response({'error': 'refresh token is required'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError as e:
        logger.warning(f"Logout with invalid token by {request.user.username}: {str(e)}")
        return Response({'error': 'Token is invalid or expired.'}, status=status.HTTP_400_BAD_REQUEST)
    logger.info(f"User {request.user.username} signed out")
    return Response(status=status.HTTP_205_RESET_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with profile and role"""
    user_data = UserSerializer(request.user).data
    user_data['is_admin'] = is_admin_user(request.user)
    return Response(user_data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Header data for the dashboard: profile, role and unread notifications"""
    user = request.user
    profile = Profile.objects.filter(user=user).first()
    if profile is None:
        logger.warning(f"User {user.username} has no profile")

    unread = Notification.objects.filter(user=user, read=False).order_by('-created_at', '-id')
    return Response({
        'profile': ProfileSerializer(profile).data if profile else None,
        'is_admin': is_admin_user(user),
        'notifications': NotificationSerializer(unread, many=True).data,
        'unread_count': unread.count(),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    """List the current user's notifications, newest first"""
    queryset = Notification.objects.filter(user=request.user)
    unread = request.query_params.get('unread', None)
    if unread is not None and unread.lower() in ('1', 'true', 'yes'):
        queryset = queryset.filter(read=False)
    queryset = queryset.order_by('-created_at', '-id')
    serializer = NotificationSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    """Mark one of the current user's notifications as read"""
    notification = get_object_or_404(Notification, pk=pk, user=request.user)
    if not notification.read:
        notification.read = True
        notification.save(update_fields=['read'])
    return Response(NotificationSerializer(notification).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    """Mark all of the current user's notifications as read"""
    updated = Notification.objects.filter(user=request.user, read=False).update(read=True)
    logger.debug(f"Marked {updated} notifications read for {request.user.username}")
    return Response({'updated': updated})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def audit_log_list(request):
    """List audit logs with filtering (admin only)"""
    queryset = AuditLog.objects.select_related('user').all()

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)
