from rest_framework.permissions import BasePermission


def is_admin_user(user):
    """
    Admin access comes from the profile role.
    Superusers without a profile (created via createsuperuser) are treated as admins.
    """
    if not user or not user.is_authenticated:
        return False
    if user.is_admin_role:
        return True
    return user.is_superuser and not hasattr(user, 'profile')


class IsAdminRole(BasePermission):
    """Allow only users whose profile role is admin"""
    message = 'Only administrators can perform this action'

    def has_permission(self, request, view):
        return is_admin_user(request.user)
