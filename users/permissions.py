"""
Role based permissions.
The role lives on the Profile; DRF views check it here so the services
can receive the acting user as a plain argument.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_admin(user):
    if not user or not user.is_authenticated:
        return False
    profile = getattr(user, "profile", None)
    return profile is not None and profile.is_admin


class IsAdminRole(BasePermission):
    """
    Allows access only to users whose profile role is 'admin'.
    """

    message = "Forbidden - Admin only"

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminRoleOrReadOnly(BasePermission):
    """
    Any authenticated user can read, only admins can write.
    """

    message = "Forbidden - Admin only"

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)
