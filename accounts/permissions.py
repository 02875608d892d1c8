"""
Role-based DRF permissions.

Admins write, admins and sub admins read admin pages, farmers work inside
their own farm.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdmin(BasePermission):
    message = 'Unauthorized - Admin access required'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsAdminOrSubAdmin(BasePermission):
    message = 'Unauthorized - Admin access required'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.can_view_admin)


class AdminWriteSubAdminRead(BasePermission):
    """Sub admins get read-only access; every write needs an admin."""

    message = 'Unauthorized - Admin access required'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return user.can_view_admin
        return user.is_admin


class IsFarmer(BasePermission):
    message = 'Only farmers can access this endpoint'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_farmer)


class IsAdminOrFarmer(BasePermission):
    message = 'Unauthorized - Access denied'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_admin or user.is_farmer))



class FarmScopedAccess(BasePermission):
    """
    Every role reads (farmers are scoped to their farm by the service),
    admins and farmers write.
    """

    message = 'Unauthorized - Access denied'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_admin or user.is_farmer
