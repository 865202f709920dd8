from rest_framework import permissions

from core.models import Property


class IsAdminRole(permissions.BasePermission):
    """
    Only allow users holding the ADMIN role (or superusers)
    """
    message = 'Solo un administrador puede realizar esta acción'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin_role)


def scoped_properties(user):
    """Properties the user may see: advisors only their own, reviewers and admins all of them"""
    queryset = Property.objects.select_related('advisor')
    if user.is_advisor:
        return queryset.filter(advisor=user)
    return queryset
