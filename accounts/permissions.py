# accounts/permissions.py

from rest_framework.permissions import BasePermission
import logging

logger = logging.getLogger(__name__)


def user_role(user):
    return (getattr(user, "role", "") or "").lower()


def is_admin(user):
    return user_role(user) == "admin"


def is_manager_or_admin(user):
    return user_role(user) in ("manager", "admin")


class RolePermission(BasePermission):
    """
    Generic role permission: subclass and set `required_roles`.
    Roles are compared as lower-case strings.
    """

    required_roles = ()

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False
        allowed = user_role(user) in self.required_roles
        if not allowed:
            logger.info("Permission denied: user=%s role=%s path=%s", getattr(
                user, "id", None), getattr(user, "role", None), request.path)
        return allowed


class IsAdmin(RolePermission):
    required_roles = ("admin",)


class IsManagerOrAdmin(RolePermission):
    required_roles = ("manager", "admin")
