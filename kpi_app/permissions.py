from rest_framework.permissions import BasePermission, SAFE_METHODS
from accounts.models import Role


def is_own_record(user, subject_id) -> bool:
    return str(user.pk) == str(subject_id)


def can_view_subject(user, subject_id) -> bool:
    """
    Admin and Manager may read any subject's scores
    Employees only their own
    """
    if user.role in (Role.ADMIN, Role.MANAGER):
        return True
    return is_own_record(user, subject_id)


def can_evaluate(user, subject) -> bool:
    """Managers evaluate employees only, never other managers."""
    if user.role == Role.ADMIN:
        return True
    if user.role == Role.MANAGER:
        return subject.role != Role.MANAGER
    return False


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated
                    and request.user.role == Role.ADMIN)


class IsAdminOrManager(BasePermission):
    """
    Grants permission when the user is ADMIN **or** MANAGER.
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated
                    and request.user.role in (Role.ADMIN, Role.MANAGER))


class ReadOnlyOrAdmin(BasePermission):
    """
    - SAFE methods (GET / HEAD / OPTIONS) → every authenticated user.
    - Mutating methods (POST / PUT / PATCH) → Admin only.
    """
    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.role == Role.ADMIN
