# clinic_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

ROLE_ADMIN = "ADMIN"
ROLE_DOCTOR = "DOCTOR"
ROLE_FRONTDESK = "FRONTDESK"

STAFF_ROLES = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK}


def _user_roles(user) -> Set[str]:
    """
    Resolve roles from the user's `role` attribute.
    Superusers are treated as ADMIN.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if getattr(user, "role", None):
        roles.add(str(user.role))

    return roles


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    - Requires authentication.
    - ADMIN bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - Unknown SAFE actions fall back to list/retrieve.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action: dict[str, Set[str]] = {
        "list": STAFF_ROLES,
        "retrieve": STAFF_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        # APIViews have no action; infer it from the method
        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = any(k in kwargs for k in ("pk", "id", "report_id"))

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = _user_roles(user)

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            allowed = self.allowed_roles_per_action.get("list")

        if allowed is not None:
            return bool(roles & allowed)

        # Unknown action => deny by default
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class PatientPermission(BaseRolePermission):
    """Patient registration and search"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "retrieve": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "create": {ROLE_ADMIN, ROLE_FRONTDESK},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
        # Custom actions
        "visits": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
    }


class ReportPermission(BaseRolePermission):
    """Visit report files"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "retrieve": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "create": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "destroy": {ROLE_ADMIN, ROLE_DOCTOR},
    }


class SuggestionPermission(BaseRolePermission):
    """Autocomplete suggestions"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
        "create": {ROLE_ADMIN, ROLE_DOCTOR, ROLE_FRONTDESK},
    }


class AuditPermission(BaseRolePermission):
    """Audit log access"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN},
        "retrieve": {ROLE_ADMIN},
    }
