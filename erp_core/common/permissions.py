# erp_core/common/permissions.py

from __future__ import annotations

from typing import Set
from uuid import UUID

from rest_framework.permissions import SAFE_METHODS, BasePermission

# Group/role names (Django auth Group names)
ROLE_ADMIN = "ADMIN"
ROLE_BILLING = "BILLING"
ROLE_READONLY = "READONLY"

ALL_ROLES = {ROLE_ADMIN, ROLE_BILLING, ROLE_READONLY}


def _user_roles(user) -> Set[str]:
    """
    Resolve roles from:
    1) Django groups: user.groups
    2) Optional user.role attribute

    Authenticated users with no roles/groups are treated as READONLY.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    # Superuser treated as admin
    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if getattr(user, "role", None):
        roles.add(str(user.role))

    if not roles:
        roles.add(ROLE_READONLY)

    return roles


def _get_header(request, name: str) -> str | None:
    """
    Prefer request.headers (case-insensitive), fallback to META (pytest uses HTTP_*).
    """
    v = request.headers.get(name)
    if v:
        return v
    meta_key = "HTTP_" + name.upper().replace("-", "_")
    return request.META.get(meta_key)


def ensure_scope_on_request(request) -> bool:
    """
    Ensure request.business_unit_id exists and the user belongs to it.

    Permissions must not raise ValidationError (it becomes 400);
    return False when missing/invalid -> DRF returns 403.
    """
    if getattr(request, "business_unit_id", None):
        return True

    raw = _get_header(request, "X-Business-Unit-Id") or _get_header(request, "X-ERP-Business-Unit-Id")
    if not raw:
        return False

    try:
        business_unit_id = UUID(str(raw))
    except (TypeError, ValueError):
        return False

    from erp_core.iam.services import membership

    if not membership.is_user_member_of_business_unit(user=request.user, business_unit_id=business_unit_id):
        return False

    from erp_core.iam.scope import Scope

    request.business_unit_id = business_unit_id
    request.scope = Scope(business_unit_id=business_unit_id)
    return True


class BaseRolePermission(BasePermission):
    """
    Role-based access control for business-unit scoped endpoints.

    - Requires authentication and a valid business-unit scope.
    - ADMIN bypass.
    - allowed_roles_per_action maps viewset actions to roles.
    - Unknown SAFE actions fall back to list/retrieve instead of denying.
    """
    message = "You do not have permission to perform this action."

    requires_scope = True

    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

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

        if self.requires_scope and not ensure_scope_on_request(request):
            return False

        roles = _user_roles(user)

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return bool(roles & allowed)

        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class MasterDataPermission(BaseRolePermission):
    """Hospitals, doctors, payment types, categories, procedures."""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "rule_options": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }


class BillingRulePermission(BaseRolePermission):
    """Credit notes, doctor assignments and limits."""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "resolve": ALL_ROLES,
        "create": {ROLE_ADMIN, ROLE_BILLING},
        "update": {ROLE_ADMIN, ROLE_BILLING},
        "partial_update": {ROLE_ADMIN, ROLE_BILLING},
        "destroy": {ROLE_ADMIN, ROLE_BILLING},
        "reactivate": {ROLE_ADMIN, ROLE_BILLING},
    }


class AuditPermission(BaseRolePermission):
    """Audit log access."""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN},
        "retrieve": {ROLE_ADMIN},
    }
