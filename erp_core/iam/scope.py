# erp_core/iam/scope.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from rest_framework.exceptions import PermissionDenied, ValidationError


@dataclass(frozen=True)
class Scope:
    business_unit_id: UUID


# Preferred header name (what we standardize on)
HDR_BUSINESS_UNIT = "X-Business-Unit-Id"

# Namespaced variant (kept for proxies that strip unknown X- headers)
HDR_BUSINESS_UNIT_ERP = "X-ERP-Business-Unit-Id"

MISSING_SCOPE_MSG = "Missing scope header. Provide X-Business-Unit-Id."
INVALID_SCOPE_MSG = "Invalid scope header. Provide a valid UUID for X-Business-Unit-Id."


def _get_header(request, name: str) -> str | None:
    headers = getattr(request, "headers", None)
    if headers is None:
        return None
    return headers.get(name)


def resolve_scope_from_headers(request) -> Scope | None:
    """
    Reads the scope header.
    - Missing: returns None.
    - Not a UUID: raises 400 ValidationError with INVALID_SCOPE_MSG.
    """
    raw = _get_header(request, HDR_BUSINESS_UNIT) or _get_header(request, HDR_BUSINESS_UNIT_ERP)
    if not raw:
        return None

    try:
        return Scope(business_unit_id=UUID(str(raw)))
    except (TypeError, ValueError):
        raise ValidationError({"detail": INVALID_SCOPE_MSG})


def assert_user_membership(user, scope: Scope) -> None:
    """
    Ensures user is a member of the scoped business unit. Raises 403 if not.
    """
    from erp_core.iam.services import membership

    if not user or not getattr(user, "is_authenticated", False):
        raise PermissionDenied("Authentication required to set scope.")

    if not membership.is_user_member_of_business_unit(user=user, business_unit_id=scope.business_unit_id):
        raise PermissionDenied("You do not have access to the selected business unit.")


def apply_scope_from_headers(request, user=None) -> Scope | None:
    """
    Used by the auth layer (CookieOrHeaderJWTAuthentication).

    If the scope header is present:
      - validates it is a UUID
      - verifies user membership
      - sets request.business_unit_id and request.scope
    If absent: returns None and does nothing.
    """
    scope = resolve_scope_from_headers(request)
    if scope is None:
        return None

    assert_user_membership(user or getattr(request, "user", None), scope)

    request.business_unit_id = scope.business_unit_id
    request.scope = scope
    return scope
