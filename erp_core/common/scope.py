# erp_core/common/scope.py
from __future__ import annotations

from uuid import UUID

from rest_framework.exceptions import ValidationError

from erp_core.iam.scope import MISSING_SCOPE_MSG, Scope, resolve_scope_from_headers


def require_scope(request) -> Scope:
    """
    Returns the active business-unit scope for a view.

    Prefers what middleware/auth already attached; falls back to headers
    (membership is enforced by the middleware/auth/permission layer, not here).
    """
    scope = getattr(request, "scope", None)
    if scope is not None and getattr(scope, "business_unit_id", None):
        return scope

    bu = getattr(request, "business_unit_id", None)
    if bu:
        scope = Scope(business_unit_id=UUID(str(bu)))
    else:
        scope = resolve_scope_from_headers(request)

    if scope is None:
        raise ValidationError({"detail": MISSING_SCOPE_MSG})

    request.scope = scope
    request.business_unit_id = scope.business_unit_id
    return scope
