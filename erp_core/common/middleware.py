from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from erp_core.common.api.exceptions import build_error_envelope
from erp_core.iam.scope import INVALID_SCOPE_MSG, MISSING_SCOPE_MSG


@dataclass(frozen=True)
class RequestScope:
    business_unit_id: UUID


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class BusinessUnitScopeMiddleware(MiddlewareMixin):
    """
    Enforces business-unit scope for API requests.

    Behavior:
      - Enforced under /api/v1/.
      - Most endpoints: X-Business-Unit-Id is required (400 if missing).
      - /me/ and /business-units/: header is OPTIONAL, but if provided it must be
        valid and the user must be a member.
      - Auth endpoints (login/refresh/logout): scope is ignored.
      - Docs/schema/admin endpoints: public.
      - Invalid UUID -> 400, not a member -> 403.
      - On success -> attaches request.scope and request.business_unit_id.

    Requests authenticated by DRF (JWT) are not visible here yet; the DRF
    auth class and BaseRolePermission apply the same rules for them.
    """

    BUSINESS_UNIT_META_KEYS = ("HTTP_X_BUSINESS_UNIT_ID", "HTTP_X_ERP_BUSINESS_UNIT_ID")

    ENFORCED_PREFIXES = ("/api/v1/",)

    PUBLIC_PATH_PREFIXES = (
        "/admin/",
        "/api/docs/",
        "/api/schema/",
    )

    AUTH_PATH_SUFFIXES = (
        "/auth/login/",
        "/auth/refresh/",
        "/auth/logout/",
    )

    ALLOW_NO_SCOPE_EXACT_PATHS = ("/api/v1/",)

    ALLOW_NO_SCOPE_FRAGMENTS = (
        "/me/",
        "/business-units/",
    )

    def _is_api_path(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.ENFORCED_PREFIXES)

    def _starts_with_any(self, path: str, prefixes: tuple[str, ...]) -> bool:
        return any(path.startswith(p) for p in prefixes)

    def _endswith_any(self, path: str, suffixes: tuple[str, ...]) -> bool:
        return any(path.endswith(s) for s in suffixes)

    def _get_meta_first(self, request, keys: tuple[str, ...]) -> Optional[str]:
        for k in keys:
            v = request.META.get(k)
            if v:
                return v
        return None

    def _json_error(self, request, *, status_code: int, code: str, message: str, details=None) -> JsonResponse:
        return JsonResponse(
            build_error_envelope(
                request=request,
                code=code,
                message=message,
                details=details,
            ),
            status=status_code,
        )

    def process_request(self, request):
        request.scope = None
        request.business_unit_id = None

        path = getattr(request, "path", "") or ""

        if self._starts_with_any(path, self.PUBLIC_PATH_PREFIXES):
            return None

        if not self._is_api_path(path):
            return None

        if path in self.ALLOW_NO_SCOPE_EXACT_PATHS:
            return None

        if self._endswith_any(path, self.AUTH_PATH_SUFFIXES):
            return None

        # Unauthenticated (or JWT, resolved later by DRF): nothing to enforce yet.
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        raw = self._get_meta_first(request, self.BUSINESS_UNIT_META_KEYS)

        if not raw:
            if any(fragment in path for fragment in self.ALLOW_NO_SCOPE_FRAGMENTS):
                return None
            return self._json_error(
                request,
                status_code=400,
                code="validation_error",
                message=MISSING_SCOPE_MSG,
            )

        business_unit_id = _parse_uuid(raw)
        if not business_unit_id:
            return self._json_error(
                request,
                status_code=400,
                code="validation_error",
                message=INVALID_SCOPE_MSG,
            )

        from erp_core.iam.services import membership

        if not membership.is_user_member_of_business_unit(user=user, business_unit_id=business_unit_id):
            return self._json_error(
                request,
                status_code=403,
                code="permission_denied",
                message="You do not have access to the selected business unit.",
            )

        request.scope = RequestScope(business_unit_id=business_unit_id)
        request.business_unit_id = business_unit_id
        return None
