# erp_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from erp_core.iam.api.schema_serializers import MeResponseSerializer
from erp_core.iam.scope import assert_user_membership, resolve_scope_from_headers
from erp_core.iam.services.membership import list_user_business_units


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        Returns user info + business-unit memberships.
        The scope header is optional here; if provided it must be valid and
        the user must be a member (400/403 otherwise).
        """
        scope = resolve_scope_from_headers(request)
        if scope is not None:
            assert_user_membership(request.user, scope)

        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "username": getattr(request.user, "username", None),
                    "email": getattr(request.user, "email", None),
                    "is_superuser": bool(getattr(request.user, "is_superuser", False)),
                },
                "memberships": list_user_business_units(request.user.id),
                "active_scope": {"business_unit_id": str(scope.business_unit_id)} if scope else None,
            },
            status=status.HTTP_200_OK,
        )
