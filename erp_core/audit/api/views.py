from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from erp_core.audit.api.serializers import AuditEventSerializer
from erp_core.audit.models import AuditEvent
from erp_core.audit.selectors import list_audit_events
from erp_core.common.permissions import AuditPermission
from erp_core.common.scope import require_scope


def _uuid_or_none(value: str | None, field_name: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError({field_name: "Invalid UUID"})


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    List audit events for the active business unit.
    """
    permission_classes = [AuditPermission]

    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="entity_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity type (e.g. BillingRule, Limit).",
            ),
            OpenApiParameter(
                name="entity_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity UUID.",
            ),
            OpenApiParameter(
                name="event_code",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by event code (e.g. billing_rule.created).",
            ),
        ],
    )
    def list(self, request):
        scope = require_scope(request)

        qs = list_audit_events(
            business_unit_id=scope.business_unit_id,
            entity_type=request.query_params.get("entity_type") or None,
            entity_id=_uuid_or_none(request.query_params.get("entity_id"), "entity_id"),
            event_code=request.query_params.get("event_code") or None,
        )
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)
