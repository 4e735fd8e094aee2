# erp_core/billing_rules/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from erp_core.billing_rules.api.filters import BillingRuleFilter
from erp_core.billing_rules.api.serializers import (
    BillingRuleSerializer,
    CreditNoteWriteSerializer,
    DoctorAssignmentWriteSerializer,
    ResolutionSerializer,
    ResolveQuerySerializer,
)
from erp_core.billing_rules.engine import RuleEngine
from erp_core.billing_rules.matching import RuleQuery
from erp_core.billing_rules.models import BillingRule, ChargeType, RuleKind
from erp_core.billing_rules.services import BillingRuleService
from erp_core.common.permissions import BillingRulePermission
from erp_core.common.scope import require_scope

HOSPITAL_PARAM = OpenApiParameter(
    name="hospital",
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.QUERY,
    required=True,
    description="Hospital whose rules are listed.",
)


def _actor_id(request):
    user = getattr(request, "user", None)
    return user.id if user and user.is_authenticated else None


class BillingRuleViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Shared routes for both rule kinds. Writes go through
    BillingRuleService so validation, the overlap check and auditing
    always run together.
    """
    permission_classes = [BillingRulePermission]
    serializer_class = BillingRuleSerializer
    filterset_class = BillingRuleFilter
    ordering_fields = ["priority", "validity_from", "validity_to", "created_at"]
    ordering = ["-priority", "-validity_from"]
    search_fields = ["description"]

    kind: str = ""
    write_serializer_class = CreditNoteWriteSerializer

    def get_queryset(self):
        qs = BillingRule.objects.filter(kind=self.kind).select_related(
            "hospital", "doctor", "payment_type", "surgical_category", "procedure"
        )
        if getattr(self, "swagger_fake_view", False):
            return qs.none()
        scope = require_scope(self.request)
        return qs.filter(business_unit_id=scope.business_unit_id)

    def get_serializer_class(self):
        if self.action in ("create", "update"):
            return self.write_serializer_class
        return BillingRuleSerializer

    def _write_kwargs(self, data) -> dict:
        return {
            "hospital_id": data["hospital"],
            "doctor_id": data.get("doctor"),
            "payment_type_id": data.get("payment_type"),
            "surgical_category_id": data.get("surgical_category"),
            "procedure_id": data.get("procedure"),
            "charge_type": data.get("charge_type", ChargeType.PERCENTAGE),
            "value": data["value"],
            "validity_from": data["validity_from"],
            "validity_to": data["validity_to"],
            "description": data.get("description", ""),
        }

    @extend_schema(parameters=[HOSPITAL_PARAM], responses={200: BillingRuleSerializer(many=True)})
    def list(self, request):
        if not request.query_params.get("hospital"):
            raise ValidationError({"hospital": "This query parameter is required."})

        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(BillingRuleSerializer(page, many=True).data)
        return Response(BillingRuleSerializer(qs, many=True).data)

    @extend_schema(responses={201: BillingRuleSerializer})
    def create(self, request):
        scope = require_scope(request)
        ser = self.write_serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)

        result = BillingRuleService.upsert_rule(
            business_unit_id=scope.business_unit_id,
            kind=self.kind,
            actor_user_id=_actor_id(request),
            **self._write_kwargs(ser.validated_data),
        )
        return Response(BillingRuleSerializer(result.rule).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: BillingRuleSerializer})
    def update(self, request, pk=None):
        scope = require_scope(request)
        rule = self.get_object()
        ser = self.write_serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)

        result = BillingRuleService.upsert_rule(
            business_unit_id=scope.business_unit_id,
            kind=self.kind,
            rule_id=rule.id,
            actor_user_id=_actor_id(request),
            **self._write_kwargs(ser.validated_data),
        )
        return Response(BillingRuleSerializer(result.rule).data)

    @extend_schema(request=None, responses={204: None}, description="Soft delete (sets is_active=false).")
    def destroy(self, request, pk=None):
        scope = require_scope(request)
        rule = self.get_object()
        BillingRuleService.deactivate_rule(
            business_unit_id=scope.business_unit_id,
            rule_id=rule.id,
            actor_user_id=_actor_id(request),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: BillingRuleSerializer})
    @action(detail=True, methods=["post"], url_path="reactivate")
    def reactivate(self, request, pk=None):
        scope = require_scope(request)
        rule = self.get_object()
        rule = BillingRuleService.set_rule_active(
            business_unit_id=scope.business_unit_id,
            rule_id=rule.id,
            is_active=True,
            actor_user_id=_actor_id(request),
        )
        return Response(BillingRuleSerializer(rule).data)

    @extend_schema(request=ResolveQuerySerializer, responses={200: ResolutionSerializer})
    @action(detail=False, methods=["post"], url_path="resolve")
    def resolve(self, request):
        scope = require_scope(request)
        ser = ResolveQuerySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        query = RuleQuery(
            business_unit_id=scope.business_unit_id,
            hospital_id=data.get("hospital"),
            kind=self.kind,
            doctor_id=data.get("doctor") if self.kind == RuleKind.DOCTOR_ASSIGNMENT else None,
            payment_type_id=data.get("payment_type"),
            surgical_category_id=data.get("surgical_category"),
            procedure_id=data.get("procedure"),
        )
        resolution = RuleEngine.resolve(query, on=data.get("on"))
        return Response(ResolutionSerializer(resolution).data)


@extend_schema(tags=["Credit notes"])
class CreditNoteViewSet(BillingRuleViewSet):
    kind = RuleKind.CREDIT_NOTE
    write_serializer_class = CreditNoteWriteSerializer


@extend_schema(tags=["Doctor assignments"])
class DoctorAssignmentViewSet(BillingRuleViewSet):
    kind = RuleKind.DOCTOR_ASSIGNMENT
    write_serializer_class = DoctorAssignmentWriteSerializer
