# erp_core/limits/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from erp_core.common.permissions import BillingRulePermission
from erp_core.common.scope import require_scope
from erp_core.limits.api.serializers import LimitSerializer, LimitWriteSerializer
from erp_core.limits.models import Limit
from erp_core.limits.selectors import limits_for_business_unit
from erp_core.limits.services import LimitService


@extend_schema(tags=["Limits"])
class LimitViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    permission_classes = [BillingRulePermission]
    serializer_class = LimitSerializer
    filterset_fields = ["payment_type", "surgical_category", "currency", "is_active"]
    ordering_fields = ["amount", "created_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Limit.objects.none()
        scope = require_scope(self.request)
        return limits_for_business_unit(business_unit_id=scope.business_unit_id)

    def get_serializer_class(self):
        if self.action in ("create", "update"):
            return LimitWriteSerializer
        return LimitSerializer

    def _actor_id(self):
        user = self.request.user
        return user.id if user and user.is_authenticated else None

    @extend_schema(responses={201: LimitSerializer})
    def create(self, request):
        scope = require_scope(request)
        ser = LimitWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data

        limit = LimitService.upsert(
            business_unit_id=scope.business_unit_id,
            payment_type_id=d["payment_type"],
            surgical_category_id=d["surgical_category"],
            amount=d["amount"],
            currency=d["currency"],
            description=d.get("description", ""),
            actor_user_id=self._actor_id(),
        )
        return Response(LimitSerializer(limit).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: LimitSerializer})
    def update(self, request, pk=None):
        scope = require_scope(request)
        limit = self.get_object()
        ser = LimitWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data

        limit = LimitService.upsert(
            business_unit_id=scope.business_unit_id,
            limit_id=limit.id,
            payment_type_id=d["payment_type"],
            surgical_category_id=d["surgical_category"],
            amount=d["amount"],
            currency=d["currency"],
            description=d.get("description", ""),
            actor_user_id=self._actor_id(),
        )
        return Response(LimitSerializer(limit).data)

    @extend_schema(request=None, responses={204: None}, description="Soft delete (sets is_active=false).")
    def destroy(self, request, pk=None):
        scope = require_scope(request)
        limit = self.get_object()
        LimitService.deactivate(
            business_unit_id=scope.business_unit_id,
            limit_id=limit.id,
            actor_user_id=self._actor_id(),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
