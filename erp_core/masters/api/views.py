# erp_core/masters/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from erp_core.common.permissions import MasterDataPermission
from erp_core.common.views import ScopedModelViewSet
from erp_core.masters.api.serializers import (
    DoctorSerializer,
    HospitalSerializer,
    ImplantTypeSerializer,
    PaymentTypeSerializer,
    ProcedureSerializer,
    RuleOptionsSerializer,
    SurgicalCategorySerializer,
)
from erp_core.masters.models import (
    Doctor,
    Hospital,
    ImplantType,
    PaymentType,
    Procedure,
    SurgicalCategory,
)
from erp_core.masters.selectors import rule_options_for_hospital


def _uuid_param(request, name: str) -> UUID | None:
    raw = request.query_params.get(name)
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        raise ValidationError({name: "Invalid UUID"})


class MasterViewSet(ScopedModelViewSet):
    permission_classes = [MasterDataPermission]
    filterset_fields = ["is_active"]
    # PUT is the only update verb the billing UI uses
    http_method_names = ["get", "post", "put", "delete", "head", "options"]


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class HospitalViewSet(MasterViewSet):
    queryset = Hospital.objects.prefetch_related("surgical_categories")
    serializer_class = HospitalSerializer
    filterset_fields = ["is_active", "payment_terms", "state_code"]
    search_fields = ["short_name", "legal_name", "gst_number"]
    ordering_fields = ["short_name", "created_at"]
    ordering = ["short_name"]

    @extend_schema(
        tags=["Masters"],
        responses={200: RuleOptionsSerializer},
        parameters=[
            OpenApiParameter(
                name="payment_type",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Narrow procedures to this payment type.",
            ),
            OpenApiParameter(
                name="surgical_category",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Narrow procedures to this surgical category.",
            ),
        ],
    )
    @action(detail=True, methods=["get"], url_path="rule-options")
    def rule_options(self, request, pk=None):
        hospital = self.get_object()
        options = rule_options_for_hospital(
            business_unit_id=hospital.business_unit_id,
            hospital=hospital,
            payment_type_id=_uuid_param(request, "payment_type"),
            surgical_category_id=_uuid_param(request, "surgical_category"),
        )
        return Response(RuleOptionsSerializer(options).data)


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class DoctorViewSet(MasterViewSet):
    include_shared = True
    queryset = Doctor.objects.prefetch_related("surgical_categories")
    serializer_class = DoctorSerializer
    search_fields = ["name", "email", "phone_number"]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class PaymentTypeViewSet(MasterViewSet):
    include_shared = True
    queryset = PaymentType.objects.all()
    serializer_class = PaymentTypeSerializer
    filterset_fields = ["is_active", "has_soft_limit"]
    search_fields = ["code", "description"]
    ordering_fields = ["code", "description"]
    ordering = ["description"]


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class SurgicalCategoryViewSet(MasterViewSet):
    include_shared = True
    queryset = SurgicalCategory.objects.all()
    serializer_class = SurgicalCategorySerializer
    search_fields = ["code", "description"]
    ordering_fields = ["code", "description"]
    ordering = ["description"]


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class ProcedureViewSet(MasterViewSet):
    include_shared = True
    queryset = Procedure.objects.select_related("payment_type").prefetch_related("surgical_categories")
    serializer_class = ProcedureSerializer
    filterset_fields = ["is_active", "payment_type", "surgical_categories"]
    search_fields = ["code", "name"]
    ordering_fields = ["code", "name"]
    ordering = ["name"]


@extend_schema_view(
    list=extend_schema(tags=["Masters"]),
    retrieve=extend_schema(tags=["Masters"]),
    create=extend_schema(tags=["Masters"]),
    update=extend_schema(tags=["Masters"]),
    destroy=extend_schema(tags=["Masters"], description="Soft delete (sets is_active=false)."),
)
class ImplantTypeViewSet(MasterViewSet):
    include_shared = True
    queryset = ImplantType.objects.prefetch_related("subcategories")
    serializer_class = ImplantTypeSerializer
    search_fields = ["name", "subcategories__sub_category"]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]
