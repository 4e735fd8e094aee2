from __future__ import annotations

from uuid import UUID

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from erp_core.business_units.api.serializers import (
    BusinessUnitActiveSerializer,
    BusinessUnitCreateSerializer,
    BusinessUnitSerializer,
)
from erp_core.business_units.models import BusinessUnit
from erp_core.business_units.selectors import business_unit_qs
from erp_core.business_units.services import BusinessUnitService


def _parse_pk(pk) -> UUID:
    try:
        return UUID(str(pk))
    except (TypeError, ValueError):
        raise NotFound("Business unit not found.")


@extend_schema_view(
    list=extend_schema(tags=["Business Units"], responses={200: BusinessUnitSerializer(many=True)}),
    retrieve=extend_schema(tags=["Business Units"], responses={200: BusinessUnitSerializer}),
    create=extend_schema(tags=["Business Units"], request=BusinessUnitCreateSerializer, responses={201: BusinessUnitSerializer}),
    set_active=extend_schema(tags=["Business Units"], request=BusinessUnitActiveSerializer, responses={200: BusinessUnitSerializer}),
)
class BusinessUnitViewSet(viewsets.ViewSet):
    """
    Admin-only business unit management (not scoped by X-Business-Unit-Id).
    """

    permission_classes = [IsAdminUser]

    serializer_class = BusinessUnitSerializer
    queryset = BusinessUnit.objects.none()

    def list(self, request):
        qs = business_unit_qs().order_by("name")
        return Response(BusinessUnitSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        obj = get_object_or_404(business_unit_qs(), id=_parse_pk(pk))
        return Response(BusinessUnitSerializer(obj).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = BusinessUnitCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        bu = BusinessUnitService.create(
            name=ser.validated_data["name"],
            code=ser.validated_data["code"],
        )
        return Response(BusinessUnitSerializer(bu).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="set-active")
    def set_active(self, request, pk=None):
        ser = BusinessUnitActiveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        bu = BusinessUnitService.set_active(
            business_unit_id=_parse_pk(pk),
            is_active=ser.validated_data["is_active"],
        )
        return Response(BusinessUnitSerializer(bu).data, status=status.HTTP_200_OK)
