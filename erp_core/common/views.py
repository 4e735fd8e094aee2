# erp_core/common/views.py
from __future__ import annotations

from django.db.models import Q
from rest_framework import status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from erp_core.common.scope import require_scope


class ScopedModelViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet that scopes queries to the request's business unit.

    - `include_shared`: also expose rows with no business unit
      (master data shared by every unit).
    - DELETE is a soft delete: it flips `is_active`.
    - shared rows are read-only through the API.
    """

    include_shared = False

    def get_scope_q(self) -> Q:
        scope = require_scope(self.request)
        q = Q(business_unit_id=scope.business_unit_id)
        if self.include_shared:
            q |= Q(business_unit_id__isnull=True)
        return q

    def get_queryset(self):
        qs = super().get_queryset()
        # schema generation runs without a scoped request
        if getattr(self, "swagger_fake_view", False):
            return qs.none()
        return qs.filter(self.get_scope_q())

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if getattr(self, "swagger_fake_view", False):
            return context
        context["business_unit_id"] = require_scope(self.request).business_unit_id
        return context

    def perform_create(self, serializer):
        scope = require_scope(self.request)
        serializer.save(business_unit_id=scope.business_unit_id)

    def _ensure_owned(self, obj) -> None:
        if getattr(obj, "business_unit_id", None) is None:
            raise PermissionDenied("Shared master data can only be changed from the admin site.")

    def perform_update(self, serializer):
        self._ensure_owned(serializer.instance)
        serializer.save()

    def destroy(self, request, *args, **kwargs):
        obj = self.get_object()
        self._ensure_owned(obj)
        if obj.is_active:
            obj.is_active = False
            obj.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)
