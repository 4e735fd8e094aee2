from __future__ import annotations

from uuid import UUID

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import ValidationError

from erp_core.business_units.models import BusinessUnit
from erp_core.common.api.exceptions import ConflictError


class BusinessUnitService:
    """
    All BusinessUnit mutations live here (write-model boundary).
    """

    @staticmethod
    @transaction.atomic
    def create(*, name: str, code: str) -> BusinessUnit:
        code = (code or "").strip()
        name = (name or "").strip()

        if not code:
            raise ValidationError({"code": "This field is required."})
        if not name:
            raise ValidationError({"name": "This field is required."})

        if BusinessUnit.objects.filter(code=code).exists():
            raise ConflictError(f"Business unit with code '{code}' already exists.")

        return BusinessUnit.objects.create(name=name, code=code)

    @staticmethod
    @transaction.atomic
    def set_active(*, business_unit_id: UUID, is_active: bool) -> BusinessUnit:
        bu = get_object_or_404(BusinessUnit.objects.select_for_update(), id=business_unit_id)

        # idempotent no-op
        if bu.is_active == is_active:
            return bu

        bu.is_active = is_active
        bu.save(update_fields=["is_active", "updated_at"])
        return bu
