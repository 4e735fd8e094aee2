# erp_core/masters/lookup.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Type
from uuid import UUID

from rest_framework.exceptions import ValidationError

from erp_core.masters.models import Doctor, Hospital, MasterRecord, PaymentType, Procedure, SurgicalCategory
from erp_core.masters.selectors import visible_to


@dataclass(frozen=True)
class RuleReferences:
    hospital: Hospital
    doctor: Optional[Doctor] = None
    payment_type: Optional[PaymentType] = None
    surgical_category: Optional[SurgicalCategory] = None
    procedure: Optional[Procedure] = None


def _find(model: Type[MasterRecord], *, business_unit_id: UUID, pk: UUID, owned_only: bool = False):
    qs = model.objects.filter(id=pk, is_active=True)
    if owned_only:
        qs = qs.filter(business_unit_id=business_unit_id)
    else:
        qs = qs.filter(visible_to(business_unit_id))
    return qs.first()


def require_visible(model: Type[MasterRecord], *, business_unit_id: UUID, pk: UUID, field: str):
    obj = _find(model, business_unit_id=business_unit_id, pk=pk)
    if obj is None:
        label = model._meta.verbose_name.capitalize()
        raise ValidationError({field: f"{label} not found in this business unit."})
    return obj


def resolve_rule_references(
    *,
    business_unit_id: UUID,
    hospital_id: UUID,
    doctor_id: Optional[UUID] = None,
    payment_type_id: Optional[UUID] = None,
    surgical_category_id: Optional[UUID] = None,
    procedure_id: Optional[UUID] = None,
) -> RuleReferences:
    """
    Loads every master a billing rule points at.

    Missing, inactive or foreign-scope ids are all reported together,
    keyed by field.
    """
    errors: Dict[str, str] = {}

    hospital = _find(Hospital, business_unit_id=business_unit_id, pk=hospital_id, owned_only=True)
    if hospital is None:
        errors["hospital"] = "Hospital not found in this business unit."

    optional = {
        "doctor": (Doctor, doctor_id, "Doctor"),
        "payment_type": (PaymentType, payment_type_id, "Payment type"),
        "surgical_category": (SurgicalCategory, surgical_category_id, "Surgical category"),
        "procedure": (Procedure, procedure_id, "Procedure"),
    }
    found = {}
    for field, (model, pk, label) in optional.items():
        if pk is None:
            found[field] = None
            continue
        obj = _find(model, business_unit_id=business_unit_id, pk=pk)
        if obj is None:
            errors[field] = f"{label} not found in this business unit."
        found[field] = obj

    if errors:
        raise ValidationError(errors)

    return RuleReferences(hospital=hospital, **found)
