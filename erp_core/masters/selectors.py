# erp_core/masters/selectors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.db.models import Q, QuerySet

from erp_core.masters.models import Hospital, PaymentType, Procedure, SurgicalCategory


def visible_to(business_unit_id: UUID) -> Q:
    """Rows owned by the business unit plus shared rows."""
    return Q(business_unit_id=business_unit_id) | Q(business_unit_id__isnull=True)


def payment_types_for_business_unit(*, business_unit_id: UUID, active_only: bool = True) -> QuerySet[PaymentType]:
    qs = PaymentType.objects.filter(visible_to(business_unit_id))
    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by("description")


@dataclass(frozen=True)
class RuleOptions:
    hospital: Hospital
    payment_types: QuerySet[PaymentType]
    surgical_categories: QuerySet[SurgicalCategory]
    procedures: QuerySet[Procedure]


def rule_options_for_hospital(
    *,
    business_unit_id: UUID,
    hospital: Hospital,
    payment_type_id: Optional[UUID] = None,
    surgical_category_id: Optional[UUID] = None,
) -> RuleOptions:
    """
    Choices offered when building a credit note or doctor assignment for a
    hospital: every visible payment type, the hospital's own categories and
    the procedures narrowed by what has been picked so far.
    """
    payment_types = payment_types_for_business_unit(business_unit_id=business_unit_id)
    categories = hospital.surgical_categories.filter(is_active=True).order_by("description")

    procedures = Procedure.objects.filter(visible_to(business_unit_id), is_active=True)
    if payment_type_id:
        procedures = procedures.filter(payment_type_id=payment_type_id)
    if surgical_category_id:
        procedures = procedures.filter(surgical_categories__id=surgical_category_id)
    elif categories.exists():
        procedures = procedures.filter(surgical_categories__in=categories)

    return RuleOptions(
        hospital=hospital,
        payment_types=payment_types,
        surgical_categories=categories,
        procedures=procedures.distinct().order_by("name"),
    )
