# erp_core/billing_rules/selectors.py
from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from django.db.models import Q, QuerySet

from erp_core.billing_rules.conflicts import Signature
from erp_core.billing_rules.matching import OPTIONAL_DIMENSIONS, RuleQuery
from erp_core.billing_rules.models import BillingRule, RuleKind


def _dimension_q(name: str, value: Optional[UUID]) -> Q:
    # wildcard always matches; a pinned value only matches the same value
    q = Q(**{f"{name}__isnull": True})
    if value is not None:
        q |= Q(**{f"{name}_id": value})
    return q


def candidate_rules(query: RuleQuery, valid_on: Optional[date] = None) -> QuerySet[BillingRule]:
    """
    Active rules compatible with every dimension of the query, optionally
    narrowed to those valid on a date. Ranking is left to the engine.
    """
    qs = BillingRule.objects.filter(
        business_unit_id=query.business_unit_id,
        hospital_id=query.hospital_id,
        kind=query.kind,
        is_active=True,
    )
    if query.kind == RuleKind.DOCTOR_ASSIGNMENT:
        qs = qs.filter(doctor_id=query.doctor_id)

    for name in OPTIONAL_DIMENSIONS:
        qs = qs.filter(_dimension_q(name, query.dimension(name)))

    if valid_on is not None:
        qs = qs.filter(validity_from__lte=valid_on, validity_to__gt=valid_on)
    return qs


def same_signature_rules(
    *,
    business_unit_id: UUID,
    hospital_id: UUID,
    kind: str,
    doctor_id: Optional[UUID],
    signature: Signature,
) -> QuerySet[BillingRule]:
    """Active rules that would compete with a rule of this exact shape."""
    payment_type_id, surgical_category_id, procedure_id = signature
    return BillingRule.objects.filter(
        business_unit_id=business_unit_id,
        hospital_id=hospital_id,
        kind=kind,
        doctor_id=doctor_id,
        payment_type_id=payment_type_id,
        surgical_category_id=surgical_category_id,
        procedure_id=procedure_id,
        is_active=True,
    )
