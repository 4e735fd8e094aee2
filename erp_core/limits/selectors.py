# erp_core/limits/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from erp_core.limits.models import Limit


def limits_for_business_unit(*, business_unit_id: UUID) -> QuerySet[Limit]:
    return Limit.objects.filter(business_unit_id=business_unit_id).select_related("payment_type", "surgical_category")


def active_limit_for(
    *,
    business_unit_id: UUID,
    payment_type_id: UUID,
    surgical_category_id: UUID,
    exclude_id: Optional[UUID] = None,
) -> Optional[Limit]:
    qs = Limit.objects.filter(
        business_unit_id=business_unit_id,
        payment_type_id=payment_type_id,
        surgical_category_id=surgical_category_id,
        is_active=True,
    )
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.first()
