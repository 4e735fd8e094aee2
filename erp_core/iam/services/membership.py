# erp_core/iam/services/membership.py
from __future__ import annotations

from uuid import UUID

from erp_core.iam.models import BusinessUnitMembership


def list_user_business_units(user_id: int) -> list[dict]:
    """
    Return business-unit memberships for the /me response.
    """
    qs = (
        BusinessUnitMembership.objects.select_related("business_unit")
        .filter(user_id=user_id, is_active=True, business_unit__is_active=True)
        .order_by("business_unit__name")
    )

    return [
        {
            "business_unit_id": str(m.business_unit_id),
            "business_unit_code": m.business_unit.code,
            "business_unit_name": m.business_unit.name,
            "role": m.role,
        }
        for m in qs
    ]


def is_user_member_of_business_unit(*, user, business_unit_id: UUID) -> bool:
    """
    Validate user -> business unit membership.
    Single source of truth used by scope enforcement; superusers see every unit.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False):
        return True

    return BusinessUnitMembership.objects.filter(
        is_active=True,
        user_id=user.id,
        business_unit_id=business_unit_id,
        business_unit__is_active=True,
    ).exists()
