from __future__ import annotations

from django.db.models import QuerySet

from erp_core.business_units.models import BusinessUnit


def business_unit_qs() -> QuerySet[BusinessUnit]:
    return BusinessUnit.objects.all()
