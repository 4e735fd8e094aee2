# erp_core/business_units/models.py
import uuid

from django.db import models


class BusinessUnit(models.Model):
    """
    Top-level organisational unit.
    Root of all scoping in the system: every scoped row carries a business_unit_id,
    and rules from different business units never compete.
    NOT a ScopedModel (it *is* the scope).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64, unique=True)

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "business_units_business_unit"
        indexes = [
            models.Index(fields=["code"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
