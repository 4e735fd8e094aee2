# erp_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from erp_core.business_units.models import BusinessUnit


class MembershipRole(models.TextChoices):
    ADMIN = "ADMIN", "Administrator"
    BILLING = "BILLING", "Billing"
    READONLY = "READONLY", "Read only"


class BusinessUnitMembership(models.Model):
    """
    Assigns a user to a business unit.
    This is the enforcement point for business-unit level access.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bu_memberships")
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.PROTECT, related_name="memberships")

    role = models.CharField(max_length=16, choices=MembershipRole.choices, default=MembershipRole.READONLY)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_business_unit_membership"
        constraints = [
            models.UniqueConstraint(fields=["business_unit", "user"], name="uq_business_unit_user_membership"),
        ]
        indexes = [
            models.Index(fields=["business_unit", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.business_unit_id} ({self.role})"
