# erp_core/billing_rules/models.py
from __future__ import annotations

from django.db import models

from erp_core.billing_rules.scoring import score_of
from erp_core.common.models import AuditedScopedModel


class RuleKind(models.TextChoices):
    CREDIT_NOTE = "CREDIT_NOTE", "Credit note"
    DOCTOR_ASSIGNMENT = "DOCTOR_ASSIGNMENT", "Doctor assignment"


class ChargeType(models.TextChoices):
    PERCENTAGE = "PERCENTAGE", "Percentage"
    FIXED = "FIXED", "Fixed amount"


class BillingRule(AuditedScopedModel):
    """
    Credit note or doctor fee assignment for one hospital.

    payment_type / surgical_category / procedure are optional dimensions:
    NULL is a wildcard that matches any value. priority is derived from
    which dimensions are set and is recomputed on every save.
    """
    kind = models.CharField(max_length=32, choices=RuleKind.choices, db_index=True)

    hospital = models.ForeignKey("masters.Hospital", on_delete=models.PROTECT, related_name="billing_rules")
    doctor = models.ForeignKey(
        "masters.Doctor",
        on_delete=models.PROTECT,
        related_name="billing_rules",
        null=True,
        blank=True,
    )

    payment_type = models.ForeignKey(
        "masters.PaymentType",
        on_delete=models.PROTECT,
        related_name="billing_rules",
        null=True,
        blank=True,
    )
    surgical_category = models.ForeignKey(
        "masters.SurgicalCategory",
        on_delete=models.PROTECT,
        related_name="billing_rules",
        null=True,
        blank=True,
    )
    procedure = models.ForeignKey(
        "masters.Procedure",
        on_delete=models.PROTECT,
        related_name="billing_rules",
        null=True,
        blank=True,
    )

    charge_type = models.CharField(max_length=16, choices=ChargeType.choices, default=ChargeType.PERCENTAGE)
    value = models.DecimalField(max_digits=12, decimal_places=2)

    validity_from = models.DateField()
    validity_to = models.DateField()

    description = models.CharField(max_length=200, blank=True, default="")

    priority = models.PositiveSmallIntegerField(default=0, editable=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "billing_rules_billing_rule"
        ordering = ["-priority", "-validity_from"]
        indexes = [
            models.Index(fields=["business_unit_id", "hospital", "kind", "is_active"], name="ix_rule_scope_active"),
            models.Index(fields=["hospital", "kind", "doctor"], name="ix_rule_hospital_doctor"),
            models.Index(fields=["validity_from", "validity_to"], name="ix_rule_validity"),
        ]

    def __str__(self) -> str:
        return f"{self.get_kind_display()} {self.hospital_id} p{self.priority}"

    def save(self, *args, **kwargs):
        self.priority = score_of(self)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "priority" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "priority"]
        super().save(*args, **kwargs)
