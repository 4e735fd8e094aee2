# erp_core/limits/models.py
from django.db import models
from django.db.models import Q

from erp_core.common.models import AuditedScopedModel


class Currency(models.TextChoices):
    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"
    GBP = "GBP", "British Pound"
    INR = "INR", "Indian Rupee"
    AUD = "AUD", "Australian Dollar"
    CAD = "CAD", "Canadian Dollar"


class Limit(AuditedScopedModel):
    """
    Spending ceiling for one payment type / surgical category pair.
    At most one active limit per pair within a business unit.
    """
    payment_type = models.ForeignKey("masters.PaymentType", on_delete=models.PROTECT, related_name="limits")
    surgical_category = models.ForeignKey("masters.SurgicalCategory", on_delete=models.PROTECT, related_name="limits")

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.INR)
    description = models.CharField(max_length=500, blank=True, default="")

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "limits_limit"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business_unit_id", "payment_type", "surgical_category", "is_active"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["business_unit_id", "payment_type", "surgical_category"],
                condition=Q(is_active=True),
                name="uq_limit_active_pair",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.payment_type_id}/{self.surgical_category_id} {self.amount} {self.currency}"
