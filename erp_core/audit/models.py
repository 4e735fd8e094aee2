# erp_core/audit/models.py
from django.conf import settings
from django.db import models

from erp_core.common.models import ScopedModel


class AuditEventCode(models.TextChoices):
    BILLING_RULE_CREATED = "billing_rule.created", "Billing rule created"
    BILLING_RULE_UPDATED = "billing_rule.updated", "Billing rule updated"
    BILLING_RULE_DEACTIVATED = "billing_rule.deactivated", "Billing rule deactivated"
    BILLING_RULE_REACTIVATED = "billing_rule.reactivated", "Billing rule reactivated"
    LIMIT_CREATED = "limit.created", "Limit created"
    LIMIT_UPDATED = "limit.updated", "Limit updated"
    LIMIT_DEACTIVATED = "limit.deactivated", "Limit deactivated"


class AuditEvent(ScopedModel):
    """
    Append-only trail of credit-note, doctor-assignment and limit changes.
    `metadata` holds the field values right after the write.
    """
    event_code = models.CharField(max_length=64, choices=AuditEventCode.choices, db_index=True)
    entity_type = models.CharField(max_length=64, db_index=True)
    entity_id = models.UUIDField(db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "audit_audit_event"
        ordering = ["-occurred_at"]
        indexes = [
            models.Index(fields=["business_unit_id", "occurred_at"]),
            models.Index(fields=["entity_type", "entity_id"]),
        ]

    def __str__(self) -> str:
        return f"{self.event_code} {self.entity_type}:{self.entity_id}"
