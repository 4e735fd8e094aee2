# erp_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from erp_core.audit.models import AuditEvent


def list_audit_events(
    *,
    business_unit_id: UUID,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    event_code: str | None = None,
) -> QuerySet[AuditEvent]:
    """Newest first. Empty filters are ignored."""
    filters = {
        "entity_type": entity_type,
        "entity_id": entity_id,
        "event_code": event_code,
    }
    return (
        AuditEvent.objects.filter(business_unit_id=business_unit_id)
        .filter(**{k: v for k, v in filters.items() if v})
        .select_related("actor_user")
        .order_by("-occurred_at", "-id")
    )
