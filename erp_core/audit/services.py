# erp_core/audit/services.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from django.db import models

from erp_core.audit.models import AuditEvent


def _json_safe(value: Any) -> Any:
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def snapshot(instance: models.Model, fields: Iterable[str]) -> Dict[str, Any]:
    """Field values of `instance` as JSON-ready metadata. FKs are stored by id."""
    data: Dict[str, Any] = {}
    for name in fields:
        field = instance._meta.get_field(name)
        attname = field.attname if field.is_relation else name
        data[attname] = _json_safe(getattr(instance, attname))
    return data


class AuditService:
    @staticmethod
    def record(
        *,
        instance: models.Model,
        event_code: str,
        actor_user_id: Optional[int],
        fields: Iterable[str] = (),
        extra: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        """
        Writes one event for a scoped model instance (BillingRule, Limit).
        Runs inside the caller's transaction so the event and the change
        commit together.
        """
        metadata = snapshot(instance, fields)
        if extra:
            metadata.update({k: _json_safe(v) for k, v in extra.items()})

        return AuditEvent.objects.create(
            business_unit_id=instance.business_unit_id,
            event_code=event_code,
            entity_type=instance._meta.object_name,
            entity_id=instance.pk,
            actor_user_id=actor_user_id,
            metadata=metadata,
        )
