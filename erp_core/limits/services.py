# erp_core/limits/services.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from erp_core.audit.models import AuditEventCode
from erp_core.audit.services import AuditService
from erp_core.common.api.exceptions import ConflictError
from erp_core.common.decimals import MONEY_CEILING, MONEY_CEILING_MSG, to_decimal
from erp_core.limits.models import Currency, Limit
from erp_core.limits.selectors import active_limit_for
from erp_core.masters.lookup import require_visible
from erp_core.masters.models import PaymentType, SurgicalCategory

logger = logging.getLogger(__name__)

AUDITED_FIELDS = ("payment_type", "surgical_category", "amount", "currency")


class LimitService:
    @staticmethod
    def _ensure_unique(
        *,
        business_unit_id: UUID,
        payment_type_id: UUID,
        surgical_category_id: UUID,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        clash = active_limit_for(
            business_unit_id=business_unit_id,
            payment_type_id=payment_type_id,
            surgical_category_id=surgical_category_id,
            exclude_id=exclude_id,
        )
        if clash is not None:
            raise ConflictError(
                {
                    "detail": "A limit for this payment type and surgical category already exists.",
                    "conflicting_limit_id": str(clash.id),
                }
            )

    @staticmethod
    @transaction.atomic
    def upsert(
        *,
        business_unit_id: UUID,
        payment_type_id: UUID,
        surgical_category_id: UUID,
        amount,
        currency: str = Currency.INR,
        description: str = "",
        limit_id: Optional[UUID] = None,
        actor_user_id: Optional[int] = None,
    ) -> Limit:
        amount = to_decimal(amount, "amount")
        if amount < Decimal("0.00"):
            raise ValidationError({"amount": "Must be >= 0"})
        if amount >= MONEY_CEILING:
            raise ValidationError({"amount": MONEY_CEILING_MSG})
        amount = amount.quantize(Decimal("0.01"))
        if currency not in Currency.values:
            raise ValidationError({"currency": "Invalid currency."})

        payment_type = require_visible(
            PaymentType, business_unit_id=business_unit_id, pk=payment_type_id, field="payment_type"
        )
        category = require_visible(
            SurgicalCategory, business_unit_id=business_unit_id, pk=surgical_category_id, field="surgical_category"
        )

        if limit_id is not None:
            limit = Limit.objects.select_for_update().filter(id=limit_id, business_unit_id=business_unit_id).first()
            if limit is None:
                raise ValidationError({"id": "Limit not found in this business unit."})
        else:
            limit = Limit(business_unit_id=business_unit_id, created_by_id=actor_user_id)

        if limit.is_active:
            LimitService._ensure_unique(
                business_unit_id=business_unit_id,
                payment_type_id=payment_type.id,
                surgical_category_id=category.id,
                exclude_id=limit_id,
            )

        created = limit_id is None
        limit.payment_type = payment_type
        limit.surgical_category = category
        limit.amount = amount
        limit.currency = currency
        limit.description = (description or "").strip()
        limit.updated_by_id = actor_user_id

        # uq_limit_active_pair catches a concurrent writer that passed _ensure_unique too
        try:
            with transaction.atomic():
                limit.save()
        except IntegrityError:
            raise ConflictError(
                {"detail": "A limit for this payment type and surgical category already exists."}
            )

        AuditService.record(
            instance=limit,
            event_code=AuditEventCode.LIMIT_CREATED if created else AuditEventCode.LIMIT_UPDATED,
            actor_user_id=actor_user_id,
            fields=AUDITED_FIELDS,
        )
        logger.info("limit %s: id=%s", "created" if created else "updated", limit.id)
        return limit

    @staticmethod
    @transaction.atomic
    def deactivate(*, business_unit_id: UUID, limit_id: UUID, actor_user_id: Optional[int] = None) -> Limit:
        limit = Limit.objects.select_for_update().get(id=limit_id, business_unit_id=business_unit_id)
        if not limit.is_active:
            return limit
        limit.is_active = False
        limit.updated_by_id = actor_user_id
        limit.save(update_fields=["is_active", "updated_by", "updated_at"])

        AuditService.record(
            instance=limit,
            event_code=AuditEventCode.LIMIT_DEACTIVATED,
            actor_user_id=actor_user_id,
            fields=("is_active",),
        )
        return limit
