# erp_core/billing_rules/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from erp_core.audit.models import AuditEventCode
from erp_core.audit.services import AuditService
from erp_core.billing_rules.conflicts import RuleCandidate, find_conflict, rule_signature
from erp_core.billing_rules.models import BillingRule, ChargeType, RuleKind
from erp_core.billing_rules.selectors import same_signature_rules
from erp_core.billing_rules.validation import validate_rule_fields
from erp_core.common.api.exceptions import ConflictError
from erp_core.masters.lookup import resolve_rule_references
from erp_core.masters.models import Hospital

logger = logging.getLogger(__name__)

AUDITED_FIELDS = (
    "kind",
    "hospital",
    "doctor",
    "payment_type",
    "surgical_category",
    "procedure",
    "charge_type",
    "value",
    "validity_from",
    "validity_to",
    "priority",
)


@dataclass(frozen=True)
class UpsertRuleResult:
    rule: BillingRule
    created: bool


def _lock_hospital(*, business_unit_id: UUID, hospital_id: UUID) -> None:
    # every write for one hospital queues behind this row lock
    Hospital.objects.select_for_update().filter(id=hospital_id, business_unit_id=business_unit_id).first()


def _guard_against_conflicts(
    *,
    business_unit_id: UUID,
    hospital_id: UUID,
    kind: str,
    doctor_id: Optional[UUID],
    payment_type_id: Optional[UUID],
    surgical_category_id: Optional[UUID],
    procedure_id: Optional[UUID],
    validity_from: date,
    validity_to: date,
    rule_id: Optional[UUID] = None,
) -> None:
    signature = rule_signature(
        payment_type_id=payment_type_id,
        surgical_category_id=surgical_category_id,
        procedure_id=procedure_id,
    )
    existing = same_signature_rules(
        business_unit_id=business_unit_id,
        hospital_id=hospital_id,
        kind=kind,
        doctor_id=doctor_id,
        signature=signature,
    )
    clash = find_conflict(
        RuleCandidate(signature=signature, validity_from=validity_from, validity_to=validity_to, rule_id=rule_id),
        existing,
    )
    if clash is not None:
        logger.info(
            "billing rule conflict: kind=%s hospital=%s candidate=%s clashes_with=%s",
            kind,
            hospital_id,
            rule_id,
            clash.id,
        )
        raise ConflictError(
            {
                "detail": "An active rule with the same dimensions overlaps this validity window.",
                "conflicting_rule_id": str(clash.id),
                "conflicting_validity_from": clash.validity_from.isoformat(),
                "conflicting_validity_to": clash.validity_to.isoformat(),
            }
        )


class BillingRuleService:
    """
    Write side for credit notes and doctor assignments.

    Order inside one transaction: validate fields, resolve masters, lock
    the hospital row, run the overlap check, persist, audit.
    """

    @staticmethod
    @transaction.atomic
    def upsert_rule(
        *,
        business_unit_id: UUID,
        kind: str,
        hospital_id: UUID,
        value,
        validity_from: date,
        validity_to: date,
        charge_type: str = ChargeType.PERCENTAGE,
        doctor_id: Optional[UUID] = None,
        payment_type_id: Optional[UUID] = None,
        surgical_category_id: Optional[UUID] = None,
        procedure_id: Optional[UUID] = None,
        description: str = "",
        rule_id: Optional[UUID] = None,
        actor_user_id: Optional[int] = None,
    ) -> UpsertRuleResult:
        """
        Create a rule (rule_id=None) or replace the editable fields of an
        existing one. hospital and kind are fixed once a rule exists.
        """
        existing: Optional[BillingRule] = None
        if rule_id is not None:
            existing = BillingRule.objects.filter(id=rule_id, business_unit_id=business_unit_id).first()
            if existing is None:
                raise ValidationError({"id": "Billing rule not found in this business unit."})
            errors: dict[str, Any] = {}
            if existing.hospital_id != hospital_id:
                errors["hospital"] = "Hospital cannot be changed on an existing rule."
            if existing.kind != kind:
                errors["kind"] = "Rule kind cannot be changed."
            if errors:
                raise ValidationError(errors)

        amount = validate_rule_fields(
            kind=kind,
            charge_type=charge_type,
            value=value,
            validity_from=validity_from,
            validity_to=validity_to,
            doctor_id=doctor_id,
            description=description,
        )

        refs = resolve_rule_references(
            business_unit_id=business_unit_id,
            hospital_id=hospital_id,
            doctor_id=doctor_id,
            payment_type_id=payment_type_id,
            surgical_category_id=surgical_category_id,
            procedure_id=procedure_id,
        )

        _lock_hospital(business_unit_id=business_unit_id, hospital_id=hospital_id)

        if existing is not None:
            existing = BillingRule.objects.select_for_update().get(id=existing.id)

        # inactive rules never compete, so only active ones are guarded
        if existing is None or existing.is_active:
            _guard_against_conflicts(
                business_unit_id=business_unit_id,
                hospital_id=hospital_id,
                kind=kind,
                doctor_id=doctor_id,
                payment_type_id=payment_type_id,
                surgical_category_id=surgical_category_id,
                procedure_id=procedure_id,
                validity_from=validity_from,
                validity_to=validity_to,
                rule_id=rule_id,
            )

        rule = existing or BillingRule(
            business_unit_id=business_unit_id,
            kind=kind,
            hospital=refs.hospital,
            created_by_id=actor_user_id,
        )
        rule.doctor = refs.doctor
        rule.payment_type = refs.payment_type
        rule.surgical_category = refs.surgical_category
        rule.procedure = refs.procedure
        rule.charge_type = charge_type
        rule.value = amount
        rule.validity_from = validity_from
        rule.validity_to = validity_to
        rule.description = (description or "").strip()
        rule.updated_by_id = actor_user_id
        rule.save()

        created = existing is None
        AuditService.record(
            instance=rule,
            event_code=AuditEventCode.BILLING_RULE_CREATED if created else AuditEventCode.BILLING_RULE_UPDATED,
            actor_user_id=actor_user_id,
            fields=AUDITED_FIELDS,
        )
        logger.info(
            "billing rule %s: id=%s kind=%s hospital=%s priority=%s",
            "created" if created else "updated",
            rule.id,
            kind,
            hospital_id,
            rule.priority,
        )
        return UpsertRuleResult(rule=rule, created=created)

    @staticmethod
    @transaction.atomic
    def set_rule_active(
        *,
        business_unit_id: UUID,
        rule_id: UUID,
        is_active: bool,
        actor_user_id: Optional[int] = None,
    ) -> BillingRule:
        """
        Soft delete / reactivate. Idempotent; reactivation is re-checked
        for overlaps because other rules may have taken the slot meanwhile.
        """
        rule = BillingRule.objects.filter(id=rule_id, business_unit_id=business_unit_id).first()
        if rule is None:
            raise ValidationError({"id": "Billing rule not found in this business unit."})

        if rule.is_active == is_active:
            return rule

        _lock_hospital(business_unit_id=business_unit_id, hospital_id=rule.hospital_id)
        rule = BillingRule.objects.select_for_update().get(id=rule.id)

        if is_active:
            _guard_against_conflicts(
                business_unit_id=business_unit_id,
                hospital_id=rule.hospital_id,
                kind=rule.kind,
                doctor_id=rule.doctor_id,
                payment_type_id=rule.payment_type_id,
                surgical_category_id=rule.surgical_category_id,
                procedure_id=rule.procedure_id,
                validity_from=rule.validity_from,
                validity_to=rule.validity_to,
                rule_id=rule.id,
            )

        rule.is_active = is_active
        rule.updated_by_id = actor_user_id
        rule.save(update_fields=["is_active", "updated_by", "updated_at"])

        AuditService.record(
            instance=rule,
            event_code=AuditEventCode.BILLING_RULE_REACTIVATED if is_active else AuditEventCode.BILLING_RULE_DEACTIVATED,
            actor_user_id=actor_user_id,
            fields=("is_active",),
        )
        logger.info("billing rule %s: id=%s", "reactivated" if is_active else "deactivated", rule.id)
        return rule

    @staticmethod
    def deactivate_rule(*, business_unit_id: UUID, rule_id: UUID, actor_user_id: Optional[int] = None) -> BillingRule:
        return BillingRuleService.set_rule_active(
            business_unit_id=business_unit_id,
            rule_id=rule_id,
            is_active=False,
            actor_user_id=actor_user_id,
        )
