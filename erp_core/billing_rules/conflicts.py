# erp_core/billing_rules/conflicts.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple
from uuid import UUID

from erp_core.billing_rules.validity import windows_overlap

Signature = Tuple[Optional[UUID], Optional[UUID], Optional[UUID]]


def rule_signature(
    *,
    payment_type_id: Optional[UUID],
    surgical_category_id: Optional[UUID],
    procedure_id: Optional[UUID],
) -> Signature:
    """Which dimensions are pinned, and to what. NULL stays NULL (wildcard)."""
    return (payment_type_id, surgical_category_id, procedure_id)


@dataclass(frozen=True)
class RuleCandidate:
    """A rule about to be written, before it has a row."""
    signature: Signature
    validity_from: date
    validity_to: date
    rule_id: Optional[UUID] = None


def signature_of(rule) -> Signature:
    return rule_signature(
        payment_type_id=rule.payment_type_id,
        surgical_category_id=rule.surgical_category_id,
        procedure_id=rule.procedure_id,
    )


def find_conflict(candidate: RuleCandidate, existing: Iterable):
    """
    First existing rule with the same signature whose window overlaps the
    candidate's. The candidate's own row is skipped.
    """
    for rule in existing:
        if candidate.rule_id is not None and rule.id == candidate.rule_id:
            continue
        if signature_of(rule) != candidate.signature:
            continue
        if windows_overlap(candidate.validity_from, candidate.validity_to, rule.validity_from, rule.validity_to):
            return rule
    return None
