# erp_core/billing_rules/matching.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from uuid import UUID

from erp_core.billing_rules.models import RuleKind
from erp_core.common.api.exceptions import InvalidQueryError

OPTIONAL_DIMENSIONS = ("payment_type", "surgical_category", "procedure")


@dataclass(frozen=True)
class RuleQuery:
    """The billing context a rule is being looked up for."""
    business_unit_id: Optional[UUID]
    hospital_id: Optional[UUID]
    kind: str
    payment_type_id: Optional[UUID] = None
    surgical_category_id: Optional[UUID] = None
    procedure_id: Optional[UUID] = None
    doctor_id: Optional[UUID] = None

    def validate(self) -> "RuleQuery":
        missing: Dict[str, str] = {}
        if self.business_unit_id is None:
            missing["business_unit"] = "This field is required."
        if self.hospital_id is None:
            missing["hospital"] = "This field is required."
        if self.kind not in RuleKind.values:
            missing["kind"] = f"Unknown rule kind {self.kind!r}."
        elif self.kind == RuleKind.DOCTOR_ASSIGNMENT and self.doctor_id is None:
            missing["doctor"] = "This field is required for doctor assignments."
        if missing:
            raise InvalidQueryError({"detail": "Invalid resolution query.", **missing})
        return self

    def dimension(self, name: str) -> Optional[UUID]:
        return getattr(self, f"{name}_id")


def rule_matches(rule, query: RuleQuery) -> bool:
    """
    Dimensional match only; validity dates are checked separately.

    A rule dimension set to a specific value never matches a query that
    leaves it out or asks for another value.
    """
    if not rule.is_active:
        return False
    if rule.business_unit_id != query.business_unit_id:
        return False
    if rule.hospital_id != query.hospital_id or rule.kind != query.kind:
        return False
    if query.kind == RuleKind.DOCTOR_ASSIGNMENT and rule.doctor_id != query.doctor_id:
        return False

    for name in OPTIONAL_DIMENSIONS:
        pinned = getattr(rule, f"{name}_id")
        if pinned is not None and pinned != query.dimension(name):
            return False
    return True
