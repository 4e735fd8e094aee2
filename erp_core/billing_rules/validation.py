# erp_core/billing_rules/validation.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from rest_framework.exceptions import ValidationError

from erp_core.billing_rules.models import ChargeType, RuleKind
from erp_core.common.decimals import MONEY_CEILING, MONEY_CEILING_MSG, to_decimal

PERCENT_MIN = Decimal("0")
PERCENT_MAX = Decimal("100")
DESCRIPTION_MAX_LENGTH = 200


def validate_rule_fields(
    *,
    kind: str,
    charge_type: str,
    value,
    validity_from: Optional[date],
    validity_to: Optional[date],
    doctor_id: Optional[UUID] = None,
    description: str = "",
) -> Decimal:
    """
    Field-level checks shared by both rule kinds. Every offending field is
    reported at once. Returns the normalised value.
    """
    errors: Dict[str, List[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    if kind not in RuleKind.values:
        add("kind", f"Unknown rule kind {kind!r}.")

    if charge_type not in ChargeType.values:
        add("charge_type", f"Unknown charge type {charge_type!r}.")
    elif kind == RuleKind.CREDIT_NOTE and charge_type != ChargeType.PERCENTAGE:
        add("charge_type", "Credit notes are always a percentage.")

    if kind == RuleKind.DOCTOR_ASSIGNMENT and doctor_id is None:
        add("doctor", "A doctor is required for doctor assignments.")
    if kind == RuleKind.CREDIT_NOTE and doctor_id is not None:
        add("doctor", "Credit notes cannot name a doctor.")

    amount: Optional[Decimal] = None
    try:
        amount = to_decimal(value, "value")
    except ValidationError:
        add("value", "Invalid decimal value.")

    if amount is not None:
        if amount.as_tuple().exponent < -2:
            add("value", "Ensure that there are no more than 2 decimal places.")
        if charge_type == ChargeType.PERCENTAGE and not (PERCENT_MIN <= amount <= PERCENT_MAX):
            add("value", "Percentage must be between 0 and 100.")
        elif charge_type == ChargeType.FIXED and amount < Decimal("0"):
            add("value", "Must be >= 0")
        if abs(amount) >= MONEY_CEILING:
            add("value", MONEY_CEILING_MSG)

    if validity_from is None:
        add("validity_from", "This field is required.")
    if validity_to is None:
        add("validity_to", "This field is required.")
    if validity_from is not None and validity_to is not None and validity_to <= validity_from:
        add("validity_to", "Validity end must be after validity start.")

    if len(description or "") > DESCRIPTION_MAX_LENGTH:
        add("description", f"Ensure this field has no more than {DESCRIPTION_MAX_LENGTH} characters.")

    if errors:
        raise ValidationError(errors)

    return amount.quantize(Decimal("0.01"))
