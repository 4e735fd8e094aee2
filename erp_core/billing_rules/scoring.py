# erp_core/billing_rules/scoring.py
"""
Specificity of a billing rule.

Each optional dimension a rule pins down adds its weight; a wildcard adds
nothing. Weights are ordered so that one more-specific dimension always
outranks any combination of less-specific ones.
"""
from __future__ import annotations

from typing import Optional, Tuple
from uuid import UUID

# (dimension, weight), most specific first. Doctor is a scope, never scored.
DIMENSION_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    ("procedure", 100),
    ("surgical_category", 10),
    ("payment_type", 1),
)


def specificity_score(
    *,
    procedure_id: Optional[UUID] = None,
    surgical_category_id: Optional[UUID] = None,
    payment_type_id: Optional[UUID] = None,
) -> int:
    present = {
        "procedure": procedure_id is not None,
        "surgical_category": surgical_category_id is not None,
        "payment_type": payment_type_id is not None,
    }
    return sum(weight for dimension, weight in DIMENSION_WEIGHTS if present[dimension])


def score_of(rule) -> int:
    """Score from a rule's current dimension values (ignores the stored priority)."""
    return specificity_score(
        procedure_id=rule.procedure_id,
        surgical_category_id=rule.surgical_category_id,
        payment_type_id=rule.payment_type_id,
    )


def weights_are_dominant(weights: Tuple[Tuple[str, int], ...] = DIMENSION_WEIGHTS) -> bool:
    """True when every weight is larger than the sum of all weights after it."""
    values = [w for _, w in weights]
    return all(values[i] > sum(values[i + 1:]) for i in range(len(values)))
