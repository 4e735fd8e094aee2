# erp_core/billing_rules/engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from erp_core.billing_rules.matching import RuleQuery, rule_matches
from erp_core.billing_rules.models import BillingRule
from erp_core.billing_rules.scoring import score_of
from erp_core.billing_rules.selectors import candidate_rules
from erp_core.billing_rules.validity import is_valid_on

logger = logging.getLogger(__name__)

RuleSource = Callable[[RuleQuery, Optional[date]], Iterable[BillingRule]]


@dataclass(frozen=True)
class Resolution:
    rule: Optional[BillingRule]
    evaluated_on: date
    candidates_considered: int = 0
    tied_rule_ids: Tuple[UUID, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return self.rule is not None

    @property
    def is_ambiguous(self) -> bool:
        return len(self.tied_rule_ids) > 1


def _warn_on_tie() -> bool:
    return bool(getattr(settings, "BILLING_RULES", {}).get("WARN_ON_TIE", True))


def _recency_key(rule: BillingRule):
    return (rule.updated_at, rule.created_at, str(rule.id))


class RuleEngine:
    """
    Picks the single most specific billing rule for a query.

    Usage:
        RuleEngine.resolve(RuleQuery(...))                # today
        RuleEngine.resolve(query, on=date(2024, 3, 1))    # historical
    """

    @staticmethod
    def resolve(query: RuleQuery, on: Optional[date] = None, source: Optional[RuleSource] = None) -> Resolution:
        query.validate()
        on = on or timezone.localdate()
        source = source or candidate_rules

        # the source may pre-filter; matching and dates are re-checked here
        survivors = [
            r for r in source(query, on)
            if rule_matches(r, query) and is_valid_on(r, on)
        ]
        if not survivors:
            return Resolution(rule=None, evaluated_on=on)

        best = max(score_of(r) for r in survivors)
        top = sorted(
            (r for r in survivors if score_of(r) == best),
            key=_recency_key,
            reverse=True,
        )
        winner = top[0]
        tied = tuple(r.id for r in top) if len(top) > 1 else ()

        if tied and _warn_on_tie():
            logger.warning(
                "billing rule tie: kind=%s hospital=%s score=%s rules=%s picked=%s on=%s",
                query.kind,
                query.hospital_id,
                best,
                [str(t) for t in tied],
                winner.id,
                on.isoformat(),
            )

        return Resolution(
            rule=winner,
            evaluated_on=on,
            candidates_considered=len(survivors),
            tied_rule_ids=tied,
        )
