import uuid
from datetime import date
from types import SimpleNamespace

from erp_core.billing_rules.conflicts import RuleCandidate, find_conflict, rule_signature

CATEGORY = uuid.uuid4()


def _existing(start, end, **dims):
    data = {"id": uuid.uuid4(), "payment_type_id": None, "surgical_category_id": None, "procedure_id": None}
    data.update(dims)
    return SimpleNamespace(validity_from=start, validity_to=end, **data)


def _candidate(start, end, rule_id=None, category=CATEGORY):
    sig = rule_signature(payment_type_id=None, surgical_category_id=category, procedure_id=None)
    return RuleCandidate(signature=sig, validity_from=start, validity_to=end, rule_id=rule_id)


def test_overlap_with_same_signature_is_reported():
    r1 = _existing(date(2024, 1, 1), date(2024, 6, 1), surgical_category_id=CATEGORY)

    assert find_conflict(_candidate(date(2024, 3, 1), date(2024, 9, 1)), [r1]) is r1


def test_adjacent_window_is_not_a_conflict():
    r1 = _existing(date(2024, 1, 1), date(2024, 6, 1), surgical_category_id=CATEGORY)

    assert find_conflict(_candidate(date(2024, 6, 1), date(2024, 9, 1)), [r1]) is None


def test_wildcard_and_pinned_signatures_differ():
    wildcard = _existing(date(2024, 1, 1), date(2024, 6, 1))

    assert find_conflict(_candidate(date(2024, 1, 1), date(2024, 6, 1)), [wildcard]) is None


def test_rule_does_not_conflict_with_itself():
    r1 = _existing(date(2024, 1, 1), date(2024, 6, 1), surgical_category_id=CATEGORY)

    assert find_conflict(_candidate(date(2024, 2, 1), date(2024, 7, 1), rule_id=r1.id), [r1]) is None
