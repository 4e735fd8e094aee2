# erp_core/billing_rules/validity.py
from __future__ import annotations

from datetime import date


def is_valid_on(rule, on: date) -> bool:
    """validity_from is inclusive, validity_to is exclusive."""
    return rule.validity_from <= on < rule.validity_to


def windows_overlap(a_from: date, a_to: date, b_from: date, b_to: date) -> bool:
    """Half-open windows; [Jan, Jun) and [Jun, Sep) touch but do not overlap."""
    return a_from < b_to and b_from < a_to
