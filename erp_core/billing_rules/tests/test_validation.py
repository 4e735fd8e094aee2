from datetime import date
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from erp_core.billing_rules.models import ChargeType, RuleKind
from erp_core.billing_rules.validation import validate_rule_fields


def _validate(**kw):
    data = {
        "kind": RuleKind.CREDIT_NOTE,
        "charge_type": ChargeType.PERCENTAGE,
        "value": "10",
        "validity_from": date(2024, 1, 1),
        "validity_to": date(2024, 2, 1),
    }
    data.update(kw)
    return validate_rule_fields(**data)


def test_value_is_normalised_to_two_places():
    assert _validate(value=10) == Decimal("10.00")
    assert _validate(value="0") == Decimal("0.00")
    assert _validate(value=Decimal("100")) == Decimal("100.00")


def test_validity_end_must_follow_start():
    with pytest.raises(ValidationError) as exc:
        _validate(validity_to=date(2023, 12, 31))
    assert "validity_to" in exc.value.detail


def test_missing_dates_are_reported():
    with pytest.raises(ValidationError) as exc:
        _validate(validity_from=None, validity_to=None)
    assert {"validity_from", "validity_to"} <= set(exc.value.detail)


def test_description_length():
    with pytest.raises(ValidationError) as exc:
        _validate(description="x" * 201)
    assert "description" in exc.value.detail


def test_fixed_fee_cannot_be_negative():
    with pytest.raises(ValidationError) as exc:
        _validate(kind=RuleKind.DOCTOR_ASSIGNMENT, doctor_id=1, charge_type=ChargeType.FIXED, value="-0.01")
    assert "value" in exc.value.detail


def test_unknown_charge_type():
    with pytest.raises(ValidationError) as exc:
        _validate(charge_type="BOGUS")
    assert "charge_type" in exc.value.detail


@pytest.mark.parametrize(
    "charge_type,kind,value",
    [
        (ChargeType.FIXED, RuleKind.DOCTOR_ASSIGNMENT, "10000000000"),
        (ChargeType.FIXED, RuleKind.DOCTOR_ASSIGNMENT, "100000000000"),
        (ChargeType.FIXED, RuleKind.DOCTOR_ASSIGNMENT, "1e30"),
    ],
)
def test_fixed_fee_must_fit_the_value_column(charge_type, kind, value):
    with pytest.raises(ValidationError) as exc:
        _validate(kind=kind, doctor_id=1, charge_type=charge_type, value=value)
    assert "value" in exc.value.detail


def test_largest_fixed_fee_that_fits_is_accepted():
    value = _validate(
        kind=RuleKind.DOCTOR_ASSIGNMENT, doctor_id=1, charge_type=ChargeType.FIXED, value="9999999999.99"
    )
    assert value == Decimal("9999999999.99")
