import uuid

import pytest
from rest_framework.exceptions import ValidationError

from erp_core.masters.lookup import require_visible, resolve_rule_references
from erp_core.masters.models import PaymentType

pytestmark = pytest.mark.django_db


def test_resolves_all_references(business_unit, hospital, doctor, payment_type, surgical_category, procedure):
    refs = resolve_rule_references(
        business_unit_id=business_unit.id,
        hospital_id=hospital.id,
        doctor_id=doctor.id,
        payment_type_id=payment_type.id,
        surgical_category_id=surgical_category.id,
        procedure_id=procedure.id,
    )

    assert refs.hospital == hospital
    assert refs.doctor == doctor
    assert refs.procedure == procedure


def test_wildcards_stay_empty(business_unit, hospital):
    refs = resolve_rule_references(business_unit_id=business_unit.id, hospital_id=hospital.id)

    assert refs.payment_type is None
    assert refs.surgical_category is None
    assert refs.procedure is None


def test_every_bad_reference_is_reported(business_unit, foreign_hospital, payment_type):
    payment_type.is_active = False
    payment_type.save()

    with pytest.raises(ValidationError) as exc:
        resolve_rule_references(
            business_unit_id=business_unit.id,
            hospital_id=foreign_hospital.id,
            payment_type_id=payment_type.id,
            procedure_id=uuid.uuid4(),
        )

    assert set(exc.value.detail) == {"hospital", "payment_type", "procedure"}


def test_masters_owned_by_another_unit_are_invisible(business_unit, other_business_unit):
    theirs = PaymentType.objects.create(business_unit_id=other_business_unit.id, code="CORP", description="Corporate")

    with pytest.raises(ValidationError) as exc:
        require_visible(PaymentType, business_unit_id=business_unit.id, pk=theirs.id, field="payment_type")
    assert str(exc.value.detail["payment_type"]) == "Payment type not found in this business unit."
