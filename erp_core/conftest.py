# erp_core/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from erp_core.billing_rules.models import BillingRule, ChargeType, RuleKind
from erp_core.business_units.models import BusinessUnit
from erp_core.masters.models import Doctor, Hospital, PaymentType, Procedure, SurgicalCategory


def scope_headers(business_unit):
    """
    Scope header used by the scope resolver.
    DRF test client requires HTTP_ prefix.
    """
    return {"HTTP_X_BUSINESS_UNIT_ID": str(business_unit.id)}


def _member(username, business_unit, role):
    from erp_core.iam.models import BusinessUnitMembership

    User = get_user_model()
    user = User.objects.create_user(username=username, password="testpass", is_active=True)

    group, _ = Group.objects.get_or_create(name=role)
    user.groups.add(group)

    BusinessUnitMembership.objects.create(user=user, business_unit=business_unit, role=role, is_active=True)
    return user


@pytest.fixture
def business_unit(db):
    return BusinessUnit.objects.create(code="north", name="North Region")


@pytest.fixture
def other_business_unit(db):
    return BusinessUnit.objects.create(code="south", name="South Region")


@pytest.fixture
def headers(business_unit):
    return scope_headers(business_unit)


@pytest.fixture
def user(db, business_unit):
    """Test user with ADMIN group + business-unit membership."""
    return _member("testuser", business_unit, "ADMIN")


@pytest.fixture
def billing_user(db, business_unit):
    return _member("billing", business_unit, "BILLING")


@pytest.fixture
def readonly_user(db, business_unit):
    return _member("viewer", business_unit, "READONLY")


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def client_for():
    def _client(u):
        c = APIClient()
        c.force_authenticate(user=u)
        return c

    return _client


@pytest.fixture
def surgical_category(db):
    return SurgicalCategory.objects.create(code="ORTHO", description="Orthopaedics")


@pytest.fixture
def other_category(db):
    return SurgicalCategory.objects.create(code="CARDIO", description="Cardiology")


@pytest.fixture
def payment_type(db):
    return PaymentType.objects.create(code="CASH", description="Cash")


@pytest.fixture
def other_payment_type(db):
    return PaymentType.objects.create(code="INS", description="Insurance")


@pytest.fixture
def hospital(db, business_unit, surgical_category):
    h = Hospital.objects.create(
        business_unit_id=business_unit.id,
        short_name="City",
        legal_name="City Hospital Pvt Ltd",
        address="1 Main Road",
        gst_number="29ABCDE1234F1Z5",
        state_code="29",
        payment_terms=30,
    )
    h.surgical_categories.add(surgical_category)
    return h


@pytest.fixture
def foreign_hospital(db, other_business_unit):
    return Hospital.objects.create(
        business_unit_id=other_business_unit.id,
        short_name="Coast",
        legal_name="Coast Hospital Ltd",
        address="2 Beach Road",
        gst_number="33ABCDE1234F1Z5",
        state_code="33",
        payment_terms=45,
    )


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(name="Dr. Rao", phone_number="+91 98765 43210", email="rao@example.com")


@pytest.fixture
def other_doctor(db):
    return Doctor.objects.create(name="Dr. Iyer")


@pytest.fixture
def procedure(db, payment_type, surgical_category):
    p = Procedure.objects.create(code="P00001", name="Knee replacement", payment_type=payment_type)
    p.surgical_categories.add(surgical_category)
    return p


@pytest.fixture
def other_procedure(db, payment_type, surgical_category):
    p = Procedure.objects.create(code="P00002", name="Hip replacement", payment_type=payment_type)
    p.surgical_categories.add(surgical_category)
    return p


@pytest.fixture
def make_rule(business_unit, hospital):
    """
    Writes a rule straight through the ORM (no overlap check), for
    seeding states the service would refuse.
    """
    def _make(**overrides):
        data = {
            "business_unit_id": business_unit.id,
            "kind": RuleKind.CREDIT_NOTE,
            "hospital": hospital,
            "charge_type": ChargeType.PERCENTAGE,
            "value": Decimal("5.00"),
            "validity_from": date(2024, 1, 1),
            "validity_to": date(2025, 1, 1),
        }
        data.update(overrides)
        return BillingRule.objects.create(**data)

    return _make
