import pytest
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from erp_core.business_units.models import BusinessUnit
from erp_core.business_units.services import BusinessUnitService
from erp_core.common.api.exceptions import ConflictError

pytestmark = pytest.mark.django_db

URL = "/api/v1/business-units/"


@pytest.fixture
def staff_client(django_user_model):
    staff = django_user_model.objects.create_user(username="staff", password="x", is_staff=True)
    c = APIClient()
    c.force_authenticate(user=staff)
    return c


def test_create_requires_code_and_name():
    with pytest.raises(ValidationError):
        BusinessUnitService.create(name="  ", code="west")
    with pytest.raises(ValidationError):
        BusinessUnitService.create(name="West", code="")


def test_duplicate_code_is_a_conflict(business_unit):
    with pytest.raises(ConflictError):
        BusinessUnitService.create(name="Another", code=business_unit.code)


def test_set_active_is_idempotent(business_unit):
    bu = BusinessUnitService.set_active(business_unit_id=business_unit.id, is_active=False)
    assert bu.is_active is False

    bu = BusinessUnitService.set_active(business_unit_id=business_unit.id, is_active=False)
    assert bu.is_active is False


def test_staff_can_manage_without_scope_header(staff_client):
    res = staff_client.post(URL, {"name": "West Region", "code": "west"}, format="json")
    assert res.status_code == 201, res.data

    bu_id = res.data["id"]
    res = staff_client.get(URL)
    assert [row["code"] for row in res.data] == ["west"]

    res = staff_client.post(f"{URL}{bu_id}/set-active/", {"is_active": False}, format="json")
    assert res.status_code == 200
    assert BusinessUnit.objects.get(id=bu_id).is_active is False


def test_non_staff_is_forbidden(api_client):
    assert api_client.get(URL).status_code == 403


def test_unknown_or_malformed_id_is_not_found(staff_client):
    assert staff_client.get(f"{URL}not-a-uuid/").status_code == 404

    missing = "00000000-0000-0000-0000-000000000000"
    res = staff_client.post(f"{URL}{missing}/set-active/", {"is_active": False}, format="json")
    assert res.status_code == 404
    assert res.data["error"]["code"] == "not_found"
