import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from erp_core.billing_rules.models import BillingRule, RuleKind
from erp_core.iam.models import BusinessUnitMembership

pytestmark = pytest.mark.django_db

User = get_user_model()

CREDIT_NOTES = "/api/v1/credit-notes/"
ASSIGNMENTS = "/api/v1/doctor-assignments/"


def _payload(hospital, **kw):
    data = {
        "hospital": str(hospital.id),
        "value": "10.00",
        "validity_from": "2024-01-01",
        "validity_to": "2024-06-01",
    }
    data.update(kw)
    return data


def test_create_and_list_credit_notes(api_client, headers, hospital, procedure):
    res = api_client.post(CREDIT_NOTES, _payload(hospital), format="json", **headers)
    assert res.status_code == 201, res.data
    assert res.data["priority"] == 0
    assert res.data["kind"] == RuleKind.CREDIT_NOTE

    res = api_client.post(CREDIT_NOTES, _payload(hospital, procedure=str(procedure.id)), format="json", **headers)
    assert res.status_code == 201, res.data
    assert res.data["priority"] == 100

    res = api_client.get(CREDIT_NOTES, {"hospital": str(hospital.id)}, **headers)
    assert res.status_code == 200
    assert res.data["count"] == 2
    assert [r["priority"] for r in res.data["results"]] == [100, 0]


def test_list_requires_hospital(api_client, headers):
    res = api_client.get(CREDIT_NOTES, **headers)

    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"


def test_conflict_uses_error_envelope(api_client, headers, hospital, surgical_category):
    body = _payload(hospital, surgical_category=str(surgical_category.id))
    first = api_client.post(CREDIT_NOTES, body, format="json", **headers)
    assert first.status_code == 201

    body.update(validity_from="2024-03-01", validity_to="2024-09-01")
    res = api_client.post(CREDIT_NOTES, body, format="json", **headers)

    assert res.status_code == 409
    err = res.data["error"]
    assert err["code"] == "conflict"
    assert err["details"]["conflicting_rule_id"] == first.data["id"]
    assert err["request_id"]


def test_update_with_put(api_client, headers, hospital, procedure):
    created = api_client.post(CREDIT_NOTES, _payload(hospital), format="json", **headers).data

    res = api_client.put(
        f"{CREDIT_NOTES}{created['id']}/",
        _payload(hospital, procedure=str(procedure.id), value="12.50"),
        format="json",
        **headers,
    )

    assert res.status_code == 200, res.data
    assert res.data["priority"] == 100
    assert res.data["value"] == "12.50"


def test_delete_is_soft_and_reactivate(api_client, headers, hospital):
    created = api_client.post(CREDIT_NOTES, _payload(hospital), format="json", **headers).data
    url = f"{CREDIT_NOTES}{created['id']}/"

    assert api_client.delete(url, **headers).status_code == 204
    assert BillingRule.objects.get(id=created["id"]).is_active is False

    res = api_client.post(f"{url}reactivate/", format="json", **headers)
    assert res.status_code == 200
    assert res.data["is_active"] is True


def test_resolve_endpoint(api_client, headers, hospital, procedure, other_procedure):
    api_client.post(CREDIT_NOTES, _payload(hospital), format="json", **headers)
    specific = api_client.post(CREDIT_NOTES, _payload(hospital, procedure=str(procedure.id)), format="json", **headers).data

    res = api_client.post(
        f"{CREDIT_NOTES}resolve/",
        {"hospital": str(hospital.id), "procedure": str(procedure.id), "on": "2024-03-01"},
        format="json",
        **headers,
    )
    assert res.status_code == 200
    assert res.data["found"] is True
    assert res.data["rule"]["id"] == specific["id"]
    assert res.data["candidates_considered"] == 2
    assert res.data["ambiguous"] is False

    res = api_client.post(
        f"{CREDIT_NOTES}resolve/",
        {"hospital": str(hospital.id), "procedure": str(other_procedure.id), "on": "2024-03-01"},
        format="json",
        **headers,
    )
    assert res.data["rule"]["priority"] == 0


def test_resolve_without_hospital_is_invalid_query(api_client, headers):
    res = api_client.post(f"{CREDIT_NOTES}resolve/", {"on": "2024-03-01"}, format="json", **headers)

    assert res.status_code == 400
    assert res.data["error"]["code"] == "invalid_query"


def test_resolve_not_found(api_client, headers, hospital):
    res = api_client.post(
        f"{CREDIT_NOTES}resolve/",
        {"hospital": str(hospital.id), "on": "2024-03-01"},
        format="json",
        **headers,
    )

    assert res.status_code == 200
    assert res.data["found"] is False
    assert res.data["rule"] is None


def test_doctor_assignment_flow(api_client, headers, hospital, doctor):
    res = api_client.post(
        ASSIGNMENTS,
        _payload(hospital, doctor=str(doctor.id), charge_type="FIXED", value="2500.00"),
        format="json",
        **headers,
    )
    assert res.status_code == 201, res.data
    assert res.data["doctor"] == doctor.id

    missing_doctor = api_client.post(
        f"{ASSIGNMENTS}resolve/",
        {"hospital": str(hospital.id), "on": "2024-03-01"},
        format="json",
        **headers,
    )
    assert missing_doctor.status_code == 400
    assert missing_doctor.data["error"]["code"] == "invalid_query"

    res = api_client.post(
        f"{ASSIGNMENTS}resolve/",
        {"hospital": str(hospital.id), "doctor": str(doctor.id), "on": "2024-03-01"},
        format="json",
        **headers,
    )
    assert res.data["found"] is True
    assert res.data["rule"]["charge_type"] == "FIXED"


def test_credit_note_list_does_not_show_assignments(api_client, headers, hospital, doctor, make_rule):
    make_rule(kind=RuleKind.DOCTOR_ASSIGNMENT, doctor=doctor)

    res = api_client.get(CREDIT_NOTES, {"hospital": str(hospital.id)}, **headers)
    assert res.data["count"] == 0


def test_readonly_user_can_resolve_but_not_write(client_for, readonly_user, headers, hospital):
    c = client_for(readonly_user)

    assert c.post(CREDIT_NOTES, _payload(hospital), format="json", **headers).status_code == 403
    res = c.post(f"{CREDIT_NOTES}resolve/", {"hospital": str(hospital.id)}, format="json", **headers)
    assert res.status_code == 200


def test_billing_user_can_write(client_for, billing_user, headers, hospital):
    c = client_for(billing_user)

    assert c.post(CREDIT_NOTES, _payload(hospital), format="json", **headers).status_code == 201


def test_other_business_unit_cannot_see_rules(client_for, other_business_unit, hospital, make_rule):
    make_rule()
    outsider = User.objects.create_user(username="outsider", password="testpass")
    outsider.groups.add(Group.objects.get_or_create(name="ADMIN")[0])
    BusinessUnitMembership.objects.create(user=outsider, business_unit=other_business_unit, role="ADMIN")

    res = client_for(outsider).get(
        CREDIT_NOTES,
        {"hospital": str(hospital.id)},
        HTTP_X_BUSINESS_UNIT_ID=str(other_business_unit.id),
    )
    assert res.status_code == 200
    assert res.data["count"] == 0


def test_missing_scope_header_is_denied(api_client, hospital):
    res = api_client.get(CREDIT_NOTES, {"hospital": str(hospital.id)})
    assert res.status_code == 403
