import pytest

from erp_core.masters.models import Hospital, PaymentType, Procedure, SurgicalCategory

pytestmark = pytest.mark.django_db


def _hospital_payload(**kw):
    data = {
        "short_name": "Apollo",
        "legal_name": "Apollo Hospitals Ltd",
        "address": "Greams Road",
        "gst_number": "33aabca1234f1z5",
        "state_code": "33",
        "payment_terms": 45,
    }
    data.update(kw)
    return data


def test_create_hospital_in_scope(api_client, headers, business_unit, surgical_category):
    res = api_client.post(
        "/api/v1/hospitals/",
        _hospital_payload(surgical_categories=[str(surgical_category.id)]),
        format="json",
        **headers,
    )

    assert res.status_code == 201, res.data
    h = Hospital.objects.get(id=res.data["id"])
    assert h.business_unit_id == business_unit.id
    assert h.gst_number == "33AABCA1234F1Z5"
    assert list(h.surgical_categories.all()) == [surgical_category]


@pytest.mark.parametrize(
    "field,value",
    [
        ("gst_number", "1234"),
        ("payment_terms", 20),
    ],
)
def test_hospital_field_validation(api_client, headers, field, value):
    res = api_client.post("/api/v1/hospitals/", _hospital_payload(**{field: value}), format="json", **headers)

    assert res.status_code == 400
    assert field in res.data["error"]["details"]


def test_hospitals_are_not_shared_between_units(api_client, headers, hospital, foreign_hospital):
    res = api_client.get("/api/v1/hospitals/", **headers)

    ids = [row["id"] for row in res.data["results"]]
    assert ids == [str(hospital.id)]
    assert api_client.get(f"/api/v1/hospitals/{foreign_hospital.id}/", **headers).status_code == 404


def test_delete_is_soft(api_client, headers, hospital):
    res = api_client.delete(f"/api/v1/hospitals/{hospital.id}/", **headers)

    assert res.status_code == 204
    hospital.refresh_from_db()
    assert hospital.is_active is False


def test_payment_type_code_is_upper_cased(api_client, headers):
    res = api_client.post(
        "/api/v1/payment-types/",
        {"code": "upi", "description": "UPI", "has_soft_limit": True, "soft_limit_amount": "5000.00"},
        format="json",
        **headers,
    )

    assert res.status_code == 201, res.data
    assert PaymentType.objects.get(id=res.data["id"]).code == "UPI"


def test_payment_type_code_is_unique_case_insensitively(api_client, headers, payment_type):
    res = api_client.post(
        "/api/v1/payment-types/",
        {"code": payment_type.code.lower(), "description": "Dup"},
        format="json",
        **headers,
    )
    assert res.status_code == 400
    assert "code" in res.data["error"]["details"]


def test_procedure_code_format(api_client, headers, payment_type):
    bad = api_client.post(
        "/api/v1/procedures/",
        {"code": "X12", "name": "Bad", "payment_type": str(payment_type.id)},
        format="json",
        **headers,
    )
    assert bad.status_code == 400

    ok = api_client.post(
        "/api/v1/procedures/",
        {"code": "p00042", "name": "Arthroscopy", "payment_type": str(payment_type.id)},
        format="json",
        **headers,
    )
    assert ok.status_code == 201, ok.data
    assert Procedure.objects.get(id=ok.data["id"]).code == "P00042"


def test_shared_masters_are_listed_but_read_only(api_client, headers, surgical_category):
    res = api_client.get("/api/v1/surgical-categories/", **headers)
    assert [row["code"] for row in res.data["results"]] == [surgical_category.code]

    res = api_client.put(
        f"/api/v1/surgical-categories/{surgical_category.id}/",
        {"code": "ORTHO", "description": "Changed"},
        format="json",
        **headers,
    )
    assert res.status_code == 403
    assert SurgicalCategory.objects.get(id=surgical_category.id).description == "Orthopaedics"


def test_foreign_category_cannot_be_linked(api_client, headers, other_business_unit):
    foreign = SurgicalCategory.objects.create(
        business_unit_id=other_business_unit.id, code="NEURO", description="Neurology"
    )

    res = api_client.post(
        "/api/v1/hospitals/",
        _hospital_payload(surgical_categories=[str(foreign.id)]),
        format="json",
        **headers,
    )
    assert res.status_code == 400


def test_readonly_cannot_write_masters(client_for, readonly_user, headers):
    c = client_for(readonly_user)

    assert c.get("/api/v1/doctors/", **headers).status_code == 200
    assert c.post("/api/v1/doctors/", {"name": "Dr. X"}, format="json", **headers).status_code == 403


def test_rule_options(api_client, headers, hospital, payment_type, other_payment_type, procedure, other_category):
    other = Procedure.objects.create(code="P00099", name="Bypass", payment_type=other_payment_type)
    other.surgical_categories.add(other_category)

    res = api_client.get(f"/api/v1/hospitals/{hospital.id}/rule-options/", **headers)
    assert res.status_code == 200
    assert {row["code"] for row in res.data["payment_types"]} == {"CASH", "INS"}
    assert [row["code"] for row in res.data["surgical_categories"]] == ["ORTHO"]
    # only procedures in the hospital's categories
    assert [row["code"] for row in res.data["procedures"]] == ["P00001"]

    res = api_client.get(
        f"/api/v1/hospitals/{hospital.id}/rule-options/",
        {"payment_type": str(other_payment_type.id)},
        **headers,
    )
    assert res.data["procedures"] == []
