import pytest

from erp_core.audit.models import AuditEvent, AuditEventCode
from erp_core.audit.services import AuditService, snapshot

pytestmark = pytest.mark.django_db

URL = "/api/v1/audit/events/"


def test_record_snapshots_rule_fields(make_rule, business_unit, hospital, user):
    rule = make_rule(value="12.50")

    ev = AuditService.record(
        instance=rule,
        event_code=AuditEventCode.BILLING_RULE_CREATED,
        actor_user_id=user.id,
        fields=("hospital", "value", "validity_from", "priority"),
        extra={"source": "import"},
    )

    ev.refresh_from_db()
    assert ev.entity_type == "BillingRule"
    assert ev.entity_id == rule.id
    assert ev.business_unit_id == business_unit.id
    assert ev.actor_user_id == user.id
    assert ev.metadata == {
        "hospital_id": str(hospital.id),
        "value": "12.50",
        "validity_from": "2024-01-01",
        "priority": 0,
        "source": "import",
    }


def test_snapshot_skips_unlisted_fields(make_rule):
    rule = make_rule()
    assert set(snapshot(rule, ("kind", "doctor"))) == {"kind", "doctor_id"}


def test_list_is_scoped_and_filterable(api_client, headers, make_rule, other_business_unit):
    mine = make_rule()
    for code in (AuditEventCode.BILLING_RULE_CREATED, AuditEventCode.BILLING_RULE_UPDATED):
        AuditService.record(instance=mine, event_code=code, actor_user_id=None)
    theirs = make_rule(business_unit_id=other_business_unit.id)
    AuditService.record(instance=theirs, event_code=AuditEventCode.BILLING_RULE_CREATED, actor_user_id=None)

    res = api_client.get(URL, **headers)
    assert res.status_code == 200
    assert res.data["count"] == 2

    res = api_client.get(URL, {"event_code": "billing_rule.updated"}, **headers)
    assert res.data["count"] == 1
    assert res.data["results"][0]["entity_id"] == str(mine.id)
    assert AuditEvent.objects.count() == 3


def test_invalid_entity_id_is_rejected(api_client, headers):
    res = api_client.get(URL, {"entity_id": "nope"}, **headers)

    assert res.status_code == 400
    assert res.data["error"]["details"] == {"entity_id": "Invalid UUID"}


def test_billing_users_cannot_read_audit(client_for, billing_user, headers):
    assert client_for(billing_user).get(URL, **headers).status_code == 403
