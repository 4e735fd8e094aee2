# erp_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from erp_core.iam.models import BusinessUnitMembership
from erp_core.iam.services.membership import is_user_member_of_business_unit, list_user_business_units

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Do NOT use the api_client fixture here: it is already authenticated.
    """
    c = APIClient()
    res = c.get("/api/v1/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies(user, settings):
    user.set_password("Pass@12345")
    user.save(update_fields=["password"])

    c = APIClient()
    res = c.post("/api/v1/auth/login/", {"username": user.username, "password": "Pass@12345"}, format="json")
    assert res.status_code == 200

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies


def test_cookie_token_authenticates(user, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(user).access_token)

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["user"]["id"] == user.id


def test_bearer_header_takes_precedence_over_cookie(user, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = "stale-cookie"
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")

    res = c.get("/api/v1/me/")
    assert res.status_code == 200


def test_me_returns_memberships(api_client, user, business_unit):
    res = api_client.get("/api/v1/me/")
    assert res.status_code == 200

    body = res.json()
    assert body["user"]["id"] == user.id
    assert body["memberships"] == [
        {
            "business_unit_id": str(business_unit.id),
            "business_unit_code": business_unit.code,
            "business_unit_name": business_unit.name,
            "role": "ADMIN",
        }
    ]
    assert body["active_scope"] is None


def test_scope_header_blocks_non_member(user, other_business_unit):
    """
    Must NOT use force_authenticate: a real JWT runs
    CookieOrHeaderJWTAuthentication, which enforces the scope header.
    """
    client = APIClient()
    access = str(RefreshToken.for_user(user).access_token)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")

    res = client.get("/api/v1/me/", HTTP_X_BUSINESS_UNIT_ID=str(other_business_unit.id))
    assert res.status_code == 403


def test_membership_checks(user, business_unit, other_business_unit):
    assert is_user_member_of_business_unit(user=user, business_unit_id=business_unit.id) is True
    assert is_user_member_of_business_unit(user=user, business_unit_id=other_business_unit.id) is False

    BusinessUnitMembership.objects.filter(user=user).update(is_active=False)
    assert is_user_member_of_business_unit(user=user, business_unit_id=business_unit.id) is False
    assert list_user_business_units(user.id) == []


def test_superuser_is_member_everywhere(django_user_model, other_business_unit):
    admin = django_user_model.objects.create_superuser(username="root", password="x", email="root@example.com")
    assert is_user_member_of_business_unit(user=admin, business_unit_id=other_business_unit.id) is True
