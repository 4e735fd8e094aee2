# erp_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication

from erp_core.iam.scope import apply_scope_from_headers


def access_cookie_name() -> str:
    return settings.SIMPLE_JWT.get("AUTH_COOKIE", "erp_access")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Billing staff authenticate with the access token set at login, either
    the `erp_access` cookie (browser UI) or an `Authorization: Bearer`
    header (integrations). A Bearer header wins when both are sent.

    Once the user is known the X-Business-Unit-Id header is checked against
    their memberships, so every authenticated request to a rule or master
    endpoint carries a verified business unit.
    """

    def _raw_token(self, request) -> bytes | str | None:
        header = self.get_header(request)
        if header is not None:
            return self.get_raw_token(header)
        return request.COOKIES.get(access_cookie_name()) or None

    def authenticate(self, request):
        raw_token = self._raw_token(request)
        if raw_token is None:
            return None

        token = self.get_validated_token(raw_token)
        user = self.get_user(token)
        apply_scope_from_headers(request, user=user)
        return user, token
