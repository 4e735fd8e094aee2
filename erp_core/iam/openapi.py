from drf_spectacular.extensions import OpenApiAuthenticationExtension

from erp_core.iam.auth import access_cookie_name


class ErpJWTScheme(OpenApiAuthenticationExtension):
    """Documents the login token; the business-unit header is added per operation by ERPAutoSchema."""

    target_class = "erp_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "ErpJWT"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token from POST /api/v1/auth/login/. Sent as a Bearer header, "
                f"or automatically by browsers in the `{access_cookie_name()}` cookie."
            ),
        }
