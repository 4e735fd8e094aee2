# erp_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class ERPAutoSchema(AutoSchema):
    """
    Adds the X-Business-Unit-Id scope header to every scoped endpoint.
    Auth, /me and business-unit administration are documented without it.
    """

    SCOPE_HEADERS = [
        OpenApiParameter(
            name="X-Business-Unit-Id",
            type=OpenApiTypes.UUID,
            location=OpenApiParameter.HEADER,
            required=True,
            description="Business unit scope UUID (required for scoped endpoints).",
        ),
    ]

    UNSCOPED_MODULE_PREFIXES = (
        "erp_core.iam.api.",
        "erp_core.business_units.api.",
    )

    def _is_unscoped_endpoint(self) -> bool:
        view = getattr(self, "view", None)
        if view is None:
            return False

        if view.__class__.__name__ in {"SpectacularAPIView", "SpectacularSwaggerView"}:
            return True

        module = view.__class__.__module__ or ""
        return module.startswith(self.UNSCOPED_MODULE_PREFIXES)

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])

        if not self._is_unscoped_endpoint():
            existing = {p.name.lower() for p in params}
            for p in self.SCOPE_HEADERS:
                if p.name.lower() not in existing:
                    params.append(p)

        return params
