from django.apps import AppConfig


class CommonConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "erp_core.common"
    label = "common"

    def ready(self) -> None:
        # registers the OpenAPI auth extension
        from erp_core.iam import openapi  # noqa: F401
