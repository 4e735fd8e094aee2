from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "erp_core.iam"
    label = "iam"

    def ready(self):
        # registers the JWT scheme with drf-spectacular
        from erp_core.iam import openapi  # noqa: F401
