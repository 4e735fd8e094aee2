from django.apps import AppConfig


class BusinessUnitsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "erp_core.business_units"
    label = "business_units"
