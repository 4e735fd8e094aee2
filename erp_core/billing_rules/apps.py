from django.apps import AppConfig


class BillingRulesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "erp_core.billing_rules"
    label = "billing_rules"
