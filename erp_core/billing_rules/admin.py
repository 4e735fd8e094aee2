from django.contrib import admin

from erp_core.billing_rules.models import BillingRule


@admin.register(BillingRule)
class BillingRuleAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "kind",
        "hospital",
        "doctor",
        "payment_type",
        "surgical_category",
        "procedure",
        "charge_type",
        "value",
        "validity_from",
        "validity_to",
        "priority",
        "is_active",
    )
    list_filter = ("kind", "charge_type", "is_active")
    search_fields = ("description", "hospital__short_name", "doctor__name", "procedure__code")
    readonly_fields = ("priority", "created_by", "updated_by", "created_at", "updated_at")
    raw_id_fields = ("hospital", "doctor", "payment_type", "surgical_category", "procedure")
