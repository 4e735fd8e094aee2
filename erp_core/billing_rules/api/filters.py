# erp_core/billing_rules/api/filters.py
import django_filters

from erp_core.billing_rules.models import BillingRule


class BillingRuleFilter(django_filters.FilterSet):
    hospital = django_filters.UUIDFilter(field_name="hospital_id")
    doctor = django_filters.UUIDFilter(field_name="doctor_id")
    payment_type = django_filters.UUIDFilter(field_name="payment_type_id")
    surgical_category = django_filters.UUIDFilter(field_name="surgical_category_id")
    procedure = django_filters.UUIDFilter(field_name="procedure_id")
    valid_on = django_filters.DateFilter(method="filter_valid_on")

    class Meta:
        model = BillingRule
        fields = ["hospital", "doctor", "payment_type", "surgical_category", "procedure", "is_active"]

    def filter_valid_on(self, queryset, name, value):
        return queryset.filter(validity_from__lte=value, validity_to__gt=value)
