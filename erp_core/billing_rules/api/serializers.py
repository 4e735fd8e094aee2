# erp_core/billing_rules/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from erp_core.billing_rules.models import BillingRule, ChargeType


class BillingRuleSerializer(serializers.ModelSerializer):
    hospital_name = serializers.CharField(source="hospital.short_name", read_only=True)
    doctor_name = serializers.CharField(source="doctor.name", read_only=True, default=None)
    procedure_code = serializers.CharField(source="procedure.code", read_only=True, default=None)

    class Meta:
        model = BillingRule
        fields = [
            "id",
            "business_unit_id",
            "kind",
            "hospital",
            "hospital_name",
            "doctor",
            "doctor_name",
            "payment_type",
            "surgical_category",
            "procedure",
            "procedure_code",
            "charge_type",
            "value",
            "validity_from",
            "validity_to",
            "description",
            "priority",
            "is_active",
            "created_by",
            "updated_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CreditNoteWriteSerializer(serializers.Serializer):
    hospital = serializers.UUIDField()
    payment_type = serializers.UUIDField(required=False, allow_null=True, default=None)
    surgical_category = serializers.UUIDField(required=False, allow_null=True, default=None)
    procedure = serializers.UUIDField(required=False, allow_null=True, default=None)

    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    validity_from = serializers.DateField()
    validity_to = serializers.DateField()
    description = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


class DoctorAssignmentWriteSerializer(CreditNoteWriteSerializer):
    doctor = serializers.UUIDField()
    charge_type = serializers.ChoiceField(choices=ChargeType.choices, default=ChargeType.PERCENTAGE)


class ResolveQuerySerializer(serializers.Serializer):
    # hospital is checked by the engine so a missing one is an invalid_query
    hospital = serializers.UUIDField(required=False, allow_null=True, default=None)
    doctor = serializers.UUIDField(required=False, allow_null=True, default=None)
    payment_type = serializers.UUIDField(required=False, allow_null=True, default=None)
    surgical_category = serializers.UUIDField(required=False, allow_null=True, default=None)
    procedure = serializers.UUIDField(required=False, allow_null=True, default=None)
    on = serializers.DateField(required=False, allow_null=True, default=None)


class ResolutionSerializer(serializers.Serializer):
    found = serializers.BooleanField()
    evaluated_on = serializers.DateField()
    rule = BillingRuleSerializer(allow_null=True)
    candidates_considered = serializers.IntegerField()
    ambiguous = serializers.BooleanField(source="is_ambiguous")
    tied_rule_ids = serializers.ListField(child=serializers.UUIDField())
