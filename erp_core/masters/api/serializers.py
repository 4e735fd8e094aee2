# erp_core/masters/api/serializers.py
from __future__ import annotations

from django.db import transaction
from rest_framework import serializers

from erp_core.masters.models import (
    Doctor,
    Hospital,
    ImplantSubcategory,
    ImplantType,
    PaymentType,
    Procedure,
    SurgicalCategory,
)
from erp_core.masters.selectors import visible_to


class UpperCaseFieldsMixin:
    """Codes are stored upper-cased; normalise before field validators run."""
    upper_case_fields = ("code",)

    def to_internal_value(self, data):
        data = data.copy()
        for field in self.upper_case_fields:
            value = data.get(field)
            if isinstance(value, str):
                data[field] = value.strip().upper()
        return super().to_internal_value(data)


class ScopedMasterSerializer(serializers.ModelSerializer):
    """
    Related masters must be visible from the request's business unit
    (owned by it or shared).
    """

    def _check_visible(self, field: str, objs) -> None:
        bu = self.context.get("business_unit_id")
        if bu is None:
            return
        for obj in objs:
            if obj.business_unit_id not in (None, bu):
                raise serializers.ValidationError({field: "Not available in this business unit."})

    def validate(self, attrs):
        attrs = super().validate(attrs)
        for field, value in attrs.items():
            if field == "surgical_categories":
                self._check_visible(field, value)
            elif isinstance(value, (Doctor, PaymentType, SurgicalCategory)):
                self._check_visible(field, [value])
        return attrs


class SurgicalCategorySerializer(UpperCaseFieldsMixin, serializers.ModelSerializer):
    class Meta:
        model = SurgicalCategory
        fields = ["id", "business_unit_id", "code", "description", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]


class PaymentTypeSerializer(UpperCaseFieldsMixin, serializers.ModelSerializer):
    class Meta:
        model = PaymentType
        fields = [
            "id",
            "business_unit_id",
            "code",
            "description",
            "has_soft_limit",
            "soft_limit_amount",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]


class HospitalSerializer(UpperCaseFieldsMixin, ScopedMasterSerializer):
    upper_case_fields = ("gst_number", "state_code")

    surgical_categories = serializers.PrimaryKeyRelatedField(
        many=True,
        required=False,
        queryset=SurgicalCategory.objects.filter(is_active=True),
    )

    class Meta:
        model = Hospital
        fields = [
            "id",
            "business_unit_id",
            "short_name",
            "legal_name",
            "address",
            "gst_number",
            "state_code",
            "payment_terms",
            "default_pricing",
            "surgical_categories",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]


class DoctorSerializer(ScopedMasterSerializer):
    surgical_categories = serializers.PrimaryKeyRelatedField(
        many=True,
        required=False,
        queryset=SurgicalCategory.objects.filter(is_active=True),
    )
    consulting_doctor = serializers.PrimaryKeyRelatedField(
        required=False,
        allow_null=True,
        queryset=Doctor.objects.filter(is_active=True),
    )

    class Meta:
        model = Doctor
        fields = [
            "id",
            "business_unit_id",
            "name",
            "phone_number",
            "email",
            "surgical_categories",
            "consulting_doctor",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]


class ProcedureSerializer(UpperCaseFieldsMixin, ScopedMasterSerializer):
    payment_type = serializers.PrimaryKeyRelatedField(queryset=PaymentType.objects.filter(is_active=True))
    surgical_categories = serializers.PrimaryKeyRelatedField(
        many=True,
        required=False,
        queryset=SurgicalCategory.objects.filter(is_active=True),
    )

    class Meta:
        model = Procedure
        fields = [
            "id",
            "business_unit_id",
            "code",
            "name",
            "description",
            "payment_type",
            "surgical_categories",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]


class ImplantSubcategorySerializer(serializers.ModelSerializer):
    surgical_category = serializers.PrimaryKeyRelatedField(queryset=SurgicalCategory.objects.filter(is_active=True))

    class Meta:
        model = ImplantSubcategory
        fields = ["id", "sub_category", "length", "surgical_category"]
        read_only_fields = ["id"]

    def validate_sub_category(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Subcategory name is required.")
        return value

    def validate_length(self, value):
        if value <= 0:
            raise serializers.ValidationError("Length must be greater than 0.")
        return value


class ImplantTypeSerializer(ScopedMasterSerializer):
    """
    Subcategories are written inline. Sending `subcategories` on PUT replaces
    the whole list; leaving it out keeps the current one.
    """
    subcategories = ImplantSubcategorySerializer(many=True, required=False)

    class Meta:
        model = ImplantType
        fields = ["id", "business_unit_id", "name", "subcategories", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "business_unit_id", "is_active", "created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Implant type name is required.")

        qs = ImplantType.objects.filter(name__iexact=value, is_active=True)
        bu = self.context.get("business_unit_id")
        if bu is not None:
            qs = qs.filter(visible_to(bu))
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("An implant type with this name already exists.")
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        self._check_visible("subcategories", [s["surgical_category"] for s in attrs.get("subcategories", [])])
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        subcategories = validated_data.pop("subcategories", [])
        implant_type = ImplantType.objects.create(**validated_data)
        self._write_subcategories(implant_type, subcategories)
        return implant_type

    @transaction.atomic
    def update(self, instance, validated_data):
        subcategories = validated_data.pop("subcategories", None)
        instance = super().update(instance, validated_data)
        if subcategories is not None:
            instance.subcategories.all().delete()
            self._write_subcategories(instance, subcategories)
        return instance

    @staticmethod
    def _write_subcategories(implant_type: ImplantType, rows) -> None:
        ImplantSubcategory.objects.bulk_create(
            [ImplantSubcategory(implant_type=implant_type, **row) for row in rows]
        )


class RuleOptionsSerializer(serializers.Serializer):
    hospital = HospitalSerializer(read_only=True)
    payment_types = PaymentTypeSerializer(many=True, read_only=True)
    surgical_categories = SurgicalCategorySerializer(many=True, read_only=True)
    procedures = ProcedureSerializer(many=True, read_only=True)
