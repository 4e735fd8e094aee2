# erp_core/limits/api/serializers.py
from decimal import Decimal

from rest_framework import serializers

from erp_core.limits.models import Currency, Limit


class LimitSerializer(serializers.ModelSerializer):
    payment_type_code = serializers.CharField(source="payment_type.code", read_only=True)
    surgical_category_code = serializers.CharField(source="surgical_category.code", read_only=True)

    class Meta:
        model = Limit
        fields = [
            "id",
            "business_unit_id",
            "payment_type",
            "payment_type_code",
            "surgical_category",
            "surgical_category_code",
            "amount",
            "currency",
            "description",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LimitWriteSerializer(serializers.Serializer):
    payment_type = serializers.UUIDField()
    surgical_category = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
    currency = serializers.ChoiceField(choices=Currency.choices, default=Currency.INR)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
