from __future__ import annotations

from rest_framework import serializers

from erp_core.business_units.models import BusinessUnit


class BusinessUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessUnit
        fields = [
            "id",
            "name",
            "code",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BusinessUnitCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.SlugField(max_length=64)


class BusinessUnitActiveSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
