from __future__ import annotations

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False)
    is_superuser = serializers.BooleanField()


class MembershipSerializer(serializers.Serializer):
    business_unit_id = serializers.UUIDField()
    business_unit_code = serializers.CharField()
    business_unit_name = serializers.CharField()
    role = serializers.CharField()


class ActiveScopeSerializer(serializers.Serializer):
    business_unit_id = serializers.UUIDField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    memberships = MembershipSerializer(many=True)
    active_scope = ActiveScopeSerializer(allow_null=True, required=False)
