# clinic_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.common.api.serializers import StrictInputSerializer
from clinic_core.iam.models import User, UserRole


class SignupRequestSerializer(StrictInputSerializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6, trim_whitespace=False)
    role = serializers.ChoiceField(choices=UserRole.choices)


class LoginRequestSerializer(StrictInputSerializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "created_at"]
        read_only_fields = fields


class AuthResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    token = serializers.CharField()
    user = UserSerializer()


class LogoutResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeResponseSerializer(serializers.Serializer):
    user = UserSerializer()
