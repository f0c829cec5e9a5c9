"""
Accounts app serializers.

Contains all Request and Response serializers for the officer account
API.  Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain rules
are delegated to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

Officer = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class LoginRequestSerializer(serializers.Serializer):
    """
    Accepts officer login credentials: ``mobile`` + ``password``.
    """

    mobile = serializers.CharField(
        max_length=32,
        help_text="Registered mobile number of the officer.",
    )
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        style={"input_type": "password"},
        help_text="Officer account password.",
    )


# ═══════════════════════════════════════════════════════════════════
#  Officer Read Serializers
# ═══════════════════════════════════════════════════════════════════


class OfficerSummarySerializer(serializers.ModelSerializer):
    """
    Minimal officer representation embedded in grievance payloads
    (the "handled by" badge).
    """

    class Meta:
        model = Officer
        fields = ["id", "name", "designation", "department"]
        read_only_fields = fields


class OfficerProfileSerializer(serializers.ModelSerializer):
    """
    Full profile of an officer, returned by login and the "Me" endpoint.
    """

    profile_photo = serializers.ImageField(read_only=True, use_url=True)

    class Meta:
        model = Officer
        fields = [
            "id",
            "name",
            "mobile",
            "email",
            "designation",
            "department",
            "profile_photo",
            "last_login",
            "date_joined",
        ]
        read_only_fields = fields


class TokenResponseSerializer(serializers.Serializer):
    """Response schema for a successful login."""

    access = serializers.CharField(help_text="Bearer credential for the Authorization header.")
    refresh = serializers.CharField(help_text="Token used to obtain a new access token.")
    officer = OfficerProfileSerializer()


# ═══════════════════════════════════════════════════════════════════
#  Officer Write Serializers
# ═══════════════════════════════════════════════════════════════════


class OfficerProfileUpdateSerializer(serializers.Serializer):
    """
    Partial profile update for the authenticated officer.

    Every field is optional; only supplied fields are changed.  Accepts
    JSON or ``multipart/form-data`` (needed for ``profile_photo``).
    """

    name = serializers.CharField(required=False, max_length=150, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(
        required=False,
        write_only=True,
        trim_whitespace=False,
        style={"input_type": "password"},
    )
    profile_photo = serializers.ImageField(required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        # mobile, designation, department etc. are set by provisioning
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(
                {key: "This field cannot be changed here." for key in unknown}
            )
        if not attrs:
            raise serializers.ValidationError(
                "Provide at least one of: name, email, password, profile_photo."
            )
        return attrs
