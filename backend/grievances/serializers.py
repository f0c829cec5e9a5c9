"""
Grievances app serializers.

Request and Response serializers for the officer grievance API.
**No business logic** lives here; workflow rules are enforced in
``services.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import OfficerSummarySerializer

from .models import Grievance, GrievanceStatus, GrievanceStatusLog, Student
from .services import RESOLUTION_STATUSES


# ═══════════════════════════════════════════════════════════════════
#  Query Param Serializer
# ═══════════════════════════════════════════════════════════════════


class GrievanceFilterSerializer(serializers.Serializer):
    """
    Validates query parameters for the grievance list endpoint.

    An unknown ``status`` value is a 400, never an empty list.
    """

    status = serializers.ChoiceField(
        choices=GrievanceStatus.choices,
        required=False,
    )


# ═══════════════════════════════════════════════════════════════════
#  Response Serializers
# ═══════════════════════════════════════════════════════════════════


class StudentSummarySerializer(serializers.ModelSerializer):
    """The student details an officer sees next to a grievance."""

    class Meta:
        model = Student
        fields = [
            "id",
            "student_ref",
            "name",
            "enrollment_number",
            "mobile",
            "branch",
            "year",
            "college",
        ]
        read_only_fields = fields


class GrievanceSerializer(serializers.ModelSerializer):
    """
    Full representation of a grievance, used by list, retrieve, claim
    and resolve responses.
    """

    student = StudentSummarySerializer(read_only=True)
    handled_by = OfficerSummarySerializer(read_only=True, allow_null=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Grievance
        fields = [
            "id",
            "student",
            "subject",
            "description",
            "attachment",
            "status",
            "handled_by",
            "remarks",
            "deadline",
            "is_overdue",
            "claimed_at",
            "resolved_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GrievanceStatusLogSerializer(serializers.ModelSerializer):
    """Read-only serializer for the grievance status audit trail."""

    changed_by = OfficerSummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = GrievanceStatusLog
        fields = [
            "id",
            "from_status",
            "to_status",
            "changed_by",
            "message",
            "created_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Workflow Request Serializers
# ═══════════════════════════════════════════════════════════════════


class ResolveGrievanceSerializer(serializers.Serializer):
    """
    Request body for ``resolve``.

    ``remarks`` may arrive blank here; the service rejects blank remarks
    with a ``validation_error`` naming the field.
    """

    remarks = serializers.CharField(
        allow_blank=True,
        trim_whitespace=True,
        help_text="Resolution remarks shown to the student. Required.",
    )
    status = serializers.ChoiceField(
        choices=[(value, value) for value in RESOLUTION_STATUSES],
        help_text="Final status: 'Resolved' or 'Rejected'.",
    )
