"""
Core app serializers.

**Response-only** serializers for the aggregated endpoints served by the
core app.  They work exclusively with plain dicts produced by the
service layer and never import models from other apps.
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  Dashboard Statistics
# ════════════════════════════════════════════════════════════════════

class DashboardStatsSerializer(serializers.Serializer):
    """
    Dashboard counters for the requesting officer.

    Example::

        {
            "total": 42,
            "pending_available": 10,
            "in_progress": 3,
            "resolved": 12,
            "rejected": 1
        }
    """

    total = serializers.IntegerField(
        help_text="Number of grievances in the system.",
    )
    pending_available = serializers.IntegerField(
        help_text="Pending grievances nobody has claimed yet.",
    )
    in_progress = serializers.IntegerField(
        help_text="In Progress grievances handled by you.",
    )
    resolved = serializers.IntegerField(
        help_text="Resolved grievances handled by you.",
    )
    rejected = serializers.IntegerField(
        help_text="Rejected grievances handled by you.",
    )
