"""
Core app services — **Service Layer**.

Cross-app aggregation for the officer dashboard.  Views delegate to the
service classes defined here, keeping views thin.

Models from other apps are never imported at module level; they are
resolved lazily with ``apps.get_model`` inside the method that needs
them, so ``core`` stays importable regardless of app registration order.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from django.apps import apps
from django.db.models import Count, Q

if TYPE_CHECKING:
    from accounts.models import Officer


# ════════════════════════════════════════════════════════════════════
#  Dashboard Aggregation Service
# ════════════════════════════════════════════════════════════════════

class DashboardAggregationService:
    """
    Produces the statistics dict consumed by ``DashboardStatsSerializer``.

    * ``total`` and ``pending_available`` describe the whole queue.
    * ``in_progress``, ``resolved`` and ``rejected`` count only the
      grievances handled by the requesting officer.

    All five counters come from one ``aggregate()`` statement, so they
    describe the same snapshot of the store.  Nothing is cached.
    """

    def __init__(self, officer: Officer) -> None:
        self.officer = officer

    # ── Public API ──────────────────────────────────────────────────

    def get_stats(self) -> dict[str, int]:
        """Return the dashboard counters for ``self.officer``."""
        from grievances.models import GrievanceStatus

        Grievance = apps.get_model("grievances", "Grievance")
        mine = Q(handled_by=self.officer)

        aggregates: dict[str, Any] = Grievance.objects.aggregate(
            total=Count("id"),
            pending_available=Count(
                "id",
                filter=Q(status=GrievanceStatus.PENDING, handled_by__isnull=True),
            ),
            in_progress=Count(
                "id",
                filter=mine & Q(status=GrievanceStatus.IN_PROGRESS),
            ),
            resolved=Count(
                "id",
                filter=mine & Q(status=GrievanceStatus.RESOLVED),
            ),
            rejected=Count(
                "id",
                filter=mine & Q(status=GrievanceStatus.REJECTED),
            ),
        )
        return {key: value or 0 for key, value in aggregates.items()}
