"""
Grievances app Service Layer.

This module is the **single source of truth** for all business logic
in the ``grievances`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``GrievanceQueryService``      — List / retrieve / audit-trail reads.
- ``GrievanceSubmissionService`` — Create new Pending grievances
  (provisioning, admin tooling, tests).
- ``GrievanceWorkflowService``   — The claim / resolve state machine.

Workflow State-Machine Overview
--------------------------------
::

  PENDING
    → IN_PROGRESS   (an officer claims it; first writer wins)
  IN_PROGRESS
    → RESOLVED      (the claiming officer closes it with remarks)
    → REJECTED      (the claiming officer rejects it with remarks)

``RESOLVED`` and ``REJECTED`` are terminal.  No transition skips
``IN_PROGRESS`` and ``handled_by`` is never reassigned.

Concurrency contract
--------------------
Claim is a single conditional ``UPDATE`` keyed on ``status='Pending'``;
the row count decides the winner.  Resolve locks the row, checks state
and ownership, then writes with the same guard in its ``WHERE`` clause.
Neither operation performs an unguarded read-then-write.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from core.constants import GRIEVANCE_DEADLINE_DAYS
from core.domain.exceptions import (
    Conflict,
    DomainValidationError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from core.domain.transactions import compare_and_swap, lock_for_update, store_operation

from .models import (
    TERMINAL_STATUSES,
    Grievance,
    GrievanceStatus,
    GrievanceStatusLog,
    Student,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Valid transition map
# ═══════════════════════════════════════════════════════════════════

#: Maps (from_status, to_status) → the workflow action that performs it.
#: Transitions not present here are illegal.  Keys are raw status values
#: so lookups with strings read from the database match.
ALLOWED_TRANSITIONS: dict[tuple[str, str], str] = {
    (GrievanceStatus.PENDING.value, GrievanceStatus.IN_PROGRESS.value): "claim",
    (GrievanceStatus.IN_PROGRESS.value, GrievanceStatus.RESOLVED.value): "resolve",
    (GrievanceStatus.IN_PROGRESS.value, GrievanceStatus.REJECTED.value): "resolve",
}

#: Final statuses an officer may choose when resolving.
RESOLUTION_STATUSES: tuple[str, ...] = (
    GrievanceStatus.RESOLVED.value,
    GrievanceStatus.REJECTED.value,
)


def _base_queryset() -> QuerySet[Grievance]:
    return Grievance.objects.select_related("student", "handled_by")


# ═══════════════════════════════════════════════════════════════════
#  Grievance Query Service
# ═══════════════════════════════════════════════════════════════════


class GrievanceQueryService:
    """
    Read-only access to the grievance queue.

    Visibility is global: every authenticated officer sees every
    grievance, whoever is handling it.
    """

    @staticmethod
    def list_grievances(
        requesting_officer: Any,
        filters: dict[str, Any] | None = None,
    ) -> QuerySet[Grievance]:
        """
        Return grievances in creation order, optionally narrowed by status.

        Parameters
        ----------
        requesting_officer : Officer
            The authenticated officer.  Not used for scoping; accepted so
            every service call receives the session explicitly.
        filters : dict, optional
            Cleaned data from ``GrievanceFilterSerializer``.  Supported
            key: ``status``.

        Returns
        -------
        QuerySet[Grievance]
            Ordered by ``(created_at, id)``.
        """
        filters = filters or {}
        qs = _base_queryset()
        status_filter = filters.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs.order_by("created_at", "id")

    @staticmethod
    def get_grievance(grievance_id: int) -> Grievance:
        """
        Return one grievance.

        Raises
        ------
        core.domain.exceptions.NotFound
            If no grievance has that id.
        """
        try:
            return _base_queryset().get(pk=grievance_id)
        except Grievance.DoesNotExist:
            raise NotFound(f"Grievance with id {grievance_id} not found.")

    @staticmethod
    def get_status_log(grievance_id: int) -> QuerySet[GrievanceStatusLog]:
        """Return the audit trail of a grievance, newest first."""
        grievance = GrievanceQueryService.get_grievance(grievance_id)
        return (
            grievance.status_logs
            .select_related("changed_by")
            .order_by("-created_at", "-id")
        )


# ═══════════════════════════════════════════════════════════════════
#  Grievance Submission Service
# ═══════════════════════════════════════════════════════════════════


class GrievanceSubmissionService:
    """
    Creates grievances on behalf of the student-facing side of the
    institution.  Officers never submit grievances through the API.
    """

    @staticmethod
    @transaction.atomic
    def submit(
        student: Student,
        subject: str,
        description: str,
        attachment: str | None = None,
    ) -> Grievance:
        """
        Create a new ``Pending`` grievance.

        The advisory deadline is ``now + GRIEVANCE_DEADLINE_DAYS`` (taken
        from settings, falling back to ``core.constants``).  An initial
        status-log row records the submission.

        Raises
        ------
        core.domain.exceptions.DomainValidationError
            If ``subject`` or ``description`` is blank.
        """
        subject = (subject or "").strip()
        description = (description or "").strip()
        if not subject:
            raise DomainValidationError("Subject cannot be blank.", field="subject")
        if not description:
            raise DomainValidationError("Description cannot be blank.", field="description")

        days = getattr(settings, "GRIEVANCE_DEADLINE_DAYS", GRIEVANCE_DEADLINE_DAYS)
        grievance = Grievance.objects.create(
            student=student,
            subject=subject,
            description=description,
            attachment=attachment or None,
            status=GrievanceStatus.PENDING,
            deadline=timezone.now() + datetime.timedelta(days=days),
        )
        GrievanceStatusLog.objects.create(
            grievance=grievance,
            from_status="",
            to_status=GrievanceStatus.PENDING,
            message="Grievance submitted.",
        )
        logger.info("Grievance #%d submitted for student %s", grievance.pk, student.pk)
        return grievance


# ═══════════════════════════════════════════════════════════════════
#  Grievance Workflow Service
# ═══════════════════════════════════════════════════════════════════


class GrievanceWorkflowService:
    """
    Claim and resolve — the only operations that change a grievance.

    Both run under ``store_operation``: each call is atomic, transient
    store contention is retried a bounded number of times and then
    surfaced as ``Unavailable``.  A lost race is a business outcome and
    is reported immediately.
    """

    @staticmethod
    @store_operation
    def claim(grievance_id: int, officer: Any) -> Grievance:
        """
        Take ownership of a ``Pending`` grievance.

        Parameters
        ----------
        grievance_id : int
            PK of the grievance to claim.
        officer : Officer
            The authenticated officer; becomes ``handled_by``.

        Returns
        -------
        Grievance
            The grievance, now ``In Progress`` and handled by ``officer``.

        Raises
        ------
        NotFound
            No grievance with that id.
        Conflict
            Another officer claimed it first (it is ``In Progress``).
        InvalidTransition
            The grievance is already resolved or rejected.

        Implementation
        --------------
        One ``UPDATE ... WHERE id=%s AND status='Pending'``.  Of any number
        of concurrent callers at most one sees a row count of 1; every
        other caller re-reads the row only to pick the right error.
        """
        now = timezone.now()
        won = compare_and_swap(
            Grievance,
            pk=grievance_id,
            expected={"status": GrievanceStatus.PENDING, "handled_by__isnull": True},
            changes={
                "status": GrievanceStatus.IN_PROGRESS,
                "handled_by": officer,
                "claimed_at": now,
            },
        )

        if not won:
            current = (
                Grievance.objects
                .filter(pk=grievance_id)
                .values_list("status", flat=True)
                .first()
            )
            if current is None:
                raise NotFound(f"Grievance with id {grievance_id} not found.")
            logger.info(
                "Officer %s lost claim on grievance #%d (status %s)",
                officer.pk, grievance_id, current,
            )
            if current in TERMINAL_STATUSES:
                raise InvalidTransition(
                    current=current,
                    target=GrievanceStatus.IN_PROGRESS,
                    reason="The grievance has already been closed.",
                )
            raise Conflict("This grievance has already been claimed by another officer.")

        GrievanceStatusLog.objects.create(
            grievance_id=grievance_id,
            from_status=GrievanceStatus.PENDING,
            to_status=GrievanceStatus.IN_PROGRESS,
            changed_by=officer,
            message="Claimed.",
        )
        logger.info("Grievance #%d claimed by officer %s", grievance_id, officer.pk)
        return _base_queryset().get(pk=grievance_id)

    @staticmethod
    @store_operation
    def resolve(
        grievance_id: int,
        officer: Any,
        remarks: str,
        final_status: str,
    ) -> Grievance:
        """
        Close an ``In Progress`` grievance the officer is handling.

        Parameters
        ----------
        grievance_id : int
            PK of the grievance.
        officer : Officer
            The authenticated officer; must be ``handled_by``.
        remarks : str
            Resolution remarks.  Stored stripped; must not be blank.
        final_status : str
            ``"Resolved"`` or ``"Rejected"``.

        Returns
        -------
        Grievance
            The grievance in its terminal status.

        Raises
        ------
        DomainValidationError
            Blank remarks or a ``final_status`` that is not terminal.
            Checked before the store is touched.
        NotFound
            No grievance with that id.
        InvalidTransition
            The grievance is not ``In Progress`` (still pending, or
            already closed).
        PermissionDenied
            The grievance is handled by another officer.
        """
        remarks = (remarks or "").strip()
        if not remarks:
            raise DomainValidationError("Remarks are required to resolve a grievance.", field="remarks")
        if final_status not in RESOLUTION_STATUSES:
            raise DomainValidationError(
                f"Status must be one of: {', '.join(RESOLUTION_STATUSES)}.",
                field="status",
            )

        grievance = lock_for_update(Grievance, grievance_id)

        if (grievance.status, final_status) not in ALLOWED_TRANSITIONS:
            if grievance.status == GrievanceStatus.PENDING:
                reason = "The grievance must be claimed before it can be resolved."
            else:
                reason = "The grievance has already been closed."
            raise InvalidTransition(current=grievance.status, target=final_status, reason=reason)

        if grievance.handled_by_id != officer.pk:
            raise PermissionDenied("Only the officer handling this grievance can resolve it.")

        won = compare_and_swap(
            Grievance,
            pk=grievance_id,
            expected={"status": GrievanceStatus.IN_PROGRESS, "handled_by": officer},
            changes={
                "status": final_status,
                "remarks": remarks,
                "resolved_at": timezone.now(),
            },
        )
        if not won:
            # Only reachable on backends without row locks.
            raise Conflict("The grievance changed while it was being resolved. Reload and retry.")

        GrievanceStatusLog.objects.create(
            grievance_id=grievance_id,
            from_status=GrievanceStatus.IN_PROGRESS,
            to_status=final_status,
            changed_by=officer,
            message=remarks,
        )
        logger.info(
            "Grievance #%d marked %s by officer %s",
            grievance_id, final_status, officer.pk,
        )
        return _base_queryset().get(pk=grievance_id)
