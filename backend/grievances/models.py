"""
Grievances app models.

Covers the grievance lifecycle — from a student's submission, through an
officer claiming it, to its resolution or rejection with remarks.

Lifecycle::

    PENDING ──claim──▶ IN_PROGRESS ──resolve──▶ RESOLVED
                                   └─resolve──▶ REJECTED

``RESOLVED`` and ``REJECTED`` are terminal.  Field invariants that follow
from the lifecycle are enforced as database ``CheckConstraint``s so a
write that would break them is rejected by the store itself.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class GrievanceStatus(models.TextChoices):
    """
    Grievance workflow states.  The stored values are the labels the
    officer client displays and filters on.
    """

    PENDING = "Pending", "Pending"
    IN_PROGRESS = "In Progress", "In Progress"
    RESOLVED = "Resolved", "Resolved"
    REJECTED = "Rejected", "Rejected"


#: Statuses in which no further transition is possible.
TERMINAL_STATUSES = frozenset({GrievanceStatus.RESOLVED.value, GrievanceStatus.REJECTED.value})


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Student(TimeStampedModel):
    """
    Read-only reference to the student who submitted a grievance.

    Student records are owned by the institution's student registry and
    mirrored here by provisioning; the officer API never modifies them.
    """

    student_ref = models.CharField(
        max_length=64,
        unique=True,
        verbose_name="External Student ID",
    )
    name = models.CharField(max_length=150, verbose_name="Name")
    enrollment_number = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name="Enrollment Number",
        db_index=True,
    )
    mobile = models.CharField(max_length=20, blank=True, default="", verbose_name="Mobile")
    branch = models.CharField(max_length=100, blank=True, default="", verbose_name="Branch")
    year = models.PositiveSmallIntegerField(null=True, blank=True, verbose_name="Year")
    college = models.CharField(max_length=200, blank=True, default="", verbose_name="College")

    class Meta:
        verbose_name = "Student"
        verbose_name_plural = "Students"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.enrollment_number or self.student_ref})"


class Grievance(TimeStampedModel):
    """
    A student-submitted issue tracked through the resolution workflow.

    * ``subject``, ``description``, ``attachment`` and ``deadline`` are
      fixed at submission.
    * ``handled_by`` and ``claimed_at`` are written exactly once, by the
      claim.
    * ``remarks`` and ``resolved_at`` are written exactly once, by the
      resolution.
    """

    student = models.ForeignKey(
        Student,
        on_delete=models.PROTECT,
        related_name="grievances",
        verbose_name="Student",
    )
    subject = models.CharField(max_length=255, verbose_name="Subject")
    description = models.TextField(verbose_name="Description")
    attachment = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        verbose_name="Attachment URL",
    )
    status = models.CharField(
        max_length=20,
        choices=GrievanceStatus.choices,
        default=GrievanceStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="handled_grievances",
        verbose_name="Handled By",
    )
    remarks = models.TextField(
        null=True,
        blank=True,
        verbose_name="Resolution Remarks",
    )
    deadline = models.DateTimeField(verbose_name="Deadline")
    claimed_at = models.DateTimeField(null=True, blank=True, verbose_name="Claimed At")
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name="Resolved At")

    class Meta:
        verbose_name = "Grievance"
        verbose_name_plural = "Grievances"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["handled_by", "status"], name="grievance_handler_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status=GrievanceStatus.PENDING, handled_by__isnull=True)
                    | (
                        Q(status__in=[
                            GrievanceStatus.IN_PROGRESS,
                            GrievanceStatus.RESOLVED,
                            GrievanceStatus.REJECTED,
                        ])
                        & Q(handled_by__isnull=False)
                    )
                ),
                name="grievance_handled_by_matches_status",
            ),
            models.CheckConstraint(
                condition=(
                    Q(
                        status__in=[GrievanceStatus.RESOLVED, GrievanceStatus.REJECTED],
                        remarks__isnull=False,
                        resolved_at__isnull=False,
                    )
                    | Q(
                        status__in=[GrievanceStatus.PENDING, GrievanceStatus.IN_PROGRESS],
                        remarks__isnull=True,
                        resolved_at__isnull=True,
                    )
                ),
                name="grievance_resolution_matches_status",
            ),
        ]

    def __str__(self):
        return f"Grievance #{self.pk} — {self.subject}"

    @property
    def is_terminal(self) -> bool:
        """Return True once the grievance is resolved or rejected."""
        return self.status in TERMINAL_STATUSES

    @property
    def is_overdue(self) -> bool:
        """Advisory flag: still open after its deadline."""
        return not self.is_terminal and self.deadline < timezone.now()


class GrievanceStatusLog(TimeStampedModel):
    """
    Immutable audit trail of every status transition for a grievance.

    Stores the previous/new status, who made the change, and an optional
    message (the resolution remarks on terminal transitions).
    """

    grievance = models.ForeignKey(
        Grievance,
        on_delete=models.CASCADE,
        related_name="status_logs",
        verbose_name="Grievance",
    )
    from_status = models.CharField(
        max_length=20,
        choices=GrievanceStatus.choices,
        blank=True,
        default="",
        verbose_name="Previous Status",
    )
    to_status = models.CharField(
        max_length=20,
        choices=GrievanceStatus.choices,
        verbose_name="New Status",
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="grievance_status_changes",
        verbose_name="Changed By",
    )
    message = models.TextField(
        blank=True,
        default="",
        verbose_name="Message",
    )

    class Meta:
        verbose_name = "Grievance Status Log"
        verbose_name_plural = "Grievance Status Logs"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return (
            f"Grievance #{self.grievance_id}: "
            f"{self.from_status or '—'} → {self.to_status}"
        )
