"""
Service-level tests for the grievance state machine.

Covers the workflow guarantees directly against
``GrievanceWorkflowService`` / ``GrievanceSubmissionService``:

  * claim exclusivity (deterministic stale-read and threaded race)
  * no transition skips ``In Progress``
  * only the handling officer may resolve
  * terminal states never change again
  * remarks are required and validated before the store is touched
  * the database rejects rows that break the status/field invariants
"""

from __future__ import annotations

import datetime
import threading

from django.contrib.auth import get_user_model
from django.db import IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase, override_settings
from django.utils import timezone

from core.domain.exceptions import (
    Conflict,
    DomainValidationError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from core.domain.transactions import compare_and_swap
from grievances.models import Grievance, GrievanceStatus, GrievanceStatusLog, Student
from grievances.services import (
    ALLOWED_TRANSITIONS,
    GrievanceQueryService,
    GrievanceSubmissionService,
    GrievanceWorkflowService,
)

Officer = get_user_model()


def _make_officer(mobile: str, name: str) -> Officer:
    return Officer.objects.create_user(mobile=mobile, password="TestPass123!", name=name)


class GrievanceTestMixin:
    """Shared fixtures: two officers, one student, one pending grievance."""

    @classmethod
    def setUpTestData(cls):
        cls.officer_a = _make_officer("9000000101", "Officer A")
        cls.officer_b = _make_officer("9000000102", "Officer B")
        cls.student = Student.objects.create(student_ref="STU-0001", name="Priya Nair")
        cls.grievance = GrievanceSubmissionService.submit(
            student=cls.student,
            subject="Hostel Wi-Fi outage",
            description="Block B has had no network for a week.",
        )

    def refresh(self) -> Grievance:
        return Grievance.objects.get(pk=self.grievance.pk)


# ═══════════════════════════════════════════════════════════════════
#  Submission
# ═══════════════════════════════════════════════════════════════════


class TestSubmission(GrievanceTestMixin, TestCase):

    def test_submitted_grievance_is_pending_and_unclaimed(self):
        grievance = self.refresh()

        self.assertEqual(grievance.status, GrievanceStatus.PENDING)
        self.assertIsNone(grievance.handled_by)
        self.assertIsNone(grievance.remarks)
        self.assertIsNone(grievance.claimed_at)
        self.assertIsNone(grievance.resolved_at)
        self.assertEqual(grievance.status_logs.count(), 1)

    def test_default_deadline_is_seven_days_out(self):
        grievance = self.refresh()
        delta = grievance.deadline - grievance.created_at
        self.assertAlmostEqual(delta.total_seconds(), datetime.timedelta(days=7).total_seconds(), delta=5)
        self.assertFalse(grievance.is_overdue)

    @override_settings(GRIEVANCE_DEADLINE_DAYS=2)
    def test_deadline_follows_settings(self):
        grievance = GrievanceSubmissionService.submit(
            student=self.student, subject="Fee receipt", description="Receipt missing.",
        )
        delta = grievance.deadline - grievance.created_at
        self.assertAlmostEqual(delta.total_seconds(), datetime.timedelta(days=2).total_seconds(), delta=5)

    def test_blank_subject_is_rejected(self):
        with self.assertRaises(DomainValidationError) as ctx:
            GrievanceSubmissionService.submit(student=self.student, subject="  ", description="x")
        self.assertEqual(ctx.exception.field, "subject")

    def test_overdue_flag_is_advisory(self):
        Grievance.objects.filter(pk=self.grievance.pk).update(
            deadline=timezone.now() - datetime.timedelta(days=1),
        )
        self.assertTrue(self.refresh().is_overdue)

        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)
        GrievanceWorkflowService.resolve(
            self.grievance.pk, self.officer_a, remarks="Fixed late.", final_status=GrievanceStatus.RESOLVED,
        )
        self.assertFalse(self.refresh().is_overdue)


# ═══════════════════════════════════════════════════════════════════
#  Claim
# ═══════════════════════════════════════════════════════════════════


class TestClaim(GrievanceTestMixin, TestCase):

    def test_claim_moves_pending_to_in_progress(self):
        result = GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)

        self.assertEqual(result.status, GrievanceStatus.IN_PROGRESS)
        self.assertEqual(result.handled_by, self.officer_a)
        self.assertIsNotNone(result.claimed_at)
        log = result.status_logs.first()
        self.assertEqual(log.from_status, GrievanceStatus.PENDING)
        self.assertEqual(log.to_status, GrievanceStatus.IN_PROGRESS)
        self.assertEqual(log.changed_by, self.officer_a)

    def test_second_claim_conflicts_and_keeps_first_owner(self):
        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)

        with self.assertRaises(Conflict) as ctx:
            GrievanceWorkflowService.claim(self.grievance.pk, self.officer_b)

        self.assertNotIsInstance(ctx.exception, InvalidTransition)
        self.assertEqual(self.refresh().handled_by, self.officer_a)

    def test_reclaim_by_owner_also_conflicts(self):
        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)
        with self.assertRaises(Conflict):
            GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)

    def test_claim_unknown_grievance_is_not_found(self):
        with self.assertRaises(NotFound):
            GrievanceWorkflowService.claim(999999, self.officer_a)

    def test_claim_closed_grievance_is_invalid_transition(self):
        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)
        GrievanceWorkflowService.resolve(
            self.grievance.pk, self.officer_a, remarks="Done.", final_status=GrievanceStatus.REJECTED,
        )

        with self.assertRaises(InvalidTransition):
            GrievanceWorkflowService.claim(self.grievance.pk, self.officer_b)

        grievance = self.refresh()
        self.assertEqual(grievance.status, GrievanceStatus.REJECTED)
        self.assertEqual(grievance.handled_by, self.officer_a)

    def test_stale_reads_cannot_both_win(self):
        """Two callers that both observed Pending: exactly one write lands."""
        seen_by_a = self.refresh()
        seen_by_b = self.refresh()
        self.assertEqual(seen_by_a.status, GrievanceStatus.PENDING)
        self.assertEqual(seen_by_b.status, GrievanceStatus.PENDING)

        expected = {"status": GrievanceStatus.PENDING}
        won_a = compare_and_swap(
            Grievance, pk=seen_by_a.pk, expected=expected,
            changes={"status": GrievanceStatus.IN_PROGRESS, "handled_by": self.officer_a},
        )
        won_b = compare_and_swap(
            Grievance, pk=seen_by_b.pk, expected=expected,
            changes={"status": GrievanceStatus.IN_PROGRESS, "handled_by": self.officer_b},
        )

        self.assertTrue(won_a)
        self.assertFalse(won_b)
        self.assertEqual(self.refresh().handled_by, self.officer_a)


# ═══════════════════════════════════════════════════════════════════
#  Resolve
# ═══════════════════════════════════════════════════════════════════


class TestResolve(GrievanceTestMixin, TestCase):

    def claim(self, officer=None):
        return GrievanceWorkflowService.claim(self.grievance.pk, officer or self.officer_a)

    def resolve(self, officer=None, remarks="Router replaced.", final_status=GrievanceStatus.RESOLVED):
        return GrievanceWorkflowService.resolve(
            self.grievance.pk, officer or self.officer_a, remarks=remarks, final_status=final_status,
        )

    def test_owner_resolves_with_remarks(self):
        self.claim()
        result = self.resolve(remarks="  Router replaced.  ")

        self.assertEqual(result.status, GrievanceStatus.RESOLVED)
        self.assertEqual(result.remarks, "Router replaced.")
        self.assertIsNotNone(result.resolved_at)
        self.assertEqual(result.handled_by, self.officer_a)
        self.assertEqual(result.status_logs.count(), 3)

    def test_owner_rejects_with_remarks(self):
        self.claim()
        result = self.resolve(remarks="Duplicate of #12.", final_status=GrievanceStatus.REJECTED)
        self.assertEqual(result.status, GrievanceStatus.REJECTED)
        self.assertEqual(result.remarks, "Duplicate of #12.")

    def test_pending_cannot_skip_to_terminal(self):
        for final_status in (GrievanceStatus.RESOLVED, GrievanceStatus.REJECTED):
            with self.assertRaises(InvalidTransition):
                self.resolve(final_status=final_status)

        grievance = self.refresh()
        self.assertEqual(grievance.status, GrievanceStatus.PENDING)
        self.assertIsNone(grievance.remarks)

    def test_non_owner_is_forbidden(self):
        self.claim(self.officer_a)

        with self.assertRaises(PermissionDenied):
            self.resolve(officer=self.officer_b)

        grievance = self.refresh()
        self.assertEqual(grievance.status, GrievanceStatus.IN_PROGRESS)
        self.assertIsNone(grievance.remarks)

    def test_blank_remarks_are_rejected_before_any_change(self):
        self.claim()
        for remarks in ("", "   ", None):
            with self.assertRaises(DomainValidationError) as ctx:
                self.resolve(remarks=remarks)
            self.assertEqual(ctx.exception.field, "remarks")

        grievance = self.refresh()
        self.assertEqual(grievance.status, GrievanceStatus.IN_PROGRESS)
        self.assertIsNone(grievance.remarks)

    def test_non_terminal_target_is_rejected(self):
        self.claim()
        for final_status in (GrievanceStatus.PENDING, GrievanceStatus.IN_PROGRESS, "Closed"):
            with self.assertRaises(DomainValidationError) as ctx:
                self.resolve(final_status=final_status)
            self.assertEqual(ctx.exception.field, "status")

    def test_terminal_state_is_final(self):
        self.claim()
        self.resolve(remarks="First remarks.")

        with self.assertRaises(InvalidTransition):
            self.resolve(remarks="Second remarks.", final_status=GrievanceStatus.REJECTED)
        with self.assertRaises(InvalidTransition):
            self.resolve(officer=self.officer_b, remarks="Not mine.")

        grievance = self.refresh()
        self.assertEqual(grievance.status, GrievanceStatus.RESOLVED)
        self.assertEqual(grievance.remarks, "First remarks.")

    def test_resolve_unknown_grievance_is_not_found(self):
        with self.assertRaises(NotFound):
            GrievanceWorkflowService.resolve(
                999999, self.officer_a, remarks="x", final_status=GrievanceStatus.RESOLVED,
            )

    def test_transition_table_has_no_skips_or_exits(self):
        for from_status, to_status in ALLOWED_TRANSITIONS:
            self.assertNotIn(from_status, (GrievanceStatus.RESOLVED, GrievanceStatus.REJECTED))
            if from_status == GrievanceStatus.PENDING:
                self.assertEqual(to_status, GrievanceStatus.IN_PROGRESS)

    def test_status_log_is_newest_first(self):
        self.claim()
        self.resolve()

        logs = list(GrievanceQueryService.get_status_log(self.grievance.pk))

        self.assertEqual(
            [log.to_status for log in logs],
            [GrievanceStatus.RESOLVED, GrievanceStatus.IN_PROGRESS, GrievanceStatus.PENDING],
        )


# ═══════════════════════════════════════════════════════════════════
#  Queries
# ═══════════════════════════════════════════════════════════════════


class TestQueries(GrievanceTestMixin, TestCase):

    def test_list_is_global_and_in_creation_order(self):
        second = GrievanceSubmissionService.submit(
            student=self.student, subject="Library fine", description="Wrongly fined.",
        )
        GrievanceWorkflowService.claim(second.pk, self.officer_b)

        ids = [g.pk for g in GrievanceQueryService.list_grievances(self.officer_a)]

        self.assertEqual(ids, [self.grievance.pk, second.pk])

    def test_list_status_filter(self):
        second = GrievanceSubmissionService.submit(
            student=self.student, subject="Library fine", description="Wrongly fined.",
        )
        GrievanceWorkflowService.claim(second.pk, self.officer_b)

        pending = GrievanceQueryService.list_grievances(
            self.officer_a, {"status": GrievanceStatus.PENDING},
        )
        in_progress = GrievanceQueryService.list_grievances(
            self.officer_a, {"status": GrievanceStatus.IN_PROGRESS},
        )

        self.assertEqual([g.pk for g in pending], [self.grievance.pk])
        self.assertEqual([g.pk for g in in_progress], [second.pk])

    def test_get_unknown_grievance_is_not_found(self):
        with self.assertRaises(NotFound):
            GrievanceQueryService.get_grievance(999999)


# ═══════════════════════════════════════════════════════════════════
#  Database constraints
# ═══════════════════════════════════════════════════════════════════


class TestStoreConstraints(GrievanceTestMixin, TestCase):

    def test_in_progress_without_handler_is_rejected(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Grievance.objects.filter(pk=self.grievance.pk).update(status=GrievanceStatus.IN_PROGRESS)

    def test_pending_with_handler_is_rejected(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Grievance.objects.filter(pk=self.grievance.pk).update(handled_by=self.officer_a)

    def test_terminal_without_remarks_is_rejected(self):
        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)
        with self.assertRaises(IntegrityError), transaction.atomic():
            Grievance.objects.filter(pk=self.grievance.pk).update(
                status=GrievanceStatus.RESOLVED, resolved_at=timezone.now(),
            )

    def test_handling_officer_cannot_be_deleted(self):
        from django.db.models import ProtectedError

        GrievanceWorkflowService.claim(self.grievance.pk, self.officer_a)
        with self.assertRaises(ProtectedError):
            self.officer_a.delete()


# ═══════════════════════════════════════════════════════════════════
#  Concurrent claim race (real connections)
# ═══════════════════════════════════════════════════════════════════


class TestConcurrentClaim(TransactionTestCase):
    """
    Several officers claim the same grievance from separate threads and
    database connections.  Exactly one succeeds.
    """

    CONTENDERS = 6

    def setUp(self):
        self.officers = [
            _make_officer(f"90000002{i:02d}", f"Racer {i}") for i in range(self.CONTENDERS)
        ]
        student = Student.objects.create(student_ref="STU-RACE", name="Race Student")
        self.grievance = GrievanceSubmissionService.submit(
            student=student, subject="Race", description="Contended grievance.",
        )

    def test_exactly_one_claim_wins(self):
        barrier = threading.Barrier(self.CONTENDERS)
        outcomes: list[str] = []
        lock = threading.Lock()

        def contend(officer):
            try:
                barrier.wait()
                GrievanceWorkflowService.claim(self.grievance.pk, officer)
                result = "won"
            except Conflict:
                result = "conflict"
            finally:
                connection.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=contend, args=(o,)) for o in self.officers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(outcomes.count("won"), 1, outcomes)
        self.assertEqual(outcomes.count("conflict"), self.CONTENDERS - 1, outcomes)

        grievance = Grievance.objects.get(pk=self.grievance.pk)
        self.assertEqual(grievance.status, GrievanceStatus.IN_PROGRESS)
        self.assertIn(grievance.handled_by, self.officers)
        self.assertEqual(
            GrievanceStatusLog.objects.filter(
                grievance=grievance, to_status=GrievanceStatus.IN_PROGRESS,
            ).count(),
            1,
        )
