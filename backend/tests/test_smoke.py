"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules behave.

These tests require a DB only where they touch transactions; they do
NOT require real data.
"""

from __future__ import annotations

from unittest import mock

import pytest
from django.db import OperationalError
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve."""

    EXPECTED_URLS = [
        # (url_name, kwargs, expected_path)
        ("accounts:login",                  {},          "/api/officer/auth/login/"),
        ("accounts:token-refresh",          {},          "/api/officer/auth/token/refresh/"),
        ("accounts:me",                     {},          "/api/officer/me/"),
        ("grievances:grievance-list",       {},          "/api/grievances/"),
        ("grievances:grievance-detail",     {"pk": 7},   "/api/grievances/7/"),
        ("grievances:grievance-claim",      {"pk": 7},   "/api/grievances/7/claim/"),
        ("grievances:grievance-resolve",    {"pk": 7},   "/api/grievances/7/resolve/"),
        ("grievances:grievance-status-log-list", {"grievance_pk": 7}, "/api/grievances/7/status-log/"),
        ("core:dashboard-stats",            {},          "/api/core/dashboard/"),
        ("schema",                          {},          "/api/schema/"),
    ]

    @pytest.mark.parametrize("url_name,kwargs,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, kwargs: dict, expected_path: str):
        """Named URL reverses to the expected path."""
        assert reverse(url_name, kwargs=kwargs) == expected_path

    @pytest.mark.parametrize("url_name,kwargs,expected_path", EXPECTED_URLS)
    def test_url_resolve_matches_view(self, url_name: str, kwargs: dict, expected_path: str):
        """Path resolves to a view function (not a 404)."""
        match = resolve(expected_path)
        assert match.func is not None

    def test_non_numeric_grievance_id_does_not_route(self):
        from django.urls import Resolver404

        with pytest.raises(Resolver404):
            resolve("/api/grievances/abc/claim/")


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_inheritance_chain(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            DomainValidationError,
            InvalidTransition,
            NotFound,
            PermissionDenied,
            Unavailable,
        )
        assert issubclass(InvalidTransition, Conflict)
        for exc_class in (Conflict, DomainValidationError, NotFound, PermissionDenied, Unavailable):
            assert issubclass(exc_class, DomainError)

    def test_invalid_transition_structured(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition(
            current="Pending",
            target="Resolved",
            reason="Claim it first.",
        )
        assert "Pending" in str(err)
        assert "Resolved" in str(err)
        assert "Claim it first." in str(err)
        assert err.current == "Pending"
        assert err.target == "Resolved"

    def test_invalid_transition_plain_message(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition("Cannot close grievance.")
        assert str(err) == "Cannot close grievance."

    def test_validation_error_carries_field(self):
        from core.domain.exceptions import DomainValidationError
        err = DomainValidationError("Remarks are required.", field="remarks")
        assert err.field == "remarks"
        assert err.code == "validation_error"


class TestExceptionHandler:
    """``domain_exception_handler`` maps each domain error to one status."""

    @pytest.mark.parametrize(
        "exc,status_code,code",
        [
            ("DomainValidationError", 400, "validation_error"),
            ("PermissionDenied", 403, "forbidden"),
            ("NotFound", 404, "not_found"),
            ("Conflict", 409, "conflict"),
            ("InvalidTransition", 409, "invalid_state"),
            ("Unavailable", 503, "unavailable"),
        ],
    )
    def test_domain_exception_mapping(self, exc: str, status_code: int, code: str):
        from core.domain import exceptions
        from core.domain.exception_handler import domain_exception_handler

        response = domain_exception_handler(getattr(exceptions, exc)(), {})
        assert response.status_code == status_code
        assert response.data["code"] == code
        assert response.data["detail"]

    def test_unknown_exception_propagates(self):
        from core.domain.exception_handler import domain_exception_handler
        assert domain_exception_handler(RuntimeError("boom"), {}) is None

    def test_store_error_maps_to_unavailable(self):
        from core.domain.exception_handler import domain_exception_handler

        response = domain_exception_handler(OperationalError("database is locked"), {})
        assert response.status_code == 503
        assert response.data["code"] == "unavailable"

    def test_serializer_validation_error_is_wrapped(self):
        from rest_framework.exceptions import ValidationError
        from core.domain.exception_handler import domain_exception_handler

        response = domain_exception_handler(ValidationError({"status": ["bad"]}), {})
        assert response.status_code == 400
        assert response.data["code"] == "validation_error"
        assert response.data["errors"]["status"] == ["bad"]


# ════════════════════════════════════════════════════════════════════
#  Store Operation Retry Tests
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db(transaction=True)
class TestStoreOperation:
    """Bounded retry on transient store contention."""

    def test_transient_error_is_retried(self, settings):
        from core.domain.transactions import store_operation

        settings.STORE_RETRY_ATTEMPTS = 3
        calls = []

        @store_operation
        def flaky():
            calls.append(1)
            if len(calls) < 2:
                raise OperationalError("database is locked")
            return "ok"

        with mock.patch("core.domain.transactions.time.sleep"):
            assert flaky() == "ok"
        assert len(calls) == 2

    def test_exhausted_retries_raise_unavailable(self, settings):
        from core.domain.exceptions import Unavailable
        from core.domain.transactions import store_operation

        settings.STORE_RETRY_ATTEMPTS = 2
        calls = []

        @store_operation
        def always_locked():
            calls.append(1)
            raise OperationalError("database is locked")

        with mock.patch("core.domain.transactions.time.sleep"):
            with pytest.raises(Unavailable):
                always_locked()
        assert len(calls) == 2

    def test_domain_errors_are_not_retried(self):
        from core.domain.exceptions import Conflict
        from core.domain.transactions import store_operation

        calls = []

        @store_operation
        def lost_race():
            calls.append(1)
            raise Conflict()

        with pytest.raises(Conflict):
            lost_race()
        assert len(calls) == 1
