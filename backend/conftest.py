"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_officer`` factory fixture for creating test officers.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``create_student`` / ``create_grievance`` factories for queue data.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_officer(db):
    """
    Factory fixture that creates an officer with sensible defaults.

    Usage::

        def test_something(create_officer):
            officer = create_officer(name="Alice")
            # or with all fields:
            officer = create_officer(
                mobile="9876543210",
                password="Str0ng!Pass",
                email="alice@example.edu",
                designation="Grievance Officer",
            )
    """
    from accounts.models import Officer

    _counter = 0

    def _factory(
        *,
        mobile: str | None = None,
        password: str = "TestPass123!",
        name: str | None = None,
        email: str | None = None,
        is_active: bool = True,
        **kwargs,
    ) -> Officer:
        nonlocal _counter
        _counter += 1
        if mobile is None:
            mobile = f"98{_counter:08d}"
        if name is None:
            name = f"Officer {_counter}"
        if email is None:
            email = f"officer{_counter}@test.local"

        return Officer.objects.create_user(
            mobile=mobile,
            password=password,
            name=name,
            email=email,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_officer):
    """
    Returns a helper that creates an officer (or takes an existing one)
    and returns an ``Authorization`` header dict with a valid JWT access
    token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(name="Alice")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/core/dashboard/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, officer=None, **officer_kwargs) -> dict[str, str]:
        if officer is None:
            officer = create_officer(**officer_kwargs)
        token = AccessToken.for_user(officer)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def create_student(db):
    """Factory fixture for ``grievances.Student`` rows."""
    from grievances.models import Student

    _counter = 0

    def _factory(**kwargs) -> Student:
        nonlocal _counter
        _counter += 1
        kwargs.setdefault("student_ref", f"STU-{_counter:04d}")
        kwargs.setdefault("name", f"Student {_counter}")
        kwargs.setdefault("enrollment_number", f"EN{_counter:06d}")
        return Student.objects.create(**kwargs)

    return _factory


@pytest.fixture()
def create_grievance(create_student):
    """
    Factory fixture that submits a ``Pending`` grievance through
    ``GrievanceSubmissionService``.

    Usage::

        def test_queue(create_grievance):
            grievance = create_grievance(subject="Hostel water supply")
    """
    from grievances.services import GrievanceSubmissionService

    def _factory(
        *,
        student=None,
        subject: str = "Hostel water supply",
        description: str = "No running water since Monday.",
        attachment: str | None = None,
    ):
        if student is None:
            student = create_student()
        return GrievanceSubmissionService.submit(
            student=student,
            subject=subject,
            description=description,
            attachment=attachment,
        )

    return _factory
