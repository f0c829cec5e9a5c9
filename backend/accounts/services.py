"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``OfficerDirectoryService`` — officer lookup by id or mobile number.
- ``AuthenticationService``   — mobile + password login, JWT issuance.
- ``CurrentOfficerService``   — "Me" endpoint: read and partially update
  the authenticated officer's own profile.

The authenticated officer is always passed in explicitly by the caller;
no service reads ambient session state.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import DomainValidationError, NotFound

from .models import normalize_mobile

Officer = get_user_model()
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Officer Directory
# ═══════════════════════════════════════════════════════════════════


class OfficerDirectoryService:
    """
    Lookup of provisioned officers.  Officers are never created or
    removed through the API.
    """

    @staticmethod
    def get_officer(officer_id: int) -> Officer:
        """
        Return the officer with primary key ``officer_id``.

        Raises
        ------
        core.domain.exceptions.NotFound
        """
        try:
            return Officer.objects.get(pk=officer_id)
        except Officer.DoesNotExist:
            raise NotFound(f"Officer with id {officer_id} not found.")

    @staticmethod
    def get_by_mobile(mobile: str) -> Officer:
        """
        Return the officer registered under ``mobile``.

        The number is normalised first, so spacing and dashes do not
        matter.  Inactive officers are returned too; callers decide
        whether they may act.

        Raises
        ------
        core.domain.exceptions.NotFound
        """
        normalized = normalize_mobile(mobile)
        try:
            return Officer.objects.get(mobile=normalized)
        except Officer.DoesNotExist:
            raise NotFound(f"No officer registered under mobile {normalized}.")


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """
    Handles mobile-number login and JWT token generation.
    """

    @staticmethod
    def authenticate(mobile: str, password: str, request: Any = None) -> Officer | None:
        """
        Validate credentials and return the officer if successful.

        Delegates to ``MobileAuthBackend`` through Django's
        ``authenticate()``.  Returns ``None`` for an unknown number, a
        wrong password, or an inactive officer — the caller must not be
        able to tell these apart.
        """
        officer = django_authenticate(request=request, mobile=mobile, password=password)
        if officer is not None:
            update_last_login(None, officer)
        return officer

    @staticmethod
    def generate_tokens(officer: Officer) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given officer.

        The access token is the bearer credential; its lifetime is
        ``SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]``.  Extra claims let the
        client render the officer header without a second request.

        Returns
        -------
        dict
            ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = RefreshToken.for_user(officer)
        refresh["name"] = officer.name
        refresh["designation"] = officer.designation
        refresh["department"] = officer.department
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  Current Officer ("Me") Service
# ═══════════════════════════════════════════════════════════════════


class CurrentOfficerService:
    """
    Helpers for the "Me" endpoint: profile retrieval and partial update.
    """

    @staticmethod
    def get_profile(officer: Officer) -> Officer:
        """Return a fresh copy of the authenticated officer."""
        return OfficerDirectoryService.get_officer(officer.pk)

    @staticmethod
    @transaction.atomic
    def update_profile(officer: Officer, validated_data: dict[str, Any]) -> Officer:
        """
        Partially update the authenticated officer's own profile.

        Parameters
        ----------
        officer : Officer
            The currently authenticated officer.
        validated_data : dict
            Cleaned fields from ``OfficerProfileUpdateSerializer``.  Any
            subset of ``name``, ``email``, ``password``, ``profile_photo``.

        Returns
        -------
        Officer
            The updated officer.

        Raises
        ------
        core.domain.exceptions.DomainValidationError
            - ``name`` supplied but blank.
            - ``email`` already used by another officer.
            - ``password`` rejected by ``AUTH_PASSWORD_VALIDATORS``.

        Notes
        -----
        Only supplied fields change.  ``mobile``, ``designation``,
        ``department`` and ``is_active`` are managed by provisioning and
        cannot be changed here.
        """
        update_fields: list[str] = []

        if "name" in validated_data:
            name = (validated_data["name"] or "").strip()
            if not name:
                raise DomainValidationError("Name cannot be blank.", field="name")
            officer.name = name
            update_fields.append("name")

        if "email" in validated_data:
            email = Officer.objects.normalize_email(validated_data["email"] or "")
            if email and (
                Officer.objects
                .filter(email__iexact=email)
                .exclude(pk=officer.pk)
                .exists()
            ):
                raise DomainValidationError(
                    "This email is already used by another officer.",
                    field="email",
                )
            officer.email = email
            update_fields.append("email")

        if "password" in validated_data:
            password = validated_data["password"]
            try:
                validate_password(password, user=officer)
            except DjangoValidationError as exc:
                raise DomainValidationError(" ".join(exc.messages), field="password")
            officer.set_password(password)
            update_fields.append("password")

        previous_photo = ""
        if "profile_photo" in validated_data:
            previous_photo = officer.profile_photo.name if officer.profile_photo else ""
            officer.profile_photo = validated_data["profile_photo"]
            update_fields.append("profile_photo")

        if update_fields:
            officer.save(update_fields=update_fields)
            logger.info(
                "Officer %s updated profile fields: %s",
                officer.pk, ", ".join(update_fields),
            )

        if previous_photo and previous_photo != officer.profile_photo.name:
            storage = officer.profile_photo.storage
            # Only once the new photo is committed
            transaction.on_commit(lambda: storage.delete(previous_photo))

        return OfficerDirectoryService.get_officer(officer.pk)
