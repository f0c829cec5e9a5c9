"""
Accounts app models.

Defines the ``Officer`` — the project's custom user model.  Officers are
the only principals that authenticate against the API.  They log in with
their **mobile number** and password; ``mobile`` therefore doubles as
``USERNAME_FIELD``.

Officers are provisioned out of band (Django admin, ``createsuperuser``,
``seed_portal``) and are never hard-deleted while a grievance references
them: ``Grievance.handled_by`` uses ``on_delete=PROTECT``.  Deactivate an
officer (``is_active=False``) to revoke access instead.
"""

from __future__ import annotations

import re

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

_MOBILE_STRIP = re.compile(r"[\s\-()]")


def normalize_mobile(value: str | None) -> str:
    """Strip whitespace, dashes and parentheses from a mobile number."""
    return _MOBILE_STRIP.sub("", value or "")


def officer_photo_path(instance: "Officer", filename: str) -> str:
    return f"officer_photos/{instance.pk or 'new'}/{filename}"


class OfficerManager(BaseUserManager):
    """Manager keyed on ``mobile`` instead of ``username``."""

    use_in_migrations = True

    def _create_user(self, mobile: str, password: str | None, **extra_fields):
        if not mobile:
            raise ValueError("Officers must have a mobile number.")
        email = self.normalize_email(extra_fields.pop("email", ""))
        officer = self.model(mobile=normalize_mobile(mobile), email=email, **extra_fields)
        officer.set_password(password)
        officer.save(using=self._db)
        return officer

    def create_user(self, mobile: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(mobile, password, **extra_fields)

    def create_superuser(self, mobile: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(mobile, password, **extra_fields)


class Officer(AbstractUser):
    """
    Grievance-cell staff member who claims and resolves grievances.

    The inherited ``username``, ``first_name`` and ``last_name`` columns
    are removed: an officer is identified by ``mobile`` and displayed by
    ``name``.
    """

    username = None
    first_name = None
    last_name = None

    name = models.CharField(
        max_length=150,
        verbose_name="Full Name",
    )
    mobile = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="Mobile Number",
        help_text="Login credential. Stored without spaces or dashes.",
    )
    email = models.EmailField(
        blank=True,
        default="",
        verbose_name="Email Address",
    )
    designation = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Designation",
    )
    department = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Department",
    )
    profile_photo = models.ImageField(
        upload_to=officer_photo_path,
        null=True,
        blank=True,
        verbose_name="Profile Photo",
    )

    USERNAME_FIELD = "mobile"
    REQUIRED_FIELDS = ["name", "email"]

    objects = OfficerManager()

    class Meta:
        verbose_name = "Officer"
        verbose_name_plural = "Officers"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.mobile})"

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name.split(" ")[0] if self.name else self.mobile
