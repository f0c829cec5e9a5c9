"""
Custom authentication backend for mobile-number login.

Officers authenticate with their ``mobile`` number and ``password``.
The submitted number is normalised (spaces, dashes and parentheses
removed) before lookup so ``"98765 43210"`` and ``"9876543210"`` reach
the same account.

This backend is registered in ``settings.AUTHENTICATION_BACKENDS``
so that Django's ``authenticate()`` call dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

from core.domain.exceptions import NotFound

from .services import OfficerDirectoryService

Officer = get_user_model()


class MobileAuthBackend(ModelBackend):
    """
    Authenticate an officer by mobile number and password.

    Called by ``django.contrib.auth.authenticate(mobile=..., password=...)``.
    """

    def authenticate(self, request, mobile=None, password=None, **kwargs):
        """
        Resolve the officer by *mobile* and verify *password*.

        Parameters
        ----------
        request : HttpRequest | None
        mobile : str
            The mobile number supplied in the login form.
        password : str
            The raw password to verify.

        Returns
        -------
        Officer | None
            The authenticated officer, or ``None`` on failure.  Unknown
            numbers and wrong passwords are indistinguishable to the
            caller.
        """
        if mobile is None:
            mobile = kwargs.get(Officer.USERNAME_FIELD)
        if mobile is None or password is None:
            return None

        try:
            officer = OfficerDirectoryService.get_by_mobile(mobile)
        except NotFound:
            # Run the default password hasher to mitigate timing attacks
            Officer().set_password(password)
            return None

        # check_password compares digests in constant time
        if officer.check_password(password) and self.user_can_authenticate(officer):
            return officer
        return None
