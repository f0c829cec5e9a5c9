"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  ``core.domain.exception_handler`` maps them to HTTP
responses.

Mapping cheatsheet
------------------
┌───────────────────────┬───────────────────┬──────┬──────────────────┐
│ Domain Exception      │ Meaning           │ HTTP │ code             │
├───────────────────────┼───────────────────┼──────┼──────────────────┤
│ DomainError           │ business rule     │ 400  │ domain_error     │
│ DomainValidationError │ bad/missing input │ 400  │ validation_error │
│ PermissionDenied      │ not your item     │ 403  │ forbidden        │
│ NotFound              │ absent resource   │ 404  │ not_found        │
│ Conflict              │ lost a claim race │ 409  │ conflict         │
│ InvalidTransition     │ illegal for state │ 409  │ invalid_state    │
│ Unavailable           │ store unreachable │ 503  │ unavailable      │
└───────────────────────┴───────────────────┴──────┴──────────────────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if (grievance.status, target) not in ALLOWED_TRANSITIONS:
        raise InvalidTransition(current=grievance.status, target=target)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    code = "domain_error"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """
    Required input is missing or malformed (e.g. blank resolution remarks).

    Raised *before* any state is touched.  Maps to HTTP 400.
    """

    code = "validation_error"

    def __init__(self, message: str = "The supplied input is invalid.", *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PermissionDenied(DomainError):
    """
    The authenticated officer may not act on this resource, e.g. resolving
    a grievance claimed by somebody else.

    Maps to HTTP 403.
    """

    code = "forbidden"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist.

    Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: a claim that lost the race to another officer.
    Maps to HTTP 409.
    """

    code = "conflict"

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="Pending",
            target="Resolved",
            reason="Grievance must be claimed before it can be resolved.",
        )
    """

    code = "invalid_state"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            message = " ".join(parts) + "."
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class Unavailable(DomainError):
    """
    The backing store could not be reached, or stayed locked, within the
    configured timeout and retry budget.

    Maps to HTTP 503.
    """

    code = "unavailable"

    def __init__(self, message: str = "The grievance store is temporarily unavailable. Please retry.") -> None:
        super().__init__(message)
