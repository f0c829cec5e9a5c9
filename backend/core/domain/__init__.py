"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF ``EXCEPTION_HANDLER`` translating those exceptions.
transactions       Compare-and-swap, row locking and bounded-retry helpers.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.transactions import compare_and_swap, store_operation
"""
