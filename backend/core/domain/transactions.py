"""
core.domain.transactions — Helpers for safe state transitions.

Provides utilities that wrap ``transaction.atomic``, conditional
``UPDATE`` statements and ``select_for_update`` into reusable patterns so
that every service follows the same concurrency-safe approach.

Design goals
------------
* A transition is either a single conditional write keyed on the
  expected prior status (compare-and-swap) or a locked read followed by
  a guarded write — never a plain read-then-write.
* Transient store contention (lock waits, busy database, dropped
  connection) is retried a bounded number of times and then surfaced as
  ``Unavailable``.  Business outcomes such as a lost race are never
  retried.

Usage::

    from core.domain.transactions import compare_and_swap, store_operation

    won = compare_and_swap(
        Grievance,
        pk=grievance_id,
        expected={"status": GrievanceStatus.PENDING},
        changes={"status": GrievanceStatus.IN_PROGRESS, "handled_by": officer},
    )

    @store_operation
    def claim(...):
        ...
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, TypeVar

from django.conf import settings
from django.db import OperationalError, models, transaction
from django.utils import timezone

from core.domain.exceptions import NotFound, Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=models.Model)

#: Pause between retries of a contended store call, multiplied by the attempt number.
_RETRY_BACKOFF_SECONDS: float = 0.05


def compare_and_swap(
    model_class: type[M],
    *,
    pk: Any,
    expected: dict[str, Any],
    changes: dict[str, Any],
) -> bool:
    """
    Apply ``changes`` to the row ``pk`` only if it still matches ``expected``.

    Executes exactly one ``UPDATE ... WHERE pk = %s AND <expected>``
    statement, which the database applies atomically.  Of several
    concurrent callers with the same ``expected`` values at most one
    can see a row count of 1.

    Args:
        model_class: The Django model class.
        pk:          Primary key of the row to update.
        expected:    Field lookups the row must satisfy at write time.
        changes:     Field values to write.  ``updated_at`` is refreshed
                     automatically when the model has that field.

    Returns:
        ``True`` if this caller's write was applied, ``False`` otherwise
        (the row is missing or no longer matches ``expected``).
    """
    values = dict(changes)
    field_names = {f.name for f in model_class._meta.get_fields()}
    if "updated_at" in field_names:
        values.setdefault("updated_at", timezone.now())

    updated = (
        model_class.objects
        .filter(pk=pk, **expected)
        .update(**values)
    )
    return updated == 1


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.  On backends
    without row locks (SQLite) the read is plain; callers must still
    guard their write with ``compare_and_swap``.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{model_class.__name__} with id {pk} does not exist.")


def store_operation(fn: Callable[..., T]) -> Callable[..., T]:
    """
    Decorate a service function so that it runs atomically against the
    store with bounded retry on transient contention.

    Each attempt runs in its own ``transaction.atomic()`` block.  An
    ``OperationalError`` (lock timeout, busy database, lost connection)
    rolls the attempt back and is retried up to
    ``settings.STORE_RETRY_ATTEMPTS`` times in total; after that the
    caller receives ``Unavailable``.  Domain exceptions propagate
    immediately and are never retried.

    When called inside an outer atomic block the retry loop is skipped:
    retrying would re-run on a connection whose transaction is already
    broken, so the error is surfaced at once.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        attempts = max(1, getattr(settings, "STORE_RETRY_ATTEMPTS", 3))
        if transaction.get_connection().in_atomic_block:
            attempts = 1

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    return fn(*args, **kwargs)
            except OperationalError as exc:
                logger.warning(
                    "Store contention in %s (attempt %d/%d): %s",
                    fn.__qualname__, attempt, attempts, exc,
                )
                if attempt == attempts:
                    raise Unavailable() from exc
                time.sleep(_RETRY_BACKOFF_SECONDS * attempt)
        raise AssertionError("unreachable")

    return wrapper
