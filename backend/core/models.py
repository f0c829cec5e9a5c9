"""
Core app models.

Abstract bases shared by the grievance models.  Both the officer queue
and the status audit trail are ordered by ``created_at``, so the column
is indexed on every concrete table.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Adds ``created_at`` (set once on insert) and ``updated_at`` (refreshed
    on every ``save()``).

    Conditional ``UPDATE`` statements bypass ``save()``; callers going
    through ``core.domain.transactions.compare_and_swap`` get
    ``updated_at`` refreshed there instead.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True
