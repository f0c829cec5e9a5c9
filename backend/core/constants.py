"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric constant should import it
from here instead of hardcoding.  Values that operators may tune per
deployment are read from ``settings`` with these as fallbacks.
"""

# ── Grievance deadlines ─────────────────────────────────────────────
# Advisory resolution deadline assigned when a grievance is submitted:
#     deadline = created_at + GRIEVANCE_DEADLINE_DAYS
# No escalation happens when it passes; the API only flags ``is_overdue``.
GRIEVANCE_DEADLINE_DAYS: int = 7

# ── Store access ────────────────────────────────────────────────────
# Total attempts for a store call that hits transient contention before
# the caller receives ``Unavailable``.
STORE_RETRY_ATTEMPTS: int = 3

# Seconds a single store call may wait on a lock / busy database.
DB_TIMEOUT_SECONDS: int = 5

# ── Bearer credentials ──────────────────────────────────────────────
JWT_ACCESS_MINUTES: int = 60
JWT_REFRESH_DAYS: int = 1
