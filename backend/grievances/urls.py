"""
Grievances app URL configuration.

Included in the project ``urls.py`` as::

    path('api/', include('grievances.urls')),

Route Hierarchy
---------------
  ── Grievance queue + workflow @actions ──────────────────────────
  GET        /grievances/                              → list (``?status=`` filter)
  GET        /grievances/{id}/                         → retrieve
  POST|PATCH /grievances/{id}/claim/                   → claim
  POST|PATCH /grievances/{id}/resolve/                 → resolve / reject with remarks

  ── Nested: status audit trail ───────────────────────────────────
  GET        /grievances/{grievance_pk}/status-log/    → transitions, newest first
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import GrievanceStatusLogViewSet, GrievanceViewSet

app_name = "grievances"

# ── Primary Router ──────────────────────────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"grievances",
    viewset=GrievanceViewSet,
    basename="grievance",
)

# ── Nested Router (under /grievances/{grievance_pk}/) ───────────────
grievances_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"grievances",
    lookup="grievance",
)
grievances_router.register(
    prefix=r"status-log",
    viewset=GrievanceStatusLogViewSet,
    basename="grievance-status-log",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(grievances_router.urls)),
]
