"""
Core app URL configuration.

URL prefix (registered in ``portal/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/dashboard/  — Dashboard counters for the requesting officer.
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path(
        "dashboard/",
        views.DashboardStatsView.as_view(),
        name="dashboard-stats",
    ),
]
