"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  No model imports, no aggregation logic here.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import DashboardStatsSerializer
from .services import DashboardAggregationService


class DashboardStatsView(APIView):
    """
    **GET /api/core/dashboard/**

    Return the dashboard counters for the authenticated officer.

    **Authentication**: Required (``IsAuthenticated``).

    **Response** (``200 OK``):
        Serialised by ``DashboardStatsSerializer``.

    **Error Responses**:
        - ``401 Unauthorized``: Missing or invalid credentials.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Dashboard statistics",
        description=(
            "Queue-wide totals plus the counts of grievances handled by the "
            "requesting officer, computed from a single snapshot."
        ),
        responses={
            200: OpenApiResponse(response=DashboardStatsSerializer, description="Dashboard stats."),
            401: OpenApiResponse(description="Authentication required."),
        },
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        service = DashboardAggregationService(officer=request.user)
        serializer = DashboardStatsSerializer(service.get_stats())
        return Response(serializer.data, status=status.HTTP_200_OK)
