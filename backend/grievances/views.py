"""
Grievances app ViewSets.

Views are intentionally thin: parse input with a serializer, delegate to
the service layer, serialize the result.  The authenticated officer
(``request.user``) is passed explicitly into every service call.

ViewSets
--------
- ``GrievanceViewSet``          — list / retrieve plus the ``claim`` and
  ``resolve`` actions.
- ``GrievanceStatusLogViewSet`` — nested audit trail of one grievance.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    GrievanceFilterSerializer,
    GrievanceSerializer,
    GrievanceStatusLogSerializer,
    ResolveGrievanceSerializer,
)
from .services import GrievanceQueryService, GrievanceWorkflowService

logger = logging.getLogger(__name__)


class GrievanceViewSet(viewsets.ViewSet):
    """
    Officer-facing grievance endpoints.

    Uses ``viewsets.ViewSet`` so every action is explicitly defined;
    grievances are never created, edited or deleted through this API.
    State and ownership rules live in ``GrievanceWorkflowService``.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        summary="List grievances",
        description=(
            "List every grievance in creation order, optionally filtered by "
            "status. Requires authentication."
        ),
        parameters=[
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Filter by status: Pending, In Progress, Resolved or Rejected.",
            ),
        ],
        responses={
            200: OpenApiResponse(response=GrievanceSerializer(many=True), description="Grievances."),
            400: OpenApiResponse(description="Unknown status filter."),
        },
        tags=["Grievances"],
    )
    def list(self, request: Request) -> Response:
        """GET /api/grievances/"""
        filter_serializer = GrievanceFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        qs = GrievanceQueryService.list_grievances(
            request.user, filter_serializer.validated_data,
        )
        serializer = GrievanceSerializer(qs, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve a grievance",
        responses={
            200: GrievanceSerializer,
            404: OpenApiResponse(description="Grievance not found."),
        },
        tags=["Grievances"],
    )
    def retrieve(self, request: Request, pk: int = None) -> Response:
        """GET /api/grievances/{id}/"""
        grievance = GrievanceQueryService.get_grievance(int(pk))
        return Response(GrievanceSerializer(grievance).data, status=status.HTTP_200_OK)

    # ── Workflow @actions ─────────────────────────────────────────────

    @extend_schema(
        summary="Claim a grievance",
        description=(
            "Take ownership of a Pending grievance. Exactly one of several "
            "concurrent claims succeeds; the others receive 409."
        ),
        request=None,
        responses={
            200: OpenApiResponse(response=GrievanceSerializer, description="Claimed; now In Progress."),
            404: OpenApiResponse(description="Grievance not found."),
            409: OpenApiResponse(description="Already claimed, or already closed."),
        },
        tags=["Grievances – Workflow"],
    )
    @action(detail=True, methods=["post", "patch"], url_path="claim")
    def claim(self, request: Request, pk: int = None) -> Response:
        """POST|PATCH /api/grievances/{id}/claim/"""
        grievance = GrievanceWorkflowService.claim(int(pk), request.user)
        return Response(GrievanceSerializer(grievance).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Resolve or reject a grievance",
        description=(
            "Close an In Progress grievance you are handling, with remarks. "
            "The status must be 'Resolved' or 'Rejected'."
        ),
        request=ResolveGrievanceSerializer,
        responses={
            200: OpenApiResponse(response=GrievanceSerializer, description="Grievance closed."),
            400: OpenApiResponse(description="Blank remarks or invalid status."),
            403: OpenApiResponse(description="Handled by another officer."),
            404: OpenApiResponse(description="Grievance not found."),
            409: OpenApiResponse(description="Grievance is not In Progress."),
        },
        tags=["Grievances – Workflow"],
    )
    @action(detail=True, methods=["post", "patch"], url_path="resolve")
    def resolve(self, request: Request, pk: int = None) -> Response:
        """POST|PATCH /api/grievances/{id}/resolve/"""
        serializer = ResolveGrievanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grievance = GrievanceWorkflowService.resolve(
            int(pk),
            request.user,
            remarks=serializer.validated_data["remarks"],
            final_status=serializer.validated_data["status"],
        )
        return Response(GrievanceSerializer(grievance).data, status=status.HTTP_200_OK)


class GrievanceStatusLogViewSet(viewsets.ViewSet):
    """
    Nested, read-only audit trail:
    ``/api/grievances/{grievance_pk}/status-log/``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Grievance status audit log",
        description="Every status transition of the grievance, newest first.",
        responses={
            200: OpenApiResponse(
                response=GrievanceStatusLogSerializer(many=True),
                description="Status transitions, newest first.",
            ),
            404: OpenApiResponse(description="Grievance not found."),
        },
        tags=["Grievances"],
    )
    def list(self, request: Request, grievance_pk: int = None) -> Response:
        """GET /api/grievances/{grievance_pk}/status-log/"""
        logs = GrievanceQueryService.get_status_log(int(grievance_pk))
        serializer = GrievanceStatusLogSerializer(logs, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)
