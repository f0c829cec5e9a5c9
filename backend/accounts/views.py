"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``LoginView`` — POST /auth/login/
- ``MeView``    — GET / PATCH /me/
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    LoginRequestSerializer,
    OfficerProfileSerializer,
    OfficerProfileUpdateSerializer,
    TokenResponseSerializer,
)
from .services import AuthenticationService, CurrentOfficerService

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class LoginView(APIView):
    """
    POST /api/officer/auth/login/

    Public endpoint.  Authenticates an officer by mobile number and
    password and issues a bearer credential.

    Request body  → ``LoginRequestSerializer``
    Response body → ``TokenResponseSerializer`` (200 OK)

    Flow:
        1. Validate input via ``LoginRequestSerializer``.
        2. Delegate to ``AuthenticationService.authenticate()``.
        3. If authentication fails, return 401 with a uniform message.
        4. Generate JWT tokens via ``AuthenticationService.generate_tokens()``.
        5. Return tokens + officer profile.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request: Request) -> str:
        # Keeps failed logins at 401 even though no authenticator runs here.
        return 'Bearer realm="api"'

    @extend_schema(
        summary="Officer login",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=TokenResponseSerializer, description="Authenticated."),
            401: OpenApiResponse(description="Invalid mobile number or password."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        officer = AuthenticationService.authenticate(
            mobile=serializer.validated_data["mobile"],
            password=serializer.validated_data["password"],
            request=request,
        )
        if officer is None:
            logger.info("Failed officer login attempt.")
            raise AuthenticationFailed("Invalid mobile number or password.")

        tokens = AuthenticationService.generate_tokens(officer)
        payload = {
            **tokens,
            "officer": OfficerProfileSerializer(
                officer, context={"request": request},
            ).data,
        }
        logger.info("Officer %s logged in.", officer.pk)
        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current Officer ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET   /api/officer/me/ → Retrieve the authenticated officer's profile.
    PATCH /api/officer/me/ → Partially update own name, email, password
                             or profile photo.

    GET Response   → ``OfficerProfileSerializer``
    PATCH Request  → ``OfficerProfileUpdateSerializer`` (JSON or multipart)
    PATCH Response → ``OfficerProfileSerializer``
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @extend_schema(
        summary="Current officer profile",
        responses={200: OfficerProfileSerializer},
        tags=["Officer"],
    )
    def get(self, request: Request) -> Response:
        officer = CurrentOfficerService.get_profile(request.user)
        data = OfficerProfileSerializer(officer, context={"request": request}).data
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update own profile",
        request=OfficerProfileUpdateSerializer,
        responses={
            200: OfficerProfileSerializer,
            400: OpenApiResponse(description="Validation error."),
        },
        tags=["Officer"],
    )
    def patch(self, request: Request) -> Response:
        serializer = OfficerProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        officer = CurrentOfficerService.update_profile(
            request.user, serializer.validated_data,
        )
        data = OfficerProfileSerializer(officer, context={"request": request}).data
        return Response(data, status=status.HTTP_200_OK)
