"""
Identity views.

This module provides API views for:
- Account creation and credential login (JWT pair)
- Own profile read and partial update
- Public profile lookup by friend code

Related files:
    - serializers.py: Request/response serialization
    - services.py: IdentityService
    - urls.py: URL routing

Note:
    Token refresh is simplejwt's TokenRefreshView, mounted in urls.py.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import (
    LoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    PublicProfileSerializer,
    RegisterSerializer,
    SessionSerializer,
)
from authentication.services import IdentityService


class RegisterView(APIView):
    """
    Create an account and return a session.

    URL: POST /api/v1/auth/register/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Create account",
        description=(
            "Create an account with email and password. The profile starts "
            "incomplete (profile_completed=false) until a display name is set."
        ),
        tags=["Auth"],
        request=RegisterSerializer,
        responses={
            201: SessionSerializer,
            400: OpenApiResponse(description="VALIDATION_ERROR or WEAK_CREDENTIAL"),
            409: OpenApiResponse(description="ALREADY_EXISTS"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]
        password = serializer.validated_data["password"]

        result = IdentityService.create_account(email, password)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        session = IdentityService.authenticate(email, password)
        if not session.success:
            return Response(session.to_response(), status=session.status_code)

        return Response(session.data.to_dict(), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Exchange email and password for a JWT pair.

    URL: POST /api/v1/auth/login/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        tags=["Auth"],
        request=LoginSerializer,
        responses={
            200: SessionSerializer,
            401: OpenApiResponse(description="INVALID_CREDENTIAL"),
        },
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = IdentityService.authenticate(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        return Response(result.data.to_dict())


class ProfileView(APIView):
    """
    Own profile.

    GET: Retrieve current user's profile
    PATCH: Partial update (display_name, photo_url)

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user's profile",
        description="Retrieve profile data including completion status.",
        tags=["Auth - Profile"],
        responses={200: ProfileSerializer},
    )
    def get(self, request):
        result = IdentityService.get_profile(request.user.pk)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(ProfileSerializer(result.data).data)

    @extend_schema(
        summary="Partially update profile",
        description=(
            "Only the supplied fields change. Send photo_url=null to remove "
            "the photo. Setting display_name completes the profile."
        ),
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={
            200: ProfileSerializer,
            400: OpenApiResponse(description="VALIDATION_ERROR"),
        },
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        result = IdentityService.update_profile(
            request.user, **serializer.validated_data
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(ProfileSerializer(result.data).data)


class UserProfileView(APIView):
    """
    Public profile lookup by friend code.

    URL: GET /api/v1/auth/users/{id}/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Look up a user by friend code",
        tags=["Auth - Profile"],
        responses={
            200: PublicProfileSerializer,
            404: OpenApiResponse(description="NOT_FOUND"),
        },
    )
    def get(self, request, user_id):
        result = IdentityService.get_profile(user_id)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(PublicProfileSerializer(result.data).data)
