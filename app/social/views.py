"""
ViewSets for the relationship graph API.

URL Structure:
    /api/v1/social/friends/                 GET
    /api/v1/social/friends/{friend_id}/     DELETE
    /api/v1/social/requests/                GET, POST
    /api/v1/social/requests/{id}/accept/    POST
    /api/v1/social/requests/{id}/reject/    POST

All writes go through FriendshipService; views only translate HTTP.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from social.serializers import (
    FriendRequestCreateSerializer,
    FriendRequestSerializer,
    FriendSerializer,
)
from social.services import FriendshipService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_friends",
        summary="List friends",
        tags=["Social - Friends"],
    ),
    destroy=extend_schema(
        operation_id="remove_friend",
        summary="Remove friend",
        description="Deletes both directions of the friendship. Idempotent.",
        tags=["Social - Friends"],
        responses={204: None},
    ),
)
class FriendViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Friend list of the current user.

    list:
        Friends ordered by snapshot display name.

    destroy:
        Remove a friend by friend code; succeeds even if already removed.
    """

    serializer_class = FriendSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        return FriendshipService.list_friends(self.request.user)

    def destroy(self, request, pk=None):
        FriendshipService.remove_friend(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_friend_requests",
        summary="List incoming friend requests",
        tags=["Social - Requests"],
    ),
    create=extend_schema(
        operation_id="send_friend_request",
        summary="Send friend request",
        tags=["Social - Requests"],
        request=FriendRequestCreateSerializer,
        responses={
            201: FriendRequestSerializer,
            400: OpenApiResponse(description="SELF_REQUEST"),
            404: OpenApiResponse(description="NOT_FOUND"),
            409: OpenApiResponse(description="ALREADY_EXISTS"),
        },
    ),
)
class FriendRequestViewSet(
    mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet
):
    """
    Friend requests stored under the current user.

    list:
        Incoming pending requests, newest first.

    create:
        Send a request to another user by friend code.

    accept / reject:
        Resolve an incoming request.
    """

    serializer_class = FriendRequestSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        return FriendshipService.list_requests(self.request.user)

    def create(self, request):
        serializer = FriendRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = FriendshipService.send_request(
            sender=request.user,
            recipient_id=serializer.validated_data["to"],
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        return Response(
            FriendRequestSerializer(result.data).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="accept_friend_request",
        summary="Accept friend request",
        tags=["Social - Requests"],
        request=None,
        responses={200: FriendSerializer, 404: OpenApiResponse(description="NOT_FOUND")},
    )
    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        """Accept: both users become friends and the request disappears."""
        result = FriendshipService.resolve_request(pk, request.user, accept=True)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(FriendSerializer(result.data).data)

    @extend_schema(
        operation_id="reject_friend_request",
        summary="Reject friend request",
        tags=["Social - Requests"],
        request=None,
        responses={204: None, 404: OpenApiResponse(description="NOT_FOUND")},
    )
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        """Reject: the request is deleted, nothing else changes."""
        result = FriendshipService.resolve_request(pk, request.user, accept=False)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)
