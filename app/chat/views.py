"""
ViewSets for the conversation registry and message log API.

URL Structure:
    /api/v1/chat/conversations/                               GET
    /api/v1/chat/conversations/{id}/seen/                     POST
    /api/v1/chat/conversations/{id}/messages/                 GET, POST
    /api/v1/chat/conversations/{id}/messages/{pk}/seen/       POST
    /api/v1/chat/groups/                                      POST
    /api/v1/chat/groups/{id}/                                 GET, PATCH
    /api/v1/chat/groups/{id}/members/                         POST
    /api/v1/chat/groups/{id}/members/{user_id}/               DELETE
    /api/v1/chat/groups/{id}/leave/                           POST

Conversation ids are either a group id or a direct conversation id
("<user id>_<user id>", sorted). Views only translate HTTP; every rule
lives in chat.services.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.models import Group, Message
from chat.pagination import MessageCursorPagination
from chat.permissions import CanReadConversation
from chat.serializers import (
    ConversationSummarySerializer,
    GroupCreateSerializer,
    GroupSerializer,
    GroupUpdateSerializer,
    MemberAddSerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from chat.services import ConversationService, GroupService, MessageService


def _failure_response(result) -> Response:
    return Response(result.to_response(), status=result.status_code)


class ConversationViewSet(viewsets.GenericViewSet):
    """
    Conversations of the current user.

    list:
        Groups and direct conversations with friends, most recently active
        first, each with its last message and unread count.

    seen:
        Mark every message from others in the conversation as seen.
    """

    serializer_class = ConversationSummarySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = "[^/]+"

    @extend_schema(
        operation_id="list_conversations",
        summary="List conversations",
        tags=["Chat - Conversations"],
        responses={200: ConversationSummarySerializer(many=True)},
    )
    def list(self, request):
        summaries = ConversationService.list_conversations(request.user)
        return Response(ConversationSummarySerializer(summaries, many=True).data)

    @extend_schema(
        operation_id="mark_conversation_seen",
        summary="Mark conversation seen",
        tags=["Chat - Conversations"],
        request=None,
        responses={
            200: OpenApiResponse(description='{"updated": <count>}'),
            403: OpenApiResponse(description="FORBIDDEN"),
            404: OpenApiResponse(description="NOT_FOUND"),
        },
    )
    @action(detail=True, methods=["post"])
    def seen(self, request, pk=None):
        result = MessageService.mark_conversation_seen(pk, request.user)
        if not result.success:
            return _failure_response(result)
        return Response({"updated": result.data})


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="Message history",
        description="Oldest first, cursor paginated on (timestamp, sequence).",
        tags=["Chat - Messages"],
    ),
    create=extend_schema(
        operation_id="send_message",
        summary="Send message",
        tags=["Chat - Messages"],
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            400: OpenApiResponse(description="EMPTY_MESSAGE or VALIDATION_ERROR"),
            403: OpenApiResponse(description="FORBIDDEN"),
            404: OpenApiResponse(description="NOT_FOUND"),
        },
    ),
)
class MessageViewSet(
    mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet
):
    """
    Message log of one conversation.

    The conversation id comes from the URL; CanReadConversation resolves it
    and rejects users who cannot read it.
    """

    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated, CanReadConversation]
    pagination_class = MessageCursorPagination

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Message.objects.none()
        return MessageService.tail(self.conversation.conversation_id)

    def create(self, request, conversation_id=None):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send(
            self.conversation.conversation_id,
            request.user,
            text=serializer.validated_data.get("text"),
            image_url=serializer.validated_data.get("image_url"),
        )
        if not result.success:
            return _failure_response(result)

        return Response(MessageSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="mark_message_seen",
        summary="Mark message seen",
        description=(
            "Idempotent. Messages that are missing, already seen, sent by the "
            "caller or system messages are left unchanged."
        ),
        tags=["Chat - Messages"],
        request=None,
        responses={200: OpenApiResponse(description='{"updated": true|false}')},
    )
    @action(detail=True, methods=["post"])
    def seen(self, request, conversation_id=None, pk=None):
        result = MessageService.mark_seen(
            self.conversation.conversation_id, pk, request.user
        )
        if not result.success:
            return _failure_response(result)
        return Response({"updated": result.data})


@extend_schema_view(
    create=extend_schema(
        operation_id="create_group",
        summary="Create group",
        tags=["Chat - Groups"],
        request=GroupCreateSerializer,
        responses={
            201: GroupSerializer,
            400: OpenApiResponse(description="VALIDATION_ERROR"),
            404: OpenApiResponse(description="NOT_FOUND"),
        },
    ),
    retrieve=extend_schema(
        operation_id="get_group",
        summary="Group detail",
        tags=["Chat - Groups"],
    ),
    partial_update=extend_schema(
        operation_id="rename_group",
        summary="Rename group",
        description="Only the creator may rename the group.",
        tags=["Chat - Groups"],
        request=GroupUpdateSerializer,
        responses={200: GroupSerializer, 403: OpenApiResponse(description="FORBIDDEN")},
    ),
)
class GroupViewSet(viewsets.GenericViewSet):
    """
    Group conversations.

    create:
        Create a group; the caller becomes its creator and admin.

    retrieve:
        Group detail with member ids (members only).

    partial_update:
        Rename (creator only).

    members / remove_member / leave:
        Membership changes, each recorded as a system message.
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    queryset = Group.objects.none()
    lookup_value_regex = "[^/]+"

    def _group_response(self, result, status_code=status.HTTP_200_OK) -> Response:
        if not result.success:
            return _failure_response(result)
        group = Group.objects.prefetch_related("members").get(pk=result.data.pk)
        return Response(GroupSerializer(group).data, status=status_code)

    def create(self, request):
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = GroupService.create_group(
            request.user,
            serializer.validated_data["name"],
            member_ids=serializer.validated_data["member_ids"],
        )
        return self._group_response(result, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        result = GroupService.get_group(pk, request.user)
        if not result.success:
            return _failure_response(result)
        return Response(GroupSerializer(result.data).data)

    def partial_update(self, request, pk=None):
        serializer = GroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = GroupService.rename_group(
            pk, request.user, serializer.validated_data["name"]
        )
        return self._group_response(result)

    @extend_schema(
        operation_id="add_group_member",
        summary="Add member",
        tags=["Chat - Groups"],
        request=MemberAddSerializer,
        responses={
            200: GroupSerializer,
            403: OpenApiResponse(description="FORBIDDEN"),
            404: OpenApiResponse(description="NOT_FOUND"),
            409: OpenApiResponse(description="ALREADY_EXISTS"),
        },
    )
    @action(detail=True, methods=["post"])
    def members(self, request, pk=None):
        serializer = MemberAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = GroupService.add_member(
            pk, request.user, serializer.validated_data["user_id"]
        )
        return self._group_response(result)

    @extend_schema(
        operation_id="remove_group_member",
        summary="Remove member",
        description="Creator only. The creator cannot be removed.",
        tags=["Chat - Groups"],
        request=None,
        responses={
            200: GroupSerializer,
            400: OpenApiResponse(description="INVALID_OPERATION"),
            403: OpenApiResponse(description="FORBIDDEN"),
            404: OpenApiResponse(description="NOT_FOUND"),
        },
    )
    @action(
        detail=True,
        methods=["delete"],
        url_path=r"members/(?P<user_id>[^/]+)",
        url_name="remove-member",
    )
    def remove_member(self, request, pk=None, user_id=None):
        result = GroupService.remove_member(pk, request.user, user_id)
        return self._group_response(result)

    @extend_schema(
        operation_id="leave_group",
        summary="Leave group",
        tags=["Chat - Groups"],
        request=None,
        responses={204: None, 404: OpenApiResponse(description="NOT_FOUND")},
    )
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        result = GroupService.leave_group(pk, request.user)
        if not result.success:
            return _failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
