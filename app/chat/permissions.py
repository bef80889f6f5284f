"""
Permission classes for the chat API.

Conversation access is decided by ConversationService so REST, the realtime
consumer and the media store apply the same rules:

    - Direct conversation: its two parties
    - Group conversation: current members

Failures are raised as application errors so the response carries the
same error codes as the services (NOT_FOUND vs FORBIDDEN).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.services import ConversationService
from core.exceptions import ErrorCode, NotFoundError, PermissionDeniedError

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class CanReadConversation(permissions.BasePermission):
    """
    Allows access only to users who can read the conversation in the URL.

    On success the parsed ConversationRef is stored on view.conversation.
    """

    message = "You cannot access this conversation."

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not request.user or not request.user.is_authenticated:
            return False

        result = ConversationService.check_read(
            view.kwargs.get("conversation_id"), request.user
        )
        if not result:
            if result.error_code == ErrorCode.NOT_FOUND:
                raise NotFoundError(result.error)
            raise PermissionDeniedError(result.error)

        view.conversation = result.data
        return True
