"""
Subscription queries and their snapshots.

A subscription query names a live view of server state. Each one is bound
to exactly one topic (see realtime.topics); whenever that topic is
published the consumer recomputes the snapshot and pushes it wholesale.

Queries:
    profile:{user_id}                  Profile of any active user
    friends                            Caller's friend list
    friend_requests                    Pending requests received by the caller
    conversations                      Caller's conversation list with summaries
    tail:{conversation_id}             Full message log, oldest first
    recent:{conversation_id}:{limit}   Newest `limit` messages, newest first

Authorization uses the same rules as the REST API and is checked again on
every snapshot, so a member removed from a group stops receiving its log.

Usage:
    from realtime.snapshots import SnapshotService

    result = SnapshotService.parse("tail:" + cid, user)
    if result:
        data = SnapshotService.snapshot(result.data, user).data
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from authentication.serializers import ProfileSerializer, PublicProfileSerializer
from authentication.services import IdentityService
from chat.serializers import ConversationSummarySerializer, MessageSerializer
from chat.services import ConversationService, MessageService
from core.exceptions import ErrorCode
from core.helpers import parse_uuid
from core.services import BaseService, ServiceResult
from realtime.topics import (
    conversation_topic,
    conversations_topic,
    friends_topic,
    profile_topic,
    requests_topic,
)
from social.serializers import FriendRequestSerializer, FriendSerializer
from social.services import FriendshipService

if TYPE_CHECKING:
    from authentication.models import User

PROFILE = "profile"
FRIENDS = "friends"
FRIEND_REQUESTS = "friend_requests"
CONVERSATIONS = "conversations"
TAIL = "tail"
RECENT = "recent"


@dataclass(frozen=True)
class Query:
    """
    A parsed subscription query.

    Attributes:
        text: Query as sent by the client (echoed in every snapshot)
        kind: One of the query kinds above
        topic: Topic whose publication triggers a new snapshot
        subject: User id (profile) or conversation id (tail, recent)
        limit: Window size of a recent query
    """

    text: str
    kind: str
    topic: str
    subject: str | None = None
    limit: int | None = None


def _invalid(text) -> ServiceResult:
    return ServiceResult.failure(
        f"Unknown subscription query: {text!r}",
        error_code=ErrorCode.VALIDATION_ERROR,
    )


class SnapshotService(BaseService):
    """Parse, authorize and evaluate subscription queries."""

    @classmethod
    def parse(cls, text, user: User) -> ServiceResult[Query]:
        """
        Parse a query string and check that user may subscribe to it.

        Error codes:
            VALIDATION_ERROR: not a known query shape
            NOT_FOUND: unknown user or conversation
            FORBIDDEN: conversation the user cannot read
        """
        if not isinstance(text, str) or not text:
            return _invalid(text)

        if text == FRIENDS:
            return ServiceResult.success(Query(text, FRIENDS, friends_topic(user.pk)))
        if text == FRIEND_REQUESTS:
            return ServiceResult.success(
                Query(text, FRIEND_REQUESTS, requests_topic(user.pk))
            )
        if text == CONVERSATIONS:
            return ServiceResult.success(
                Query(text, CONVERSATIONS, conversations_topic(user.pk))
            )

        kind, _, rest = text.partition(":")

        if kind == PROFILE:
            uid = parse_uuid(rest)
            if uid is None:
                return ServiceResult.failure(
                    "User not found", error_code=ErrorCode.NOT_FOUND
                )
            query = Query(text, PROFILE, profile_topic(uid), subject=str(uid))
        elif kind == TAIL and rest:
            query = Query(text, TAIL, conversation_topic(rest), subject=rest)
        elif kind == RECENT and ":" in rest:
            # Conversation ids never contain ":"; the limit is the last part.
            conversation_id, _, raw_limit = rest.rpartition(":")
            try:
                limit = int(raw_limit)
            except ValueError:
                return _invalid(text)
            query = Query(
                text,
                RECENT,
                conversation_topic(conversation_id),
                subject=conversation_id,
                limit=MessageService.clamp_window(limit),
            )
        else:
            return _invalid(text)

        access = cls._authorize(query, user)
        if not access:
            return access
        return ServiceResult.success(query)

    @classmethod
    def _authorize(cls, query: Query, user: User) -> ServiceResult:
        if query.kind == PROFILE:
            return IdentityService.get_profile(query.subject)
        if query.kind in (TAIL, RECENT):
            return ConversationService.check_read(query.subject, user)
        return ServiceResult.success(None)

    @classmethod
    def snapshot(cls, query: Query, user: User) -> ServiceResult[Any]:
        """
        Current state of a query, JSON-serializable.

        Authorization is re-checked; a failure here means the subscription
        is no longer valid (e.g. the user left the group).
        """
        if query.kind == FRIENDS:
            edges = FriendshipService.list_friends(user)
            return ServiceResult.success(FriendSerializer(edges, many=True).data)

        if query.kind == FRIEND_REQUESTS:
            requests = FriendshipService.list_requests(user)
            return ServiceResult.success(FriendRequestSerializer(requests, many=True).data)

        if query.kind == CONVERSATIONS:
            summaries = ConversationService.list_conversations(user)
            return ServiceResult.success(
                ConversationSummarySerializer(summaries, many=True).data
            )

        access = cls._authorize(query, user)
        if not access:
            return access

        if query.kind == PROFILE:
            profile = access.data
            serializer_class = (
                ProfileSerializer if profile.user_id == user.pk else PublicProfileSerializer
            )
            return ServiceResult.success(serializer_class(profile).data)

        if query.kind == TAIL:
            messages = MessageService.tail(query.subject)
        else:
            messages = MessageService.recent(query.subject, query.limit)
        return ServiceResult.success(MessageSerializer(messages, many=True).data)
