"""
Conversation registry and message log service layer.

Services:
    ConversationService: Conversation ids, access rules, conversation list
    GroupService: Group lifecycle and membership (creator is the only admin)
    MessageService: Append, read windows, seen flags

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Every write runs in one transaction together with its system message
      and publishes the affected topics after commit
    - Group membership writes lock the Group row, so concurrent membership
      changes of one group are applied one after the other

Access rules:
    - Direct conversation: readable by its two parties; posting also
      requires that they are friends.
    - Group conversation: readable and writable by current members.

Usage:
    from chat.services import GroupService, MessageService

    result = GroupService.create_group(alice, "Trip", member_ids=[bob.pk])
    group = result.data

    MessageService.send(group.conversation_id, alice, text="Hello everyone!")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from django.utils import timezone

from authentication.services import IdentityService
from chat.constants import GROUP_CONFIG, MESSAGE_CONFIG
from chat.identifiers import ConversationRef, direct_conversation_id, parse_conversation_id
from chat.models import (
    ConversationLog,
    Group,
    GroupMember,
    MembershipAction,
    MembershipEvent,
    Message,
    MessageType,
    SystemMessageEvent,
)
from core.decorators import retry_transient
from core.exceptions import ErrorCode
from core.helpers import parse_uuid
from core.services import BaseService, ServiceResult
from realtime.publisher import publish
from realtime.topics import conversation_topic, conversations_topic
from social.services import FriendshipService

if TYPE_CHECKING:
    import uuid

    from django.db.models import QuerySet

    from authentication.models import User


# =============================================================================
# ConversationService
# =============================================================================


@dataclass
class ConversationSummary:
    """One row of a user's conversation list."""

    conversation_id: str
    kind: str
    name: str
    photo_url: str
    other_user_id: uuid.UUID | None
    last_message: Message | None
    unread_count: int
    updated_at: datetime


class ConversationService(BaseService):
    """
    Conversation ids and access rules shared by REST views, the realtime
    consumer and the media store.
    """

    DIRECT = "direct"
    GROUP = "group"

    @classmethod
    def resolve(cls, conversation_id) -> ServiceResult[ConversationRef]:
        """
        Parse a conversation id and check that the conversation exists.

        Error codes:
            NOT_FOUND: malformed id, or no group with that id
        """
        ref = parse_conversation_id(conversation_id)
        if ref is None:
            return ServiceResult.failure(
                "Conversation not found", error_code=ErrorCode.NOT_FOUND
            )
        if ref.is_group and not Group.objects.filter(pk=ref.group_id).exists():
            return ServiceResult.failure(
                "Group not found", error_code=ErrorCode.NOT_FOUND
            )
        return ServiceResult.success(ref)

    @classmethod
    def check_read(cls, conversation_id, user: User) -> ServiceResult[ConversationRef]:
        """
        Check that user may read the conversation.

        Error codes:
            NOT_FOUND: malformed id or unknown group
            FORBIDDEN: not a party (direct) or not a member (group)
        """
        result = cls.resolve(conversation_id)
        if not result:
            return result

        ref = result.data
        if ref.is_direct:
            allowed = user.pk in ref.participants
        else:
            allowed = GroupMember.objects.filter(
                group_id=ref.group_id, user_id=user.pk
            ).exists()

        if not allowed:
            return ServiceResult.failure(
                "You cannot access this conversation",
                error_code=ErrorCode.FORBIDDEN,
            )
        return result

    @classmethod
    def check_post(cls, conversation_id, user: User) -> ServiceResult[ConversationRef]:
        """
        Check that user may append to the conversation.

        Same as check_read, plus direct parties must be friends.
        """
        result = cls.check_read(conversation_id, user)
        if not result:
            return result

        ref = result.data
        if ref.is_direct and not FriendshipService.are_friends(
            user.pk, ref.other_participant(user.pk)
        ):
            return ServiceResult.failure(
                "You can only message your friends",
                error_code=ErrorCode.FORBIDDEN,
            )
        return result

    @classmethod
    def participant_ids(cls, ref: ConversationRef) -> list:
        """Users whose conversation list shows this conversation."""
        if ref.is_direct:
            return list(ref.participants)
        return list(
            GroupMember.objects.filter(group_id=ref.group_id).values_list(
                "user_id", flat=True
            )
        )

    @classmethod
    def topics_for(cls, ref: ConversationRef, *extra_user_ids) -> list[str]:
        """Message log topic plus the conversation list topic of every participant."""
        user_ids = [*cls.participant_ids(ref), *extra_user_ids]
        return [conversation_topic(ref.conversation_id)] + [
            conversations_topic(uid) for uid in user_ids
        ]

    @classmethod
    def list_conversations(cls, user: User) -> list[ConversationSummary]:
        """
        The user's groups and direct conversations with each friend.

        Each summary carries the last message and the unread count computed
        from the recent window. Most recently active first.
        """
        summaries = []

        groups = Group.objects.filter(members__user=user).order_by("-created_at")
        for group in groups:
            summaries.append(
                cls._summarize(
                    conversation_id=group.conversation_id,
                    kind=cls.GROUP,
                    name=group.name,
                    photo_url=group.photo_url,
                    other_user_id=None,
                    viewer=user,
                    created_at=group.created_at,
                )
            )

        for edge in FriendshipService.list_friends(user):
            summaries.append(
                cls._summarize(
                    conversation_id=direct_conversation_id(user.pk, edge.friend_id),
                    kind=cls.DIRECT,
                    name=edge.display_name,
                    photo_url=edge.photo_url,
                    other_user_id=edge.friend_id,
                    viewer=user,
                    created_at=edge.created_at,
                )
            )

        summaries.sort(key=lambda s: s.updated_at, reverse=True)
        return summaries

    @classmethod
    def _summarize(cls, *, conversation_id, kind, name, photo_url, other_user_id,
                   viewer, created_at) -> ConversationSummary:
        recent = MessageService.recent(conversation_id)
        last_message = recent[0] if recent else None
        return ConversationSummary(
            conversation_id=conversation_id,
            kind=kind,
            name=name,
            photo_url=photo_url,
            other_user_id=other_user_id,
            last_message=last_message,
            unread_count=MessageService.count_unread(
                recent, viewer.pk, is_group=kind == cls.GROUP
            ),
            updated_at=last_message.timestamp if last_message else created_at,
        )


# =============================================================================
# GroupService
# =============================================================================


class GroupService(BaseService):
    """
    Group lifecycle and membership.

    Rules:
        - create: the creator is always a member
        - rename: creator only
        - add member: any member
        - remove member: creator only, and never the creator
        - leave: any member, the creator included (created_by is kept)

    Every change appends a MembershipEvent (membership only), updates the
    GroupMember projection and appends a system message, atomically.
    """

    @classmethod
    def _clean_name(cls, name) -> tuple[str, ServiceResult | None]:
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            return name, ServiceResult.failure(
                "Group name is required",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"name": ["This field may not be blank."]},
            )
        if len(name) > GROUP_CONFIG.MAX_NAME_LENGTH:
            return name, ServiceResult.failure(
                "Group name is too long",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={
                    "name": [
                        f"Ensure this field has no more than "
                        f"{GROUP_CONFIG.MAX_NAME_LENGTH} characters."
                    ]
                },
            )
        return name, None

    @classmethod
    def _lock_group(cls, group_id) -> Group | None:
        """Fetch and lock a group row. Must run inside a transaction."""
        group_uuid = parse_uuid(group_id)
        if group_uuid is None:
            return None
        return Group.objects.select_for_update().filter(pk=group_uuid).first()

    @classmethod
    def _is_member(cls, group: Group, user_id) -> bool:
        return GroupMember.objects.filter(group=group, user_id=user_id).exists()

    @classmethod
    def _record(cls, group: Group, user_id, action: str, actor: User) -> None:
        """Append a membership event and apply it to the projection."""
        MembershipEvent.objects.create(
            group=group, user_id=user_id, action=action, actor=actor
        )
        if action == MembershipAction.ADD:
            GroupMember.objects.create(group=group, user_id=user_id)
        else:
            GroupMember.objects.filter(group=group, user_id=user_id).delete()

    @classmethod
    def _system_message(
        cls, group: Group, actor: User, event: str, text: str, **data
    ) -> Message:
        return MessageService.append(
            group.conversation_id,
            sender=actor,
            message_type=MessageType.SYSTEM,
            text=text,
            event={"event": event, "actor_id": str(actor.pk), **data},
        )

    @classmethod
    def _publish(cls, group: Group, *extra_user_ids) -> None:
        ref = ConversationRef(conversation_id=group.conversation_id, group_id=group.pk)
        publish(*ConversationService.topics_for(ref, *extra_user_ids))

    @classmethod
    @retry_transient()
    def create_group(
        cls,
        creator: User,
        name: str,
        member_ids: list | None = None,
    ) -> ServiceResult[Group]:
        """
        Create a group conversation.

        The creator is added if absent from member_ids. A group_created
        system message is written, then one member_added message per
        initial member other than the creator.

        Args:
            creator: User creating the group (becomes its admin)
            name: Required group name (max 100 characters)
            member_ids: Friend codes of the initial members

        Returns:
            ServiceResult with the new Group

        Error codes:
            VALIDATION_ERROR: blank or too long name, too many members
            NOT_FOUND: an initial member does not exist
        """
        name, failure = cls._clean_name(name)
        if failure:
            return failure

        member_ids = list(member_ids or [])
        if len(member_ids) > GROUP_CONFIG.MAX_INITIAL_MEMBERS:
            return ServiceResult.failure(
                "Too many initial members",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"member_ids": [
                    f"At most {GROUP_CONFIG.MAX_INITIAL_MEMBERS} members."
                ]},
            )

        parsed = [parse_uuid(m) for m in member_ids]
        users = IdentityService.get_users([p for p in parsed if p])
        unknown = [str(m) for m, p in zip(member_ids, parsed) if p not in users]
        if unknown:
            return ServiceResult.failure(
                "User not found",
                error_code=ErrorCode.NOT_FOUND,
                errors={"member_ids": unknown},
            )

        # Keep caller order, drop duplicates and the creator
        members = [
            users[uid] for uid in dict.fromkeys(parsed) if uid != creator.pk
        ]
        creator_name = creator.get_short_name()

        with cls.atomic():
            group = Group.objects.create(name=name, created_by=creator)
            cls._record(group, creator.pk, MembershipAction.ADD, creator)
            cls._system_message(
                group,
                creator,
                SystemMessageEvent.GROUP_CREATED,
                f'{creator_name} created the group "{name}"',
                name=name,
            )

            for member in members:
                cls._record(group, member.pk, MembershipAction.ADD, creator)
                cls._system_message(
                    group,
                    creator,
                    SystemMessageEvent.MEMBER_ADDED,
                    f"{creator_name} added {member.get_short_name()}",
                    target_id=str(member.pk),
                )

            cls._publish(group)

        cls.get_logger().info(
            f"Created group {group.pk} with {1 + len(members)} members"
        )
        return ServiceResult.success(group)

    @classmethod
    @retry_transient()
    def rename_group(cls, group_id, actor: User, name: str) -> ServiceResult[Group]:
        """
        Rename a group. Only the creator may rename, while still a member.

        Renaming to the current name succeeds without a system message.

        Error codes:
            VALIDATION_ERROR: blank or too long name
            NOT_FOUND: no such group
            FORBIDDEN: actor is not the creator
        """
        name, failure = cls._clean_name(name)
        if failure:
            return failure

        with cls.atomic():
            group = cls._lock_group(group_id)
            if group is None:
                return ServiceResult.failure(
                    "Group not found", error_code=ErrorCode.NOT_FOUND
                )

            if group.created_by_id != actor.pk or not cls._is_member(group, actor.pk):
                return ServiceResult.failure(
                    "Only the group creator can rename the group",
                    error_code=ErrorCode.FORBIDDEN,
                )

            if group.name == name:
                return ServiceResult.success(group)

            old_name = group.name
            group.name = name
            group.save(update_fields=["name", "updated_at"])
            cls._system_message(
                group,
                actor,
                SystemMessageEvent.GROUP_RENAMED,
                f'{actor.get_short_name()} renamed the group to "{name}"',
                old_name=old_name,
                name=name,
            )
            cls._publish(group)

        cls.get_logger().info(f"Renamed group {group.pk}")
        return ServiceResult.success(group)

    @classmethod
    @retry_transient()
    def add_member(cls, group_id, actor: User, target_id) -> ServiceResult[Group]:
        """
        Add a user to a group.

        Error codes:
            NOT_FOUND: no such group, or no such target user
            FORBIDDEN: actor is not a member
            ALREADY_EXISTS: target is already a member
        """
        with cls.atomic():
            group = cls._lock_group(group_id)
            if group is None:
                return ServiceResult.failure(
                    "Group not found", error_code=ErrorCode.NOT_FOUND
                )

            if not cls._is_member(group, actor.pk):
                return ServiceResult.failure(
                    "Only members can add people to this group",
                    error_code=ErrorCode.FORBIDDEN,
                )

            target_uuid = parse_uuid(target_id)
            target = IdentityService.get_users([target_uuid]).get(target_uuid)
            if target is None:
                return ServiceResult.failure(
                    "User not found", error_code=ErrorCode.NOT_FOUND
                )

            if cls._is_member(group, target.pk):
                return ServiceResult.failure(
                    "User is already a member of this group",
                    error_code=ErrorCode.ALREADY_EXISTS,
                )

            cls._record(group, target.pk, MembershipAction.ADD, actor)
            cls._system_message(
                group,
                actor,
                SystemMessageEvent.MEMBER_ADDED,
                f"{actor.get_short_name()} added {target.get_short_name()}",
                target_id=str(target.pk),
            )
            cls._publish(group)

        cls.get_logger().info(f"Group {group.pk}: {actor.pk} added {target.pk}")
        return ServiceResult.success(group)

    @classmethod
    @retry_transient()
    def remove_member(cls, group_id, actor: User, target_id) -> ServiceResult[Group]:
        """
        Remove a member from a group.

        The creator can never be removed (they may leave instead); this is
        checked before the actor's rights.

        Error codes:
            NOT_FOUND: no such group, or target is not a member
            INVALID_OPERATION: target is the creator
            FORBIDDEN: actor is not the creator (or no longer a member)
        """
        with cls.atomic():
            group = cls._lock_group(group_id)
            if group is None:
                return ServiceResult.failure(
                    "Group not found", error_code=ErrorCode.NOT_FOUND
                )

            target_uuid = parse_uuid(target_id)
            if target_uuid is not None and target_uuid == group.created_by_id:
                return ServiceResult.failure(
                    "The group creator cannot be removed",
                    error_code=ErrorCode.INVALID_OPERATION,
                )

            if group.created_by_id != actor.pk or not cls._is_member(group, actor.pk):
                return ServiceResult.failure(
                    "Only the group creator can remove members",
                    error_code=ErrorCode.FORBIDDEN,
                )

            target = IdentityService.get_users([target_uuid]).get(target_uuid)
            if target is None or not cls._is_member(group, target.pk):
                return ServiceResult.failure(
                    "User is not a member of this group",
                    error_code=ErrorCode.NOT_FOUND,
                )

            cls._record(group, target.pk, MembershipAction.REMOVE, actor)
            cls._system_message(
                group,
                actor,
                SystemMessageEvent.MEMBER_REMOVED,
                f"{actor.get_short_name()} removed {target.get_short_name()}",
                target_id=str(target.pk),
            )
            cls._publish(group, target.pk)

        cls.get_logger().info(f"Group {group.pk}: {actor.pk} removed {target.pk}")
        return ServiceResult.success(group)

    @classmethod
    @retry_transient()
    def leave_group(cls, group_id, actor: User) -> ServiceResult[Group]:
        """
        Leave a group. The creator may leave too and stays created_by.

        Error codes:
            NOT_FOUND: no such group, or actor is not a member
        """
        with cls.atomic():
            group = cls._lock_group(group_id)
            if group is None or not cls._is_member(group, actor.pk):
                return ServiceResult.failure(
                    "Group not found", error_code=ErrorCode.NOT_FOUND
                )

            cls._record(group, actor.pk, MembershipAction.REMOVE, actor)
            cls._system_message(
                group,
                actor,
                SystemMessageEvent.MEMBER_LEFT,
                f"{actor.get_short_name()} left the group",
            )
            cls._publish(group, actor.pk)

        cls.get_logger().info(f"Group {group.pk}: {actor.pk} left")
        return ServiceResult.success(group)

    @classmethod
    def get_group(cls, group_id, viewer: User) -> ServiceResult[Group]:
        """
        Fetch a group the viewer belongs to.

        Error codes:
            NOT_FOUND: no such group
            FORBIDDEN: viewer is not a member
        """
        group_uuid = parse_uuid(group_id)
        group = (
            Group.objects.prefetch_related("members").filter(pk=group_uuid).first()
            if group_uuid
            else None
        )
        if group is None:
            return ServiceResult.failure(
                "Group not found", error_code=ErrorCode.NOT_FOUND
            )
        if not any(m.user_id == viewer.pk for m in group.members.all()):
            return ServiceResult.failure(
                "You are not a member of this group",
                error_code=ErrorCode.FORBIDDEN,
            )
        return ServiceResult.success(group)

    @classmethod
    def member_ids(cls, group: Group) -> list:
        return [m.user_id for m in group.members.all()]

    @classmethod
    def rebuild_members(cls, group: Group) -> dict[str, int]:
        """
        Recompute the GroupMember projection from the membership log.

        Returns:
            Dict with the number of rows "added" and "removed" to repair
            the projection (both 0 when it was consistent)
        """
        with cls.atomic():
            group = Group.objects.select_for_update().get(pk=group.pk)

            expected = set()
            for user_id, action in group.membership_events.order_by("id").values_list(
                "user_id", "action"
            ):
                if action == MembershipAction.ADD:
                    expected.add(user_id)
                else:
                    expected.discard(user_id)

            actual = set(
                GroupMember.objects.filter(group=group).values_list("user_id", flat=True)
            )
            missing = expected - actual
            extra = actual - expected

            if missing:
                GroupMember.objects.bulk_create(
                    [GroupMember(group=group, user_id=uid) for uid in missing]
                )
            if extra:
                GroupMember.objects.filter(group=group, user_id__in=extra).delete()
            if missing or extra:
                cls._publish(group, *extra)

        if missing or extra:
            cls.get_logger().warning(
                f"Repaired membership of group {group.pk}: "
                f"+{len(missing)} -{len(extra)}"
            )
        return {"added": len(missing), "removed": len(extra)}


# =============================================================================
# MessageService
# =============================================================================


class MessageService(BaseService):
    """
    The per-conversation message log.

    Ordering:
        (timestamp, sequence) ascending. Both are assigned under a row lock
        on the conversation's ConversationLog: sequence is the previous
        value + 1 and timestamp is max(now, previous timestamp), so
        timestamps never decrease within a conversation.
    """

    _url_validator = URLValidator()

    @classmethod
    def append(
        cls,
        conversation_id: str,
        *,
        sender: User,
        message_type: str,
        text: str = "",
        image_url: str = "",
        event: dict | None = None,
    ) -> Message:
        """
        Internal: append a message to a conversation's log.

        Must run inside the caller's transaction. No access checks.
        """
        ConversationLog.objects.get_or_create(conversation_id=conversation_id)
        head = ConversationLog.objects.select_for_update().get(pk=conversation_id)

        now = timezone.now()
        timestamp = max(now, head.last_timestamp) if head.last_timestamp else now
        head.last_sequence += 1
        head.last_timestamp = timestamp
        head.save(update_fields=["last_sequence", "last_timestamp"])

        return Message.objects.create(
            conversation_id=conversation_id,
            sequence=head.last_sequence,
            timestamp=timestamp,
            message_type=message_type,
            text=text,
            image_url=image_url,
            sender=sender,
            sender_name=sender.get_short_name()[:80],
            event=event,
        )

    @classmethod
    @retry_transient()
    def send(
        cls,
        conversation_id,
        sender: User,
        text: str | None = None,
        image_url: str | None = None,
    ) -> ServiceResult[Message]:
        """
        Append a user message.

        Type is image when image_url is given, text otherwise. Text and
        image_url are trimmed.

        Returns:
            ServiceResult with the new Message

        Error codes:
            EMPTY_MESSAGE: no text and no image
            VALIDATION_ERROR: text too long, or image_url is not a URL
            NOT_FOUND: malformed conversation id or unknown group
            FORBIDDEN: not a party/member, or direct parties are not friends
        """
        text = (text or "").strip()
        image_url = (image_url or "").strip()

        if not text and not image_url:
            return ServiceResult.failure(
                "Message must have text or an image",
                error_code=ErrorCode.EMPTY_MESSAGE,
            )

        if len(text) > MESSAGE_CONFIG.MAX_TEXT_LENGTH:
            return ServiceResult.failure(
                "Message is too long",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"text": [
                    f"Ensure this field has no more than "
                    f"{MESSAGE_CONFIG.MAX_TEXT_LENGTH} characters."
                ]},
            )

        if image_url:
            try:
                if len(image_url) > MESSAGE_CONFIG.MAX_IMAGE_URL_LENGTH:
                    raise DjangoValidationError("Image URL is too long")
                cls._url_validator(image_url)
            except DjangoValidationError:
                return ServiceResult.failure(
                    "Invalid image URL",
                    error_code=ErrorCode.VALIDATION_ERROR,
                    errors={"image_url": ["Enter a valid URL."]},
                )

        access = ConversationService.check_post(conversation_id, sender)
        if not access:
            return access
        ref = access.data

        with cls.atomic():
            message = cls.append(
                ref.conversation_id,
                sender=sender,
                message_type=MessageType.IMAGE if image_url else MessageType.TEXT,
                text=text,
                image_url=image_url,
            )
            publish(*ConversationService.topics_for(ref))

        cls.get_logger().info(
            f"Message {message.pk} appended to {ref.conversation_id} "
            f"(seq {message.sequence})"
        )
        return ServiceResult.success(message)

    @classmethod
    def tail(cls, conversation_id: str) -> QuerySet[Message]:
        """Full log of a conversation, oldest first. No access checks."""
        return Message.objects.filter(conversation_id=conversation_id).order_by(
            "timestamp", "sequence"
        )

    @classmethod
    def clamp_window(cls, limit=None) -> int:
        try:
            limit = int(limit) if limit is not None else MESSAGE_CONFIG.RECENT_WINDOW_DEFAULT
        except (TypeError, ValueError):
            limit = MESSAGE_CONFIG.RECENT_WINDOW_DEFAULT
        return max(1, min(limit, MESSAGE_CONFIG.RECENT_WINDOW_MAX))

    @classmethod
    def recent(cls, conversation_id: str, limit=None) -> list[Message]:
        """Newest messages first, at most limit (default recent window)."""
        return list(
            Message.objects.filter(conversation_id=conversation_id).order_by(
                "-timestamp", "-sequence"
            )[: cls.clamp_window(limit)]
        )

    @staticmethod
    def count_unread(messages, viewer_id, is_group: bool = False) -> int:
        """
        Unread messages among messages, for viewer.

        System messages and the viewer's own messages never count. In a
        direct chat a message counts until it is seen. Groups have a single
        shared seen flag that one member's read would clear for everyone,
        so every message from another member counts regardless of it.
        """
        return sum(
            1
            for m in messages
            if not m.is_system_message
            and m.sender_id != viewer_id
            and (is_group or not m.seen)
        )

    @classmethod
    def unread_count(cls, conversation_id: str, viewer_id, limit=None) -> int:
        ref = parse_conversation_id(conversation_id)
        return cls.count_unread(
            cls.recent(conversation_id, limit),
            viewer_id,
            is_group=ref is not None and ref.is_group,
        )

    @classmethod
    def _unseen_from_others(cls, conversation_id: str, viewer: User) -> QuerySet[Message]:
        return (
            Message.objects.filter(conversation_id=conversation_id, seen=False)
            .exclude(message_type=MessageType.SYSTEM)
            .exclude(sender=viewer)
        )

    @classmethod
    def mark_seen(cls, conversation_id, message_id, viewer: User) -> ServiceResult[bool]:
        """
        Mark one message as seen.

        Idempotent. A missing message, one already seen, one sent by the
        viewer or a system message is left untouched without error.

        Returns:
            ServiceResult with True if the flag changed

        Error codes:
            NOT_FOUND: malformed conversation id or unknown group
            FORBIDDEN: viewer cannot read the conversation
        """
        access = ConversationService.check_read(conversation_id, viewer)
        if not access:
            return access
        ref = access.data

        message_uuid = parse_uuid(message_id)
        if message_uuid is None:
            return ServiceResult.success(False)

        with cls.atomic():
            updated = (
                cls._unseen_from_others(ref.conversation_id, viewer)
                .filter(pk=message_uuid)
                .update(seen=True)
            )
            if updated:
                publish(*ConversationService.topics_for(ref))

        return ServiceResult.success(bool(updated))

    @classmethod
    def mark_conversation_seen(cls, conversation_id, viewer: User) -> ServiceResult[int]:
        """
        Mark every unseen message from others in the conversation as seen.

        Returns:
            ServiceResult with the number of messages updated
        """
        access = ConversationService.check_read(conversation_id, viewer)
        if not access:
            return access
        ref = access.data

        with cls.atomic():
            updated = cls._unseen_from_others(ref.conversation_id, viewer).update(
                seen=True
            )
            if updated:
                publish(*ConversationService.topics_for(ref))

        if updated:
            cls.get_logger().debug(
                f"{viewer.pk} marked {updated} messages seen in {ref.conversation_id}"
            )
        return ServiceResult.success(updated)
