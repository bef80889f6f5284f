"""
Conversation registry and message log models.

Models:
    Group: Named group conversation with a single admin (its creator)
    GroupMember: Materialized membership of a group
    MembershipEvent: Append-only membership log (add/remove)
    ConversationLog: Per-conversation head used to order appends
    Message: One entry of a conversation's message log

Design Decisions:
    - Direct conversations are not stored. Their messages are keyed by the
      derived id (see chat.identifiers); group messages by the group id.
    - Membership is an operation log plus a projection. Each add/remove
      inserts a MembershipEvent and inserts/deletes one GroupMember row in
      the same transaction; no write ever replaces the whole member set.
    - Messages are immutable except for the one-way seen flag. Ordering is
      (timestamp, sequence), both assigned under a row lock on the
      conversation's ConversationLog.
    - Membership and name changes append a system message in the same
      transaction as the change.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: User-authored text message
    IMAGE: User-authored message carrying an image URL (text optional)
    SYSTEM: Audit entry for a membership or name change
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    SYSTEM = "system", "System"


class SystemMessageEvent:
    """
    System message event types.

    The structured payload is stored in Message.event:
    {"event": "<event_type>", "actor_id": str, ...event-specific data...}

    Events:
        GROUP_CREATED: data {"name": str}
        MEMBER_ADDED: data {"target_id": str}
        MEMBER_REMOVED: data {"target_id": str}
        MEMBER_LEFT: no extra data (the actor left)
        GROUP_RENAMED: data {"old_name": str, "name": str}
    """

    GROUP_CREATED = "group_created"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    MEMBER_LEFT = "member_left"
    GROUP_RENAMED = "group_renamed"


class MembershipAction(models.TextChoices):
    ADD = "add", "Add"
    REMOVE = "remove", "Remove"


class Group(UUIDPrimaryKeyMixin, BaseModel):
    """
    A group conversation.

    Fields:
        name: Display name (required, max 100 characters)
        created_by: The creator, who is the group's only admin
        photo_url: Optional group photo

    Note:
        created_by survives the creator leaving the group; admin rights are
        not transferred.
    """

    name = models.CharField(
        max_length=100,
        help_text="Group display name",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="created_groups",
        help_text="Creator and admin of the group",
    )

    photo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Group photo URL",
    )

    class Meta:
        db_table = "chat_group"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Group({self.name})"

    @property
    def conversation_id(self) -> str:
        return str(self.pk)


class GroupMember(BaseModel):
    """
    One member of a group (projection of the membership log).

    Constraints:
        - One row per (group, user)
    """

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name="members",
        help_text="Group the user belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="group_memberships",
        help_text="Member",
    )

    class Meta:
        db_table = "chat_group_member"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "user"],
                name="chat_unique_group_member",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "group"], name="chat_member_user_idx"),
        ]

    def __str__(self) -> str:
        return f"GroupMember({self.group_id}, {self.user_id})"


class MembershipEvent(models.Model):
    """
    Append-only membership log entry.

    Replaying a group's events in id order yields its member set; the
    GroupMember projection is verified against it periodically.

    Fields:
        group: Affected group
        user: Member added or removed
        action: add or remove
        actor: User who made the change (the member themself for leave)
        created_at: When the change was recorded
    """

    id = models.BigAutoField(primary_key=True)

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name="membership_events",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )

    action = models.CharField(
        max_length=10,
        choices=MembershipAction.choices,
    )

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "chat_membership_event"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["group", "id"], name="chat_membership_group_idx"),
        ]

    def __str__(self) -> str:
        return f"MembershipEvent({self.action} {self.user_id} @ {self.group_id})"


class ConversationLog(models.Model):
    """
    Head of a conversation's message log.

    Appends lock this row (select_for_update) to assign the next sequence
    and a timestamp that never goes backwards, even if the server clock does.
    Rows are created lazily on the first message.
    """

    conversation_id = models.CharField(
        max_length=80,
        primary_key=True,
        help_text="Group id or direct conversation id",
    )

    last_sequence = models.PositiveBigIntegerField(default=0)

    last_timestamp = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "chat_conversation_log"

    def __str__(self) -> str:
        return f"ConversationLog({self.conversation_id}, seq={self.last_sequence})"


class Message(UUIDPrimaryKeyMixin, models.Model):
    """
    One message of a conversation's log.

    Fields:
        conversation_id: Group id or direct conversation id
        sequence: Insertion order within the conversation (1, 2, ...)
        message_type: text, image or system
        text: Message text (rendered audit line for system messages)
        image_url: Image reference for image messages
        sender: Author (the actor for system messages)
        sender_name: Author display name snapshot at send time
        timestamp: Server-assigned, non-decreasing per conversation
        seen: Set once by the recipient (shared flag for groups)
        event: Structured payload of system messages

    Constraints:
        - (conversation_id, sequence) is unique
    """

    conversation_id = models.CharField(
        max_length=80,
        help_text="Group id or direct conversation id",
    )

    sequence = models.PositiveBigIntegerField(
        help_text="Insertion order within the conversation",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
    )

    text = models.TextField(blank=True)

    image_url = models.URLField(max_length=500, blank=True)

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="sent_messages",
    )

    sender_name = models.CharField(max_length=80, blank=True)

    timestamp = models.DateTimeField()

    seen = models.BooleanField(default=False)

    event = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "chat_message"
        ordering = ["timestamp", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation_id", "sequence"],
                name="chat_unique_message_sequence",
            ),
        ]
        indexes = [
            models.Index(
                fields=["conversation_id", "timestamp", "sequence"],
                name="chat_msg_conv_order_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Message({self.conversation_id}#{self.sequence})"

    @property
    def is_system_message(self) -> bool:
        return self.message_type == MessageType.SYSTEM

    @property
    def preview(self) -> str:
        """Short text for conversation list summaries."""
        from chat.constants import MESSAGE_CONFIG

        if self.text:
            return self.text[: MESSAGE_CONFIG.PREVIEW_LENGTH]
        if self.message_type == MessageType.IMAGE:
            return "Photo"
        return ""
