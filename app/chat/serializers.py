"""
Serializers for the conversation registry and message log API.

Related files:
    - models.py: Group, Message
    - services.py: ConversationSummary
    - views.py: Views that use these serializers

Timestamps are ISO-8601 UTC (DRF default rendering).
"""

from rest_framework import serializers

from chat.constants import GROUP_CONFIG, MESSAGE_CONFIG
from chat.models import Group, Message


class MessageSerializer(serializers.ModelSerializer):
    """
    A message as delivered to clients (REST history and realtime snapshots).

    `event` is only set for system messages.
    """

    type = serializers.CharField(source="message_type", read_only=True)
    sender_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "type",
            "text",
            "image_url",
            "sender_id",
            "sender_name",
            "timestamp",
            "seen",
            "event",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Input for sending a message.

    Emptiness and URL checks are left to MessageService so both transports
    report the same error codes.
    """

    text = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
        max_length=MESSAGE_CONFIG.MAX_TEXT_LENGTH * 2,
    )
    image_url = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=MESSAGE_CONFIG.MAX_IMAGE_URL_LENGTH * 2,
    )


class GroupSerializer(serializers.ModelSerializer):
    """Group details with the current member ids."""

    created_by = serializers.UUIDField(source="created_by_id", read_only=True)
    members = serializers.SerializerMethodField()
    conversation_id = serializers.CharField(read_only=True)

    class Meta:
        model = Group
        fields = [
            "id",
            "conversation_id",
            "name",
            "created_by",
            "members",
            "photo_url",
            "created_at",
        ]
        read_only_fields = fields

    def get_members(self, obj) -> list[str]:
        return [str(m.user_id) for m in obj.members.all()]


class GroupCreateSerializer(serializers.Serializer):
    """Input for creating a group. Member ids are friend codes."""

    name = serializers.CharField(
        max_length=GROUP_CONFIG.MAX_NAME_LENGTH, allow_blank=True
    )
    member_ids = serializers.ListField(
        child=serializers.CharField(max_length=64),
        required=False,
        default=list,
        max_length=GROUP_CONFIG.MAX_INITIAL_MEMBERS,
    )


class GroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(
        max_length=GROUP_CONFIG.MAX_NAME_LENGTH, allow_blank=True
    )


class MemberAddSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=64)


class ConversationSummarySerializer(serializers.Serializer):
    """One entry of the conversation list."""

    id = serializers.CharField(source="conversation_id")
    type = serializers.CharField(source="kind")
    name = serializers.CharField()
    photo_url = serializers.CharField()
    other_user_id = serializers.UUIDField(allow_null=True)
    last_message = MessageSerializer(allow_null=True)
    unread_count = serializers.IntegerField()
    updated_at = serializers.DateTimeField()
