"""
Serializers for the relationship graph API.

Related files:
    - models.py: FriendRequest, Friendship
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from social.models import FriendRequest, Friendship


class FriendSerializer(serializers.ModelSerializer):
    """
    Friend edge as shown in the owner's friend list.

    display_name/photo_url are acceptance-time snapshots.
    """

    friend_id = serializers.UUIDField(read_only=True)
    added_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Friendship
        fields = ["friend_id", "display_name", "photo_url", "added_at"]
        read_only_fields = fields


class FriendRequestSerializer(serializers.ModelSerializer):
    """Pending request as shown to its recipient."""

    from_uid = serializers.UUIDField(source="sender_id", read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = FriendRequest
        fields = ["id", "from_uid", "from_name", "from_photo_url", "timestamp"]
        read_only_fields = fields


class FriendRequestCreateSerializer(serializers.Serializer):
    """
    Input for sending a request.

    `to` is the recipient's friend code; it is not validated as a UUID here
    so malformed codes come back as NOT_FOUND.
    """

    to = serializers.CharField(max_length=64)
