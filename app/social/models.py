"""
Relationship graph models.

Models:
    FriendRequest: Pending proposal from one user to another
    Friendship: One direction of a confirmed friendship

Design Decisions:
    - A friendship is two Friendship rows (owner -> friend, friend -> owner)
      written in one transaction; a one-sided edge is never committed.
    - Friend requests are deleted when resolved; no request outlives its
      accept/reject.
    - Name/photo fields are snapshots copied at request/acceptance time.
      They are not kept in sync with later profile edits; clients watch
      the friend's profile for fresh values.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class FriendRequest(UUIDPrimaryKeyMixin, BaseModel):
    """
    A pending friend request, owned by its recipient.

    Fields:
        sender: User who sent the request
        recipient: User who may accept or reject it
        from_name: Sender display name at send time
        from_photo_url: Sender photo at send time
        created_at: Request timestamp (from BaseModel)

    Constraints:
        - At most one pending request per ordered (sender, recipient) pair
        - A user cannot send a request to themself
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_friend_requests",
        help_text="User who sent the request",
    )

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_friend_requests",
        help_text="User the request is stored under",
    )

    from_name = models.CharField(
        max_length=80,
        blank=True,
        help_text="Sender display name snapshot",
    )

    from_photo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Sender photo URL snapshot",
    )

    class Meta:
        db_table = "social_friend_request"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["sender", "recipient"],
                name="social_unique_pending_request",
            ),
            models.CheckConstraint(
                condition=~Q(sender=F("recipient")),
                name="social_request_not_self",
            ),
        ]
        indexes = [
            models.Index(
                fields=["recipient", "-created_at"],
                name="social_req_recipient_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"FriendRequest({self.sender_id} -> {self.recipient_id})"


class Friendship(BaseModel):
    """
    One direction of a friendship edge.

    Fields:
        owner: User whose friend list contains this edge
        friend: The friend
        display_name: Friend display name snapshot at acceptance
        photo_url: Friend photo URL snapshot at acceptance
        created_at: When the friendship was established (from BaseModel)

    Constraints:
        - One edge per ordered (owner, friend) pair
        - No self edges
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="friendships",
        help_text="User whose friend list contains this edge",
    )

    friend = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="The friend this edge points to",
    )

    display_name = models.CharField(
        max_length=80,
        blank=True,
        help_text="Friend display name snapshot",
    )

    photo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Friend photo URL snapshot",
    )

    class Meta:
        db_table = "social_friendship"
        ordering = ["display_name", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "friend"],
                name="social_unique_friend_edge",
            ),
            models.CheckConstraint(
                condition=~Q(owner=F("friend")),
                name="social_friendship_not_self",
            ),
        ]

    def __str__(self) -> str:
        return f"Friendship({self.owner_id} -> {self.friend_id})"
