"""
Relationship graph services.

FriendshipService owns every write to FriendRequest and Friendship:

    send_request    sender -> recipient proposal (deduplicated)
    resolve_request recipient accepts (two edges) or rejects
    remove_friend   delete both edges, idempotent

Duplicate policy:
    - A second pending request for the same (sender, recipient) pair is
      ALREADY_EXISTS.
    - A request to someone who is already a friend is ALREADY_EXISTS.
    - Crossed requests (A -> B and B -> A) may both exist; accepting either
      one deletes both.

Every mutation publishes the affected friends/requests/conversations topics
after commit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q
from django.db.models.functions import Lower

from core.decorators import retry_transient
from core.exceptions import ErrorCode
from core.helpers import parse_uuid
from core.services import BaseService, ServiceResult
from realtime.publisher import publish
from realtime.topics import conversations_topic, friends_topic, requests_topic
from social.models import FriendRequest, Friendship

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def _profile_snapshot(user) -> tuple[str, str]:
    """Return (display_name, photo_url) for a user's current profile."""
    profile = getattr(user, "profile", None)
    if profile is None:
        return "", ""
    return profile.display_name, profile.photo_url


class FriendshipService(BaseService):
    """
    Friend requests and friend edges.

    Usage:
        result = FriendshipService.send_request(alice, bob.pk)
        FriendshipService.resolve_request(result.data.pk, bob, accept=True)
        FriendshipService.are_friends(alice.pk, bob.pk)  # True
    """

    @classmethod
    def send_request(cls, sender: User, recipient_id) -> ServiceResult[FriendRequest]:
        """
        Store a friend request under the recipient.

        Args:
            sender: Requesting user
            recipient_id: Friend code of the recipient

        Returns:
            ServiceResult with the created FriendRequest

        Error codes:
            SELF_REQUEST: recipient is the sender
            NOT_FOUND: no active user with that id
            ALREADY_EXISTS: already friends, or same request still pending
        """
        from authentication.models import User

        recipient_uuid = parse_uuid(recipient_id)
        if recipient_uuid == sender.pk:
            return ServiceResult.failure(
                "Cannot send a friend request to yourself",
                error_code=ErrorCode.SELF_REQUEST,
            )

        recipient = (
            User.objects.filter(pk=recipient_uuid, is_active=True).first()
            if recipient_uuid
            else None
        )
        if recipient is None:
            return ServiceResult.failure(
                "User not found", error_code=ErrorCode.NOT_FOUND
            )

        if Friendship.objects.filter(owner=sender, friend=recipient).exists():
            return ServiceResult.failure(
                "You are already friends with this user",
                error_code=ErrorCode.ALREADY_EXISTS,
            )

        from_name, from_photo = _profile_snapshot(sender)
        try:
            with cls.atomic():
                friend_request = FriendRequest.objects.create(
                    sender=sender,
                    recipient=recipient,
                    from_name=from_name,
                    from_photo_url=from_photo,
                )
                publish(requests_topic(recipient.pk))
        except IntegrityError:
            return ServiceResult.failure(
                "A friend request to this user is already pending",
                error_code=ErrorCode.ALREADY_EXISTS,
            )

        cls.get_logger().info(
            f"Friend request {friend_request.pk}: {sender.pk} -> {recipient.pk}"
        )
        return ServiceResult.success(friend_request)

    @classmethod
    @retry_transient()
    def resolve_request(
        cls, request_id, owner: User, accept: bool
    ) -> ServiceResult[Friendship | None]:
        """
        Accept or reject a pending request stored under owner.

        Accepting writes both friend edges with profile snapshots taken now,
        then deletes the request and any crossed request, all in one
        transaction. Rejecting only deletes the request.

        Returns:
            ServiceResult with the owner's new Friendship (accept) or None (reject)

        Error codes:
            NOT_FOUND: no such request under owner (already resolved, or
                       belongs to someone else)
            TRANSIENT: the transaction kept failing; nothing was applied
        """
        from authentication.models import Profile

        request_uuid = parse_uuid(request_id)
        if request_uuid is None:
            return ServiceResult.failure(
                "Friend request not found", error_code=ErrorCode.NOT_FOUND
            )

        with cls.atomic():
            friend_request = (
                FriendRequest.objects.select_for_update()
                .filter(pk=request_uuid, recipient=owner)
                .first()
            )
            if friend_request is None:
                return ServiceResult.failure(
                    "Friend request not found", error_code=ErrorCode.NOT_FOUND
                )

            sender_id = friend_request.sender_id
            topics = [requests_topic(owner.pk)]
            owner_edge = None

            if accept:
                profiles = {
                    p.user_id: p
                    for p in Profile.objects.filter(user_id__in=[owner.pk, sender_id])
                }
                sender_profile = profiles.get(sender_id)
                owner_profile = profiles.get(owner.pk)

                # Refresh the sender snapshot, falling back to the request's copy
                sender_name = (
                    sender_profile.display_name if sender_profile else ""
                ) or friend_request.from_name
                sender_photo = (
                    sender_profile.photo_url if sender_profile else ""
                ) or friend_request.from_photo_url

                owner_edge, _ = Friendship.objects.get_or_create(
                    owner=owner,
                    friend_id=sender_id,
                    defaults={"display_name": sender_name, "photo_url": sender_photo},
                )
                Friendship.objects.get_or_create(
                    owner_id=sender_id,
                    friend=owner,
                    defaults={
                        "display_name": owner_profile.display_name if owner_profile else "",
                        "photo_url": owner_profile.photo_url if owner_profile else "",
                    },
                )

                crossed = FriendRequest.objects.filter(
                    sender=owner, recipient_id=sender_id
                ).delete()[0]
                if crossed:
                    topics.append(requests_topic(sender_id))

                topics += [
                    friends_topic(owner.pk),
                    friends_topic(sender_id),
                    conversations_topic(owner.pk),
                    conversations_topic(sender_id),
                ]

            friend_request.delete()
            publish(*topics)

        cls.get_logger().info(
            f"Friend request {request_uuid} {'accepted' if accept else 'rejected'} "
            f"by {owner.pk}"
        )
        return ServiceResult.success(owner_edge)

    @classmethod
    def remove_friend(cls, user: User, friend_id) -> ServiceResult[int]:
        """
        Delete both directions of a friendship.

        Idempotent: removing someone who is not (or no longer) a friend
        succeeds with 0 deleted edges.

        Returns:
            ServiceResult with the number of edges deleted (0-2)
        """
        friend_uuid = parse_uuid(friend_id)
        if friend_uuid is None:
            return ServiceResult.success(0)

        with cls.atomic():
            deleted, _ = Friendship.objects.filter(
                Q(owner=user, friend_id=friend_uuid)
                | Q(owner_id=friend_uuid, friend=user)
            ).delete()
            if deleted:
                publish(
                    friends_topic(user.pk),
                    friends_topic(friend_uuid),
                    conversations_topic(user.pk),
                    conversations_topic(friend_uuid),
                )

        if deleted:
            cls.get_logger().info(f"Friendship removed: {user.pk} <-> {friend_uuid}")
        return ServiceResult.success(deleted)

    @classmethod
    def list_friends(cls, owner) -> QuerySet[Friendship]:
        """Owner's friend edges ordered by snapshot name."""
        return Friendship.objects.filter(owner=owner).order_by(
            Lower("display_name"), "created_at"
        )

    @classmethod
    def list_requests(cls, owner) -> QuerySet[FriendRequest]:
        """Pending requests received by owner, newest first."""
        return FriendRequest.objects.filter(recipient=owner).order_by("-created_at")

    @classmethod
    def are_friends(cls, user_id, other_id) -> bool:
        return Friendship.objects.filter(owner_id=user_id, friend_id=other_id).exists()
