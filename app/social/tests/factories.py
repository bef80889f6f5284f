"""
Factory Boy factories for relationship graph models.

Usage:
    from social.tests.factories import FriendRequestFactory, make_friends

    request = FriendRequestFactory(sender=alice, recipient=bob)
    make_friends(alice, bob)
"""

import factory

from authentication.tests.factories import UserFactory
from social.models import FriendRequest, Friendship


class FriendRequestFactory(factory.django.DjangoModelFactory):
    """Pending request with sender snapshots copied from the sender profile."""

    class Meta:
        model = FriendRequest

    sender = factory.SubFactory(UserFactory)
    recipient = factory.SubFactory(UserFactory)
    from_name = factory.LazyAttribute(lambda obj: obj.sender.profile.display_name)
    from_photo_url = factory.LazyAttribute(lambda obj: obj.sender.profile.photo_url)


class FriendshipFactory(factory.django.DjangoModelFactory):
    """A single directional edge. Prefer make_friends() for real friendships."""

    class Meta:
        model = Friendship

    owner = factory.SubFactory(UserFactory)
    friend = factory.SubFactory(UserFactory)
    display_name = factory.LazyAttribute(lambda obj: obj.friend.profile.display_name)
    photo_url = factory.LazyAttribute(lambda obj: obj.friend.profile.photo_url)


def make_friends(user, other):
    """Write both directions of a friendship."""
    return (
        FriendshipFactory(owner=user, friend=other),
        FriendshipFactory(owner=other, friend=user),
    )
