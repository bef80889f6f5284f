"""
Tests for the chat service layer.

Covers:
- GroupService: create, rename, add/remove members, leave, projection rebuild
- MessageService: send validation and access rules, ordering, seen flags,
  recent window and unread counts
- ConversationService: access checks and the conversation list
"""

import uuid
from datetime import timedelta

import pytest
from django.db import OperationalError
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from chat.identifiers import direct_conversation_id
from chat.models import (
    ConversationLog,
    GroupMember,
    MembershipAction,
    MembershipEvent,
    Message,
    MessageType,
    SystemMessageEvent,
)
from chat.services import ConversationService, GroupService, MessageService
from chat.tests.factories import GroupFactory, MessageFactory
from core.exceptions import ErrorCode
from social.tests.factories import make_friends


def member_ids(group):
    return set(GroupMember.objects.filter(group=group).values_list("user_id", flat=True))


def system_events(group):
    return [
        m.event["event"]
        for m in MessageService.tail(group.conversation_id)
        if m.message_type == MessageType.SYSTEM
    ]


# =============================================================================
# GroupService
# =============================================================================


class TestCreateGroup:
    """Tests for GroupService.create_group."""

    def test_creator_is_added_and_system_messages_written(self, alice, bob, carol):
        result = GroupService.create_group(alice, "Trip", member_ids=[bob.pk, carol.pk])

        assert result.success
        group = result.data
        assert group.created_by == alice
        assert member_ids(group) == {alice.pk, bob.pk, carol.pk}
        assert system_events(group) == [
            SystemMessageEvent.GROUP_CREATED,
            SystemMessageEvent.MEMBER_ADDED,
            SystemMessageEvent.MEMBER_ADDED,
        ]

    def test_creator_listed_in_members_is_not_duplicated(self, alice, bob):
        result = GroupService.create_group(
            alice, "Trip", member_ids=[str(alice.pk), str(bob.pk), str(bob.pk)]
        )

        group = result.data
        assert GroupMember.objects.filter(group=group).count() == 2
        assert system_events(group).count(SystemMessageEvent.MEMBER_ADDED) == 1

    def test_unknown_member_fails_and_creates_nothing(self, alice, bob):
        """
        An unknown member id rejects the whole creation.

        Why it matters: A group created with a silently dropped member is
        not what the creator asked for.
        """
        missing = str(uuid.uuid4())

        result = GroupService.create_group(alice, "Trip", member_ids=[bob.pk, missing])

        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.errors == {"member_ids": [missing]}
        assert not GroupMember.objects.exists()
        assert not Message.objects.exists()

    @pytest.mark.parametrize("name", ["", "   ", "x" * 101, None])
    def test_invalid_name_fails_validation(self, alice, name):
        result = GroupService.create_group(alice, name)

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_name_is_trimmed(self, alice):
        group = GroupService.create_group(alice, "  Trip  ").data

        assert group.name == "Trip"

    def test_membership_log_records_every_member(self, alice, bob):
        group = GroupService.create_group(alice, "Trip", member_ids=[bob.pk]).data

        events = list(
            MembershipEvent.objects.filter(group=group).values_list("user_id", "action", "actor_id")
        )
        assert events == [
            (alice.pk, MembershipAction.ADD, alice.pk),
            (bob.pk, MembershipAction.ADD, alice.pk),
        ]

    def test_publishes_group_and_member_topics(
        self, alice, bob, mocker, django_capture_on_commit_callbacks
    ):
        deliver = mocker.patch("realtime.publisher.deliver")

        with django_capture_on_commit_callbacks(execute=True):
            group = GroupService.create_group(alice, "Trip", member_ids=[bob.pk]).data

        (topics,), _ = deliver.call_args
        assert set(topics) == {
            f"conversation.{group.pk}",
            f"conversations.{alice.pk}",
            f"conversations.{bob.pk}",
        }


class TestAddMemberScenario:
    """A creates "Trip" with only A, adds B."""

    def test_members_and_system_message_at_tail(self, alice, bob):
        """
        Adding B yields members {A, B} and "Alice added Bob" at the tail.

        Why it matters: The audit message and the membership change are one
        atomic step; members must always be able to see who added whom.
        """
        group = GroupService.create_group(alice, "Trip", member_ids=[alice.pk]).data

        result = GroupService.add_member(group.pk, alice, bob.pk)

        assert result.success
        assert member_ids(group) == {alice.pk, bob.pk}
        last = MessageService.tail(group.conversation_id).last()
        assert last.message_type == MessageType.SYSTEM
        assert last.text == "Alice added Bob"
        assert last.sender == alice
        assert last.event == {
            "event": SystemMessageEvent.MEMBER_ADDED,
            "actor_id": str(alice.pk),
            "target_id": str(bob.pk),
        }


class TestRenameGroup:
    """Tests for GroupService.rename_group."""

    def test_creator_can_rename(self, alice, trip):
        result = GroupService.rename_group(trip.pk, alice, "Road trip")

        assert result.success
        trip.refresh_from_db()
        assert trip.name == "Road trip"
        last = MessageService.tail(trip.conversation_id).last()
        assert last.event["event"] == SystemMessageEvent.GROUP_RENAMED
        assert last.event["old_name"] == "Trip"
        assert last.text == 'Alice renamed the group to "Road trip"'

    def test_other_member_is_forbidden(self, bob, trip):
        """
        Only the creator may rename.

        Why it matters: Renaming is an admin right; members would otherwise
        be able to hijack the group's identity.
        """
        result = GroupService.rename_group(trip.pk, bob, "Mine now")

        assert result.error_code == ErrorCode.FORBIDDEN
        trip.refresh_from_db()
        assert trip.name == "Trip"

    def test_creator_who_left_cannot_rename(self, alice, trip):
        GroupService.leave_group(trip.pk, alice)

        result = GroupService.rename_group(trip.pk, alice, "Back")

        assert result.error_code == ErrorCode.FORBIDDEN

    def test_same_name_writes_no_system_message(self, alice, trip):
        before = Message.objects.count()

        result = GroupService.rename_group(trip.pk, alice, "Trip")

        assert result.success
        assert Message.objects.count() == before

    @pytest.mark.parametrize("group_id", [str(uuid.uuid4()), "garbage"])
    def test_unknown_group_not_found(self, alice, group_id):
        result = GroupService.rename_group(group_id, alice, "Name")

        assert result.error_code == ErrorCode.NOT_FOUND


class TestAddMember:
    """Tests for GroupService.add_member."""

    def test_any_member_can_add(self, bob, carol, trip):
        result = GroupService.add_member(trip.pk, bob, carol.pk)

        assert result.success
        assert carol.pk in member_ids(trip)

    def test_non_member_is_forbidden(self, carol, trip):
        result = GroupService.add_member(trip.pk, carol, carol.pk)

        assert result.error_code == ErrorCode.FORBIDDEN
        assert carol.pk not in member_ids(trip)

    @pytest.mark.parametrize("target", [str(uuid.uuid4()), "garbage", None])
    def test_unknown_target_not_found(self, alice, trip, target):
        result = GroupService.add_member(trip.pk, alice, target)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_inactive_target_not_found(self, alice, trip):
        ghost = UserFactory(is_active=False)

        result = GroupService.add_member(trip.pk, alice, ghost.pk)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_existing_member_already_exists(self, alice, bob, trip):
        before = MembershipEvent.objects.count()

        result = GroupService.add_member(trip.pk, alice, bob.pk)

        assert result.error_code == ErrorCode.ALREADY_EXISTS
        assert MembershipEvent.objects.count() == before

    def test_adds_of_different_users_are_both_kept(self, alice, bob, carol, trip):
        """
        Two adds never overwrite each other.

        Why it matters: Membership is a per-member log, not a replaced set,
        so an add cannot be lost to another add.
        """
        dave = UserFactory()

        GroupService.add_member(trip.pk, alice, carol.pk)
        GroupService.add_member(trip.pk, bob, dave.pk)

        assert member_ids(trip) == {alice.pk, bob.pk, carol.pk, dave.pk}


class TestRemoveMember:
    """Tests for GroupService.remove_member."""

    def test_creator_removes_member(self, alice, bob, trip):
        result = GroupService.remove_member(trip.pk, alice, bob.pk)

        assert result.success
        assert member_ids(trip) == {alice.pk}
        last = MessageService.tail(trip.conversation_id).last()
        assert last.text == "Alice removed Bob"
        assert last.event["event"] == SystemMessageEvent.MEMBER_REMOVED
        assert MembershipEvent.objects.filter(
            group=trip, user=bob, action=MembershipAction.REMOVE
        ).exists()

    @pytest.mark.parametrize("actor_name", ["alice", "bob", "carol"])
    def test_removing_creator_always_invalid(self, request, alice, trip, actor_name):
        """
        The creator cannot be removed, whoever asks.

        Why it matters: The group would be left without its admin; the
        creator can only go by leaving.
        """
        actor = request.getfixturevalue(actor_name)

        result = GroupService.remove_member(trip.pk, actor, alice.pk)

        assert result.error_code == ErrorCode.INVALID_OPERATION
        assert alice.pk in member_ids(trip)

    def test_non_creator_is_forbidden(self, alice, bob, carol, trip):
        GroupService.add_member(trip.pk, alice, carol.pk)

        result = GroupService.remove_member(trip.pk, bob, carol.pk)

        assert result.error_code == ErrorCode.FORBIDDEN
        assert carol.pk in member_ids(trip)

    def test_target_not_member_not_found(self, alice, carol, trip):
        result = GroupService.remove_member(trip.pk, alice, carol.pk)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_publishes_removed_member_topic(
        self, alice, bob, trip, mocker, django_capture_on_commit_callbacks
    ):
        deliver = mocker.patch("realtime.publisher.deliver")

        with django_capture_on_commit_callbacks(execute=True):
            GroupService.remove_member(trip.pk, alice, bob.pk)

        (topics,), _ = deliver.call_args
        assert f"conversations.{bob.pk}" in topics
        assert f"conversation.{trip.pk}" in topics


class TestLeaveGroup:
    """Tests for GroupService.leave_group."""

    def test_member_leaves(self, bob, trip):
        result = GroupService.leave_group(trip.pk, bob)

        assert result.success
        assert bob.pk not in member_ids(trip)
        last = MessageService.tail(trip.conversation_id).last()
        assert last.text == "Bob left the group"
        assert last.sender == bob

    def test_creator_leaves_and_stays_creator(self, alice, bob, trip):
        result = GroupService.leave_group(trip.pk, alice)

        assert result.success
        trip.refresh_from_db()
        assert trip.created_by == alice
        assert member_ids(trip) == {bob.pk}

    def test_non_member_not_found(self, carol, trip):
        result = GroupService.leave_group(trip.pk, carol)

        assert result.error_code == ErrorCode.NOT_FOUND


class TestGetGroup:
    def test_member_gets_group(self, bob, trip):
        result = GroupService.get_group(str(trip.pk), bob)

        assert result.data == trip
        assert set(GroupService.member_ids(result.data)) == member_ids(trip)

    def test_outsider_forbidden(self, carol, trip):
        assert GroupService.get_group(trip.pk, carol).error_code == ErrorCode.FORBIDDEN


class TestRebuildMembers:
    """Tests for GroupService.rebuild_members."""

    def test_consistent_projection_is_untouched(self, trip):
        assert GroupService.rebuild_members(trip) == {"added": 0, "removed": 0}

    def test_restores_projection_from_log(self, alice, bob, carol):
        group = GroupFactory(created_by=alice, members=[bob])
        GroupMember.objects.filter(group=group, user=bob).delete()
        GroupMember.objects.create(group=group, user=carol)

        changes = GroupService.rebuild_members(group)

        assert changes == {"added": 1, "removed": 1}
        assert member_ids(group) == {alice.pk, bob.pk}

    def test_replays_removals(self, alice, bob, trip):
        GroupService.leave_group(trip.pk, bob)
        GroupMember.objects.create(group=trip, user=bob)

        GroupService.rebuild_members(trip)

        assert member_ids(trip) == {alice.pk}


# =============================================================================
# MessageService
# =============================================================================


class TestSendMessage:
    """Tests for MessageService.send."""

    @pytest.mark.parametrize(
        "text,image_url", [("", ""), ("   ", None), (None, None), (None, "  ")]
    )
    def test_empty_message_rejected(self, alice, friends, direct_id, text, image_url):
        result = MessageService.send(direct_id, alice, text=text, image_url=image_url)

        assert result.error_code == ErrorCode.EMPTY_MESSAGE
        assert not Message.objects.exists()

    def test_direct_requires_friendship(self, alice, direct_id):
        """
        Parties of a direct conversation must be friends to post.

        Why it matters: Anyone who knows a friend code could otherwise
        message a stranger.
        """
        result = MessageService.send(direct_id, alice, text="hi")

        assert result.error_code == ErrorCode.FORBIDDEN

    def test_third_party_cannot_post_in_direct(self, carol, friends, direct_id):
        result = MessageService.send(direct_id, carol, text="hi")

        assert result.error_code == ErrorCode.FORBIDDEN

    def test_outsider_cannot_post_in_group(self, carol, trip):
        result = MessageService.send(trip.conversation_id, carol, text="hi")

        assert result.error_code == ErrorCode.FORBIDDEN

    @pytest.mark.parametrize("conversation_id", [str(uuid.uuid4()), "nope", ""])
    def test_unknown_conversation_not_found(self, alice, conversation_id):
        result = MessageService.send(conversation_id, alice, text="hi")

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_text_too_long(self, alice, friends, direct_id):
        result = MessageService.send(direct_id, alice, text="x" * 10001)

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_invalid_image_url(self, alice, friends, direct_id):
        result = MessageService.send(direct_id, alice, image_url="not a url")

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_image_message(self, alice, friends, direct_id):
        result = MessageService.send(
            direct_id, alice, image_url="https://cdn.example.com/a.png"
        )

        assert result.data.message_type == MessageType.IMAGE
        assert result.data.text == ""

    def test_sender_name_is_snapshot(self, alice, friends, direct_id):
        message = MessageService.send(direct_id, alice, text="hi").data
        alice.profile.display_name = "Alicia"
        alice.profile.save()

        message.refresh_from_db()
        assert message.sender_name == "Alice"

    def test_sequence_increments_per_conversation(self, alice, bob, friends, direct_id, trip):
        first = MessageService.send(direct_id, alice, text="1").data
        second = MessageService.send(direct_id, bob, text="2").data
        in_group = MessageService.send(trip.conversation_id, bob, text="g").data

        assert (first.sequence, second.sequence) == (1, 2)
        # Group already holds its system messages
        assert in_group.sequence == 3
        assert ConversationLog.objects.get(pk=direct_id).last_sequence == 2

    def test_publishes_conversation_topics(
        self, alice, bob, friends, direct_id, mocker, django_capture_on_commit_callbacks
    ):
        deliver = mocker.patch("realtime.publisher.deliver")

        with django_capture_on_commit_callbacks(execute=True):
            MessageService.send(direct_id, alice, text="hi")

        (topics,), _ = deliver.call_args
        assert set(topics) == {
            f"conversation.{direct_id}",
            f"conversations.{alice.pk}",
            f"conversations.{bob.pk}",
        }

    @pytest.mark.django_db(transaction=True)
    def test_transient_failure_appends_nothing(self, mocker):
        """
        A failing append is retried as a whole and then reported.

        Why it matters: The log head must never advance without its message,
        or the sequence would have a hole.
        """
        alice, bob = UserFactory(), UserFactory()
        make_friends(alice, bob)
        cid = direct_conversation_id(alice.pk, bob.pk)
        mocker.patch("realtime.publisher.deliver")
        mocker.patch.object(
            Message.objects, "create", side_effect=OperationalError("lock timeout")
        )
        mocker.patch("core.decorators.time.sleep")

        result = MessageService.send(cid, alice, text="hi")

        assert result.error_code == ErrorCode.TRANSIENT
        assert not ConversationLog.objects.filter(pk=cid, last_sequence__gt=0).exists()


class TestDirectMessageScenario:
    """A sends "hi" to B in a fresh direct conversation."""

    def test_both_see_one_unseen_message_until_b_views_it(self, alice, bob, friends):
        cid = direct_conversation_id(bob.pk, alice.pk)

        MessageService.send(cid, alice, text="hi")

        for viewer in (alice, bob):
            assert ConversationService.check_read(cid, viewer).success
            messages = list(MessageService.tail(cid))
            assert len(messages) == 1
            assert messages[0].text == "hi"
            assert messages[0].sender_id == alice.pk
            assert messages[0].seen is False

        MessageService.mark_seen(cid, messages[0].pk, bob)

        assert MessageService.tail(cid).get().seen is True


class TestOrdering:
    """Timestamps never go backwards within a conversation."""

    def test_clock_moving_backwards_keeps_order(self, alice, bob, friends, direct_id):
        """
        A later append never gets an earlier timestamp.

        Why it matters: Clients sort by timestamp; a clock step back would
        otherwise reorder the conversation.
        """
        with freeze_time("2026-03-01 12:00:00"):
            first = MessageService.send(direct_id, alice, text="first").data
        with freeze_time("2026-03-01 11:59:00"):
            second = MessageService.send(direct_id, bob, text="second").data

        assert second.timestamp == first.timestamp
        assert list(MessageService.tail(direct_id)) == [first, second]

    def test_tail_timestamps_are_non_decreasing(self, alice, bob, friends, direct_id):
        start = "2026-03-01 12:00:00"
        with freeze_time(start) as clock:
            for i in range(6):
                sender = alice if i % 2 else bob
                MessageService.send(direct_id, sender, text=str(i))
                # Alternate forward and backward steps
                clock.tick(timedelta(seconds=-30 if i % 2 else 45))

        stamps = [m.timestamp for m in MessageService.tail(direct_id)]
        assert stamps == sorted(stamps)
        assert [m.text for m in MessageService.tail(direct_id)] == [str(i) for i in range(6)]


class TestMarkSeen:
    """Tests for MessageService.mark_seen and mark_conversation_seen."""

    def test_is_idempotent(self, alice, bob, friends, direct_id):
        message = MessageService.send(direct_id, alice, text="hi").data

        first = MessageService.mark_seen(direct_id, message.pk, bob)
        second = MessageService.mark_seen(direct_id, message.pk, bob)

        assert first.success and first.data is True
        assert second.success and second.data is False
        message.refresh_from_db()
        assert message.seen is True

    def test_own_message_is_untouched(self, alice, friends, direct_id):
        message = MessageService.send(direct_id, alice, text="hi").data

        result = MessageService.mark_seen(direct_id, message.pk, alice)

        assert result.success and result.data is False
        message.refresh_from_db()
        assert message.seen is False

    def test_system_message_is_untouched(self, bob, trip):
        system = MessageService.tail(trip.conversation_id).first()

        result = MessageService.mark_seen(trip.conversation_id, system.pk, bob)

        assert result.data is False

    @pytest.mark.parametrize("message_id", [uuid.uuid4(), "garbage"])
    def test_missing_message_is_silent(self, bob, friends, direct_id, message_id):
        result = MessageService.mark_seen(direct_id, message_id, bob)

        assert result.success and result.data is False

    def test_message_from_other_conversation_is_untouched(self, alice, bob, friends, direct_id, trip):
        message = MessageService.send(trip.conversation_id, alice, text="hi").data

        result = MessageService.mark_seen(direct_id, message.pk, bob)

        assert result.data is False

    def test_outsider_forbidden(self, alice, carol, friends, direct_id):
        message = MessageService.send(direct_id, alice, text="hi").data

        result = MessageService.mark_seen(direct_id, message.pk, carol)

        assert result.error_code == ErrorCode.FORBIDDEN

    def test_mark_conversation_seen(self, alice, bob, friends, direct_id):
        MessageService.send(direct_id, alice, text="1")
        MessageService.send(direct_id, alice, text="2")
        MessageService.send(direct_id, bob, text="mine")

        result = MessageService.mark_conversation_seen(direct_id, bob)

        assert result.data == 2
        assert MessageService.unread_count(direct_id, bob.pk) == 0
        assert Message.objects.get(text="mine").seen is False


class TestRecentWindow:
    """Tests for MessageService.recent and unread counts."""

    def test_newest_first_and_bounded(self, alice, friends, direct_id):
        for i in range(5):
            MessageService.send(direct_id, alice, text=str(i))

        recent = MessageService.recent(direct_id, limit=3)

        assert [m.text for m in recent] == ["4", "3", "2"]

    @pytest.mark.parametrize(
        "limit,expected", [(None, 20), (0, 1), (500, 100), ("7", 7), ("x", 20)]
    )
    def test_window_is_clamped(self, limit, expected):
        assert MessageService.clamp_window(limit) == expected

    def test_unread_counts_only_others_unseen_user_messages(self, alice, bob, trip):
        MessageService.send(trip.conversation_id, alice, text="a1")
        MessageService.send(trip.conversation_id, alice, text="a2")
        MessageService.send(trip.conversation_id, bob, text="b1")

        assert MessageService.unread_count(trip.conversation_id, bob.pk) == 2
        assert MessageService.unread_count(trip.conversation_id, alice.pk) == 1

    def test_group_read_by_one_member_stays_unread_for_others(self, alice, bob, carol):
        """
        In a group, bob reading a message leaves it unread for carol.

        Why it matters: Groups share one seen flag per message. Counting it
        would let the first reader clear everyone else's unread badge.
        """
        group = GroupService.create_group(
            alice, "Trip", member_ids=[bob.pk, carol.pk]
        ).data
        message = MessageService.send(group.conversation_id, alice, text="hello").data

        MessageService.mark_seen(group.conversation_id, message.pk, bob)

        assert Message.objects.get(pk=message.pk).seen is True
        assert MessageService.unread_count(group.conversation_id, carol.pk) == 1
        assert MessageService.unread_count(group.conversation_id, bob.pk) == 1
        assert MessageService.unread_count(group.conversation_id, alice.pk) == 0

    def test_direct_read_clears_unread(self, alice, bob, friends, direct_id):
        message = MessageService.send(direct_id, alice, text="hello").data

        MessageService.mark_seen(direct_id, message.pk, bob)

        assert MessageService.unread_count(direct_id, bob.pk) == 0

    def test_unread_only_within_window(self, bob):
        cid = str(uuid.uuid4())
        for _ in range(3):
            MessageFactory(conversation_id=cid)

        assert MessageService.unread_count(cid, bob.pk, limit=2) == 2


# =============================================================================
# ConversationService
# =============================================================================


class TestListConversations:
    """Tests for ConversationService.list_conversations."""

    def test_lists_groups_and_friends_with_summaries(self, alice, bob, carol, friends, trip):
        direct_id = direct_conversation_id(alice.pk, bob.pk)
        with freeze_time("2030-01-01 10:00:00"):
            MessageService.send(direct_id, alice, text="hello bob")

        summaries = ConversationService.list_conversations(bob)

        assert [s.conversation_id for s in summaries] == [direct_id, trip.conversation_id]
        direct = summaries[0]
        assert direct.kind == ConversationService.DIRECT
        assert direct.name == "Alice"
        assert direct.other_user_id == alice.pk
        assert direct.last_message.text == "hello bob"
        assert direct.unread_count == 1
        group = summaries[1]
        assert group.kind == ConversationService.GROUP
        assert group.name == "Trip"
        assert group.last_message.message_type == MessageType.SYSTEM
        assert group.unread_count == 0

    def test_non_friends_and_foreign_groups_are_excluded(self, alice, carol, trip):
        assert ConversationService.list_conversations(carol) == []

    def test_friend_without_messages_is_listed(self, alice, bob, friends):
        (summary,) = ConversationService.list_conversations(alice)

        assert summary.last_message is None
        assert summary.unread_count == 0

    def test_group_summary_ignores_shared_seen_flag(self, alice, bob, carol):
        group = GroupService.create_group(
            alice, "Trip", member_ids=[bob.pk, carol.pk]
        ).data
        MessageService.send(group.conversation_id, alice, text="hello")
        MessageService.mark_conversation_seen(group.conversation_id, bob)

        (summary,) = ConversationService.list_conversations(carol)

        assert summary.kind == ConversationService.GROUP
        assert summary.unread_count == 1


class TestCheckRead:
    def test_former_friend_can_still_read(self, alice, bob, direct_id):
        assert ConversationService.check_read(direct_id, alice).success
        assert ConversationService.check_post(direct_id, alice).error_code == ErrorCode.FORBIDDEN

    def test_removed_member_loses_access(self, alice, bob, trip):
        GroupService.remove_member(trip.pk, alice, bob.pk)

        assert ConversationService.check_read(trip.conversation_id, bob).error_code == ErrorCode.FORBIDDEN
