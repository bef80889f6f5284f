"""
Tests for RealtimeConsumer.

These drive the consumer through WebsocketCommunicator against the
in-memory channel layer. Service calls that publish topics run through
database_sync_to_async, the same way production code reaches them from
request threads.
"""

import pytest
from channels.db import database_sync_to_async

from authentication.models import Profile
from chat.services import GroupService, MessageService
from realtime.constants import CloseCode
from realtime.tests.conftest import group_members, make_communicator
from realtime.topics import conversation_topic, friends_topic
from social.services import FriendshipService

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]

TIMEOUT = 3


async def subscribe(ws, sub_id, query):
    await ws.send_json_to({"action": "subscribe", "id": sub_id, "query": query})
    return await ws.receive_json_from(timeout=TIMEOUT)


class TestConnect:
    """Tests for connection authentication."""

    async def test_rejects_missing_token(self):
        ws = make_communicator()

        connected, code = await ws.connect()

        assert not connected
        assert code == CloseCode.UNAUTHENTICATED

    async def test_rejects_invalid_token(self, alice):
        ws = make_communicator(token="not-a-jwt")

        connected, code = await ws.connect()

        assert not connected
        assert code == CloseCode.UNAUTHENTICATED

    async def test_accepts_query_string_token(self, alice_token):
        ws = make_communicator(token=alice_token)

        connected, _ = await ws.connect()

        assert connected
        await ws.disconnect()

    async def test_accepts_subprotocol_token(self, alice_token):
        ws = make_communicator(subprotocols=["jwt", alice_token])

        connected, subprotocol = await ws.connect()

        assert connected
        assert subprotocol == "jwt"
        await ws.disconnect()

    async def test_connect_touches_last_seen(self, alice, alice_token):
        ws = make_communicator(token=alice_token)
        await ws.connect()
        await ws.send_json_to({"action": "ping"})
        await ws.receive_json_from(timeout=TIMEOUT)

        profile = await database_sync_to_async(Profile.objects.get)(user=alice)

        assert profile.last_seen is not None
        await ws.disconnect()


class TestSubscribe:
    """Tests for subscribe, unsubscribe and ping."""

    async def test_ping_pong(self, alice_token):
        ws = make_communicator(token=alice_token)
        await ws.connect()

        await ws.send_json_to({"action": "ping"})

        assert await ws.receive_json_from(timeout=TIMEOUT) == {"type": "pong"}
        await ws.disconnect()

    async def test_subscribe_emits_current_state(self, friends, alice_token):
        ws = make_communicator(token=alice_token)
        await ws.connect()

        snapshot = await subscribe(ws, "f", "friends")

        assert snapshot["type"] == "snapshot"
        assert snapshot["id"] == "f"
        assert snapshot["query"] == "friends"
        assert snapshot["version"] == 1
        assert [f["display_name"] for f in snapshot["data"]] == ["Bob"]
        await ws.disconnect()

    async def test_forbidden_conversation_is_rejected(self, friends, direct_id, carol_token):
        ws = make_communicator(token=carol_token)
        await ws.connect()

        reply = await subscribe(ws, "t", f"tail:{direct_id}")

        assert reply["type"] == "error"
        assert reply["id"] == "t"
        assert reply["error_code"] == "FORBIDDEN"
        assert not group_members(conversation_topic(direct_id))
        await ws.disconnect()

    @pytest.mark.parametrize(
        "query,error_code",
        [
            ("everything", "VALIDATION_ERROR"),
            ("tail:not-a-conversation", "NOT_FOUND"),
            ("profile:nobody", "NOT_FOUND"),
        ],
    )
    async def test_invalid_queries(self, alice_token, query, error_code):
        ws = make_communicator(token=alice_token)
        await ws.connect()

        reply = await subscribe(ws, "q", query)

        assert reply["error_code"] == error_code
        await ws.disconnect()

    async def test_unknown_action(self, alice_token):
        ws = make_communicator(token=alice_token)
        await ws.connect()

        await ws.send_json_to({"action": "shout", "id": "x"})
        reply = await ws.receive_json_from(timeout=TIMEOUT)

        assert reply["type"] == "error"
        assert reply["error_code"] == "VALIDATION_ERROR"
        await ws.disconnect()

    async def test_unsubscribe_stops_delivery_and_is_idempotent(
        self, friends, direct_id, alice, bob_token
    ):
        """
        Unsubscribing twice is harmless and nothing arrives afterwards.

        Why it matters: Clients unsubscribe from cleanup paths that can run
        more than once (unmount, reconnect); the second call must not fail.
        """
        ws = make_communicator(token=bob_token)
        await ws.connect()
        await subscribe(ws, "t", f"tail:{direct_id}")

        await ws.send_json_to({"action": "unsubscribe", "id": "t"})
        await ws.send_json_to({"action": "unsubscribe", "id": "t"})
        await database_sync_to_async(MessageService.send)(direct_id, alice, text="hi")

        assert await ws.receive_nothing(timeout=0.5)
        assert not group_members(conversation_topic(direct_id))
        await ws.disconnect()


class TestLiveUpdates:
    """Tests for snapshots pushed after writes."""

    async def test_direct_message_reaches_both_tails(
        self, friends, direct_id, alice_token, bob_token
    ):
        """
        A sends "hi" to B: both tails show exactly that message, then B
        marks it seen and both tails show seen=true.
        """
        alice, bob = friends
        alice_ws = make_communicator(token=alice_token)
        bob_ws = make_communicator(token=bob_token)
        await alice_ws.connect()
        await bob_ws.connect()
        for ws in (alice_ws, bob_ws):
            initial = await subscribe(ws, "t", f"tail:{direct_id}")
            assert initial["data"] == []

        sent = await database_sync_to_async(MessageService.send)(direct_id, alice, text="hi")

        for ws in (alice_ws, bob_ws):
            snapshot = await ws.receive_json_from(timeout=TIMEOUT)
            assert snapshot["version"] == 2
            assert len(snapshot["data"]) == 1
            message = snapshot["data"][0]
            assert message["text"] == "hi"
            assert message["sender_id"] == str(alice.pk)
            assert message["seen"] is False

        await database_sync_to_async(MessageService.mark_seen)(direct_id, sent.data.pk, bob)

        for ws in (alice_ws, bob_ws):
            snapshot = await ws.receive_json_from(timeout=TIMEOUT)
            assert snapshot["version"] == 3
            assert snapshot["data"][0]["seen"] is True

        await alice_ws.disconnect()
        await bob_ws.disconnect()

    async def test_recent_window_is_newest_first(self, friends, direct_id, alice_token):
        alice, _ = friends
        ws = make_communicator(token=alice_token)
        await ws.connect()
        await subscribe(ws, "r", f"recent:{direct_id}:2")

        for text in ("one", "two", "three"):
            await database_sync_to_async(MessageService.send)(direct_id, alice, text=text)
            snapshot = await ws.receive_json_from(timeout=TIMEOUT)

        assert [m["text"] for m in snapshot["data"]] == ["three", "two"]
        await ws.disconnect()

    async def test_friend_request_reaches_recipient(self, alice, bob, bob_token):
        ws = make_communicator(token=bob_token)
        await ws.connect()
        initial = await subscribe(ws, "req", "friend_requests")
        assert initial["data"] == []

        await database_sync_to_async(FriendshipService.send_request)(alice, str(bob.pk))

        snapshot = await ws.receive_json_from(timeout=TIMEOUT)
        assert snapshot["version"] == 2
        assert [r["from_name"] for r in snapshot["data"]] == ["Alice"]
        await ws.disconnect()

    async def test_removed_member_loses_group_tail(self, trip, alice, carol, carol_token):
        """
        A member removed from a group gets an error on their tail
        subscription instead of further snapshots.

        Why it matters: Authorization is checked at subscribe time; without
        the re-check the removed member would keep reading the group.
        """
        ws = make_communicator(token=carol_token)
        await ws.connect()
        initial = await subscribe(ws, "g", f"tail:{trip.conversation_id}")
        assert initial["type"] == "snapshot"

        await database_sync_to_async(GroupService.remove_member)(trip.pk, alice, carol.pk)

        reply = await ws.receive_json_from(timeout=TIMEOUT)
        assert reply["type"] == "error"
        assert reply["id"] == "g"
        assert reply["error_code"] == "FORBIDDEN"

        await database_sync_to_async(MessageService.send)(
            trip.conversation_id, alice, text="after"
        )
        assert await ws.receive_nothing(timeout=0.5)
        await ws.disconnect()


class TestDisconnect:
    """Tests for subscription cleanup."""

    async def test_disconnect_leaves_every_group(self, friends, direct_id, alice_token):
        """
        No channel layer group keeps the connection after disconnect.

        Why it matters: Leaked group memberships keep receiving fan-out for
        dead channels until they expire, and grow with every reconnect.
        """
        alice, _ = friends
        ws = make_communicator(token=alice_token)
        await ws.connect()
        await subscribe(ws, "f", "friends")
        await subscribe(ws, "t", f"tail:{direct_id}")
        await subscribe(ws, "r", f"recent:{direct_id}:5")
        assert len(group_members(conversation_topic(direct_id))) == 1
        assert len(group_members(friends_topic(alice.pk))) == 1

        await ws.disconnect()

        assert not group_members(conversation_topic(direct_id))
        assert not group_members(friends_topic(alice.pk))
