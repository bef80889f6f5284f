"""
WebSocket consumer for live subscriptions.

One connection per client at ws/realtime/; inside it the client opens any
number of subscriptions, each identified by a client-chosen id.

Authentication:
    JWTAuthMiddleware attaches the user to self.scope["user"]. Anonymous
    connections are closed with code 4001 before the handshake completes.

Channel Groups:
    Every topic (see realtime.topics) is a channel group. A connection
    joins a topic's group while at least one of its subscriptions is bound
    to it, and leaves every group on disconnect.

Messages (from client):
    {"action": "subscribe", "id": "s1", "query": "tail:<conversation id>"}
    {"action": "unsubscribe", "id": "s1"}
    {"action": "ping"}

Messages (to client):
    {"type": "snapshot", "id", "query", "version", "data"}
    {"type": "error", "id", "error_code", "error"}
    {"type": "pong"}

Each subscription emits its current state right after subscribing and a
full snapshot every time its topic is published. Events are handled one at
a time per connection, so snapshots of one subscription arrive in order
with strictly increasing versions.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder

from authentication.services import IdentityService
from core.exceptions import ErrorCode
from realtime.constants import REALTIME_CONFIG, CloseCode
from realtime.snapshots import Query, SnapshotService

logger = logging.getLogger(__name__)


@dataclass
class Subscription:
    """A live query of one connection."""

    id: str
    query: Query
    version: int = 0


class RealtimeConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer multiplexing live subscriptions.

    Attributes:
        user: Authenticated user (after connect)
        subscriptions: Active subscriptions by client id
        topics: Subscription ids bound to each joined topic
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.subscriptions: dict[str, Subscription] = {}
        self.topics: dict[str, set[str]] = {}

    @classmethod
    async def encode_json(cls, content):
        return json.dumps(content, cls=DjangoJSONEncoder)

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def connect(self):
        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning("Rejected unauthenticated realtime connection")
            await self.close(code=CloseCode.UNAUTHENTICATED)
            return

        self.user = user
        subprotocols = self.scope.get("subprotocols", [])
        if REALTIME_CONFIG.JWT_SUBPROTOCOL in subprotocols:
            await self.accept(subprotocol=REALTIME_CONFIG.JWT_SUBPROTOCOL)
        else:
            await self.accept()

        await database_sync_to_async(IdentityService.touch_last_seen)(user.pk)
        logger.info(f"User {user.pk} connected to realtime")

    async def disconnect(self, close_code):
        if self.user is None:
            return

        for topic in list(self.topics):
            await self.channel_layer.group_discard(topic, self.channel_name)
        self.topics.clear()
        self.subscriptions.clear()

        await database_sync_to_async(IdentityService.touch_last_seen)(self.user.pk)
        logger.info(f"User {self.user.pk} disconnected from realtime ({close_code})")

    # -------------------------------------------------------------------------
    # Client messages
    # -------------------------------------------------------------------------

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            await self._send_error(None, ErrorCode.VALIDATION_ERROR, "Expected a JSON object")
            return

        action = content.get("action")
        if action == "subscribe":
            await self._subscribe(content.get("id"), content.get("query"))
        elif action == "unsubscribe":
            await self._unsubscribe(content.get("id"))
        elif action == "ping":
            await self.send_json({"type": "pong"})
        else:
            await self._send_error(
                content.get("id"),
                ErrorCode.VALIDATION_ERROR,
                f"Unknown action: {action}",
            )

    async def _subscribe(self, sub_id, query_text):
        sub_id = self._clean_id(sub_id)
        if sub_id is None:
            await self._send_error(None, ErrorCode.VALIDATION_ERROR, "Invalid subscription id")
            return

        if (
            sub_id not in self.subscriptions
            and len(self.subscriptions) >= REALTIME_CONFIG.MAX_SUBSCRIPTIONS
        ):
            await self._send_error(sub_id, ErrorCode.INVALID_OPERATION, "Too many subscriptions")
            return

        result = await database_sync_to_async(SnapshotService.parse)(query_text, self.user)
        if not result:
            await self._send_error(sub_id, result.error_code, result.error)
            return

        # Reusing an id replaces the previous subscription.
        await self._unsubscribe(sub_id)

        query = result.data
        subscription = Subscription(id=sub_id, query=query)
        self.subscriptions[sub_id] = subscription
        # Join before the first snapshot so no publication falls in between.
        if query.topic not in self.topics:
            self.topics[query.topic] = set()
            await self.channel_layer.group_add(query.topic, self.channel_name)
        self.topics[query.topic].add(sub_id)

        logger.debug(f"User {self.user.pk} subscribed {sub_id} to {query.text}")
        await self._emit(subscription)

    async def _unsubscribe(self, sub_id):
        subscription = self.subscriptions.pop(self._clean_id(sub_id), None)
        if subscription is None:
            return

        topic = subscription.query.topic
        bound = self.topics.get(topic, set())
        bound.discard(subscription.id)
        if not bound:
            self.topics.pop(topic, None)
            await self.channel_layer.group_discard(topic, self.channel_name)

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def topic_changed(self, event):
        """Handle topic.changed events: push a fresh snapshot per subscription."""
        for sub_id in sorted(self.topics.get(event["topic"], ())):
            subscription = self.subscriptions.get(sub_id)
            if subscription is not None:
                await self._emit(subscription)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _emit(self, subscription: Subscription):
        result = await database_sync_to_async(SnapshotService.snapshot)(
            subscription.query, self.user
        )
        if not result:
            # Access was lost (e.g. removed from the group); end the subscription.
            await self._unsubscribe(subscription.id)
            await self._send_error(subscription.id, result.error_code, result.error)
            return

        subscription.version += 1
        await self.send_json(
            {
                "type": "snapshot",
                "id": subscription.id,
                "query": subscription.query.text,
                "version": subscription.version,
                "data": result.data,
            }
        )

    async def _send_error(self, sub_id, error_code: str, message: str):
        await self.send_json(
            {"type": "error", "id": sub_id, "error_code": error_code, "error": message}
        )

    @staticmethod
    def _clean_id(sub_id) -> str | None:
        if isinstance(sub_id, bool) or not isinstance(sub_id, (str, int)):
            return None
        sub_id = str(sub_id)
        if not sub_id or len(sub_id) > REALTIME_CONFIG.MAX_SUBSCRIPTION_ID_LENGTH:
            return None
        return sub_id
