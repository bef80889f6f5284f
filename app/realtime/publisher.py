"""
Topic publishing for the realtime fan-out.

Services call publish() inside their write transaction with every topic
whose query results changed. Delivery waits for the commit, so subscribers
never observe state that was rolled back, and each topic is delivered at
most once per publish call.

A delivery is a Channels group_send of a tiny "topic.changed" event; the
consumer reacts by recomputing the snapshot of every subscription bound to
that topic. Events carry no payload, so duplicated or reordered deliveries
are harmless: the next snapshot always reflects the committed state.

Failure handling:
    If the channel layer is unreachable, delivery is handed to the
    deliver_topics Celery task which retries with exponential backoff
    (TRANSIENT). The write that triggered the publish has already
    committed and is never rolled back because of a fan-out failure.

Usage:
    from realtime.publisher import publish
    from realtime.topics import friends_topic

    with transaction.atomic():
        Friendship.objects.create(...)
        publish(friends_topic(a.pk), friends_topic(b.pk))
"""

from __future__ import annotations

import logging
from typing import Final

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from core.exceptions import TransientError

logger = logging.getLogger(__name__)

TOPIC_CHANGED_EVENT: Final[str] = "topic.changed"


def publish(*topics: str) -> None:
    """
    Schedule delivery of change notifications for topics after commit.

    Outside a transaction the callback runs immediately.
    """
    unique_topics = list(dict.fromkeys(t for t in topics if t))
    if not unique_topics:
        return

    transaction.on_commit(lambda: _deliver_or_retry(unique_topics))


def deliver(topics: list[str]) -> None:
    """
    Send a topic.changed event to every topic group.

    Raises:
        TransientError: If the channel layer is missing or rejects the send
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        raise TransientError("No channel layer configured")

    for topic in topics:
        try:
            async_to_sync(channel_layer.group_send)(
                topic, {"type": TOPIC_CHANGED_EVENT, "topic": topic}
            )
        except Exception as e:
            raise TransientError(
                "Channel layer send failed", details={"topic": topic}
            ) from e

    logger.debug(f"Published topics: {', '.join(topics)}")


def _deliver_or_retry(topics: list[str]) -> None:
    try:
        deliver(topics)
    except TransientError as e:
        logger.warning(f"Fan-out failed, scheduling redelivery: {e}")
        from realtime.tasks import deliver_topics

        deliver_topics.delay(topics)
