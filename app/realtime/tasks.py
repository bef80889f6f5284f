"""
Celery tasks for the realtime fan-out.

Tasks:
    - deliver_topics: Redeliver topic notifications after a channel layer failure
"""

import logging

from celery import shared_task
from django.conf import settings

from core.exceptions import TransientError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(TransientError,),
    retry_backoff=True,
    retry_backoff_max=60,
    retry_jitter=True,
    max_retries=settings.FANOUT_MAX_RETRIES,
)
def deliver_topics(self, topics: list[str]) -> int:
    """
    Redeliver topic.changed events to the channel layer.

    Retries with exponential backoff while the layer keeps failing. When
    retries are exhausted the notifications are dropped; subscribers still
    converge on their next snapshot or reconnect.

    Returns:
        Number of topics delivered
    """
    from realtime.publisher import deliver

    try:
        deliver(topics)
    except TransientError:
        if self.request.retries >= self.max_retries:
            logger.error(
                f"Fan-out redelivery exhausted after {self.request.retries} "
                f"retries: {', '.join(topics)}"
            )
        raise

    logger.info(f"Redelivered {len(topics)} topic(s) after fan-out failure")
    return len(topics)
