"""
Tests for realtime Celery tasks.
"""

import pytest
from django.conf import settings

from core.exceptions import TransientError
from realtime.tasks import deliver_topics


class TestDeliverTopics:
    """Tests for deliver_topics."""

    def test_redelivers(self, mocker):
        deliver = mocker.patch("realtime.publisher.deliver")

        result = deliver_topics.apply(args=[["friends.a", "friends.b"]]).get()

        assert result == 2
        deliver.assert_called_once_with(["friends.a", "friends.b"])

    def test_exhausted_retries_are_logged(self, mocker):
        mocker.patch("realtime.publisher.deliver", side_effect=TransientError("down"))
        logger = mocker.patch("realtime.tasks.logger")

        with pytest.raises(TransientError):
            deliver_topics.apply(
                args=[["friends.a"]], retries=settings.FANOUT_MAX_RETRIES
            ).get()

        assert logger.error.called
