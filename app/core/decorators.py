"""
Custom decorators for service functions.

This module provides:
- retry_transient: Re-run a whole write unit after a transient database error

Usage:
    from core.decorators import retry_transient

    class FriendshipService(BaseService):
        @classmethod
        @retry_transient()
        def resolve_request(cls, request_id, owner, accept):
            with cls.atomic():
                ...

Note:
    - The decorated function must open its own transaction so each attempt
      starts from a clean state; a retry never resumes a partial write.
    - Apply it below @classmethod.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Callable

from django.db import OperationalError, connection

from core.exceptions import ErrorCode
from core.services import ServiceResult

logger = logging.getLogger(__name__)


def retry_transient(attempts: int = 3, backoff: float = 0.05):
    """
    Retry a service call on OperationalError (deadlock, lock timeout, lost
    connection) and report TRANSIENT once attempts are exhausted.

    Args:
        attempts: Total number of attempts, first call included
        backoff: Base delay in seconds, doubled after each failure

    Returns:
        Decorator function

    Example:
        @retry_transient(attempts=5)
        def send(cls, conversation_id, sender, text=None, image_url=None):
            ...
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            # Inside an outer transaction a retry cannot roll back the
            # caller's work, so let the error propagate.
            if connection.in_atomic_block:
                return func(*args, **kwargs)

            delay = backoff
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except OperationalError as e:
                    if attempt == attempts:
                        logger.error(
                            f"{func.__qualname__} failed after {attempts} attempts: {e}"
                        )
                        return ServiceResult.failure(
                            "Temporary storage failure, please retry",
                            error_code=ErrorCode.TRANSIENT,
                        )
                    logger.warning(
                        f"{func.__qualname__} attempt {attempt} failed, retrying: {e}"
                    )
                    time.sleep(delay)
                    delay *= 2

        return wrapper

    return decorator
