"""
Constants and configuration for the realtime fan-out.

Import example:
    from realtime.constants import REALTIME_CONFIG, CloseCode
"""

from typing import Final

from django.conf import settings


class REALTIME_CONFIG:
    """Configuration for WebSocket subscriptions."""

    # Subscriptions per connection
    MAX_SUBSCRIPTIONS: Final[int] = getattr(settings, "REALTIME_MAX_SUBSCRIPTIONS", 100)

    # Client-chosen subscription ids
    MAX_SUBSCRIPTION_ID_LENGTH: Final[int] = 64

    # JWT subprotocol marker: Sec-WebSocket-Protocol: jwt, <token>
    JWT_SUBPROTOCOL: Final[str] = "jwt"


class CloseCode:
    """Application WebSocket close codes."""

    UNAUTHENTICATED: Final[int] = 4001
