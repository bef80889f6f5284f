"""
Constants and configuration for the conversation registry and message log.

Import example:
    from chat.constants import MESSAGE_CONFIG, GROUP_CONFIG
"""

from typing import Final

from django.conf import settings


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits
    MAX_TEXT_LENGTH: Final[int] = 10000  # Characters
    MAX_IMAGE_URL_LENGTH: Final[int] = 500

    # Recent window used for previews and unread counts
    RECENT_WINDOW_DEFAULT: Final[int] = getattr(settings, "MESSAGE_RECENT_WINDOW", 20)
    RECENT_WINDOW_MAX: Final[int] = 100

    # Conversation list preview
    PREVIEW_LENGTH: Final[int] = 80


# =============================================================================
# Group Configuration
# =============================================================================


class GROUP_CONFIG:
    """Configuration for group conversations."""

    MAX_NAME_LENGTH: Final[int] = 100
    MAX_INITIAL_MEMBERS: Final[int] = 256
