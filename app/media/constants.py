"""
Constants and configuration for the media store.

Import example:
    from media.constants import MEDIA_CONFIG
"""

from typing import Final

from django.conf import settings


class MEDIA_CONFIG:
    """Configuration for stored objects."""

    # Namespaces
    PROFILES_NAMESPACE: Final[str] = "profiles"
    CHATS_NAMESPACE: Final[str] = "chats"

    # Limits
    MAX_UPLOAD_BYTES: Final[int] = getattr(settings, "MEDIA_MAX_UPLOAD_MB", 10) * 1024 * 1024
    MAX_PATH_LENGTH: Final[int] = 255
    MAX_IMAGE_PIXELS: Final[int] = 50_000_000

    # Pillow format -> (content type, file extension)
    IMAGE_FORMATS: Final[dict[str, tuple[str, str]]] = {
        "JPEG": ("image/jpeg", ".jpg"),
        "PNG": ("image/png", ".png"),
        "GIF": ("image/gif", ".gif"),
        "WEBP": ("image/webp", ".webp"),
    }
