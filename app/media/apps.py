"""
Media application configuration.

This app provides the media store:
- Images stored at client-chosen paths (profiles/..., chats/...)
- Path references resolved to versioned public URLs
"""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    """Configuration for the media store."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "media"
    verbose_name = "Media store"
