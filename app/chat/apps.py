"""
Chat application configuration.

This app provides the conversation registry and message log:
- Direct conversations (derived ids, no storage) and group conversations
- Group membership as an append-only log plus a member projection
- Ordered, append-only message logs with a one-way seen flag
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
