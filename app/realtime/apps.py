"""
Realtime application configuration.

This app provides the notification fan-out:
- One WebSocket endpoint with any number of subscriptions
- Topic publishing from services, deferred until commit
"""

from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    """Configuration for the realtime application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"
    verbose_name = "Realtime"
