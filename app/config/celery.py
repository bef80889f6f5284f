"""
Celery configuration for the messaging backend.

Background work handled by Celery:
- Redelivery of realtime topic publishes after a channel layer failure
  (realtime.tasks.deliver_topics)
- Periodic verification of group membership projections against the
  membership event log (chat.tasks.verify_group_memberships)

Redis is both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps; the periodic schedule is
CELERY_BEAT_SCHEDULE in settings.

Usage:
    celery -A config worker -l info
    celery -A config beat -l info

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
