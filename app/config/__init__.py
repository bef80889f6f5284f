# Project configuration: settings, URL routing, ASGI/WSGI entry points and
# the Celery app. Importing the Celery app here lets `celery -A config`
# discover the chat and realtime tasks.

from config.celery import app as celery_app

__all__ = ("celery_app",)
