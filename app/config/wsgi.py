"""
WSGI entry point.

Serves the REST API and admin only; WebSocket subscriptions need the ASGI
application in config.asgi (run under Uvicorn). Kept for tooling and
hosts that only speak WSGI.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
