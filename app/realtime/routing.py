"""
WebSocket URL routing for the realtime application.

URL Patterns:
    ws/realtime/ - The single live subscription endpoint

Authentication:
    JWT access token as ?token=<jwt> or as the "jwt, <token>" subprotocol
    pair, resolved by realtime.middleware.JWTAuthMiddleware.
"""

from django.urls import path

from realtime import consumers

websocket_urlpatterns = [
    path("ws/realtime/", consumers.RealtimeConsumer.as_asgi()),
]
