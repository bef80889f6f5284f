"""
Tests for JWTAuthMiddleware.
"""

import pytest

from realtime.middleware import JWTAuthMiddleware
from realtime.tests.conftest import access_token_for

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


async def run_middleware(scope) -> dict:
    """Run the middleware around an app that records the scope it receives."""
    captured = {}

    async def inner(scope, receive, send):
        captured.update(scope)

    await JWTAuthMiddleware(inner)({"type": "websocket", **scope}, None, None)
    return captured


class TestJWTAuthMiddleware:
    """Tests for token extraction and validation."""

    async def test_query_string_token(self, alice, alice_token):
        scope = await run_middleware({"query_string": f"token={alice_token}".encode()})

        assert scope["user"].pk == alice.pk

    async def test_subprotocol_token(self, alice, alice_token):
        scope = await run_middleware({"subprotocols": ["jwt", alice_token]})

        assert scope["user"].pk == alice.pk

    async def test_no_token_is_anonymous(self):
        scope = await run_middleware({"query_string": b""})

        assert not scope["user"].is_authenticated

    async def test_garbage_token_is_anonymous(self):
        scope = await run_middleware({"query_string": b"token=garbage"})

        assert not scope["user"].is_authenticated

    async def test_inactive_user_is_anonymous(self, inactive_token):
        scope = await run_middleware({"query_string": f"token={inactive_token}".encode()})

        assert not scope["user"].is_authenticated


@pytest.fixture
def inactive_token(alice):
    token = access_token_for(alice)
    alice.is_active = False
    alice.save(update_fields=["is_active"])
    return token
