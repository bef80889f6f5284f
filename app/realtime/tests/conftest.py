"""
Test configuration and fixtures for realtime tests.

Consumer tests run against the in-memory channel layer with
transaction=True databases, because consumers reach the database from
worker threads that cannot see an open test transaction.
"""

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.identifiers import direct_conversation_id
from realtime.middleware import JWTAuthMiddleware
from realtime.routing import websocket_urlpatterns
from social.tests.factories import make_friends

# Same stack as config.asgi minus the origin check, which needs an Origin header
application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))


def access_token_for(user) -> str:
    return str(RefreshToken.for_user(user).access_token)


def make_communicator(token=None, subprotocols=None) -> WebsocketCommunicator:
    """
    Communicator for ws/realtime/.

    The token goes in the query string unless subprotocols are given.
    Create tokens outside async tests: issuing one writes to the database.
    """
    path = "/ws/realtime/"
    if token is not None and subprotocols is None:
        path += f"?token={token}"
    return WebsocketCommunicator(application, path, subprotocols=subprotocols)


def group_members(topic) -> dict:
    """Channels currently in a topic group of the in-memory layer."""
    return get_channel_layer().groups.get(topic, {})


@pytest.fixture(autouse=True)
def clean_channel_layer():
    yield
    async_to_sync(get_channel_layer().flush)()


@pytest.fixture
def alice(db):
    return UserFactory(email="alice@example.com", profile__display_name="Alice")


@pytest.fixture
def bob(db):
    return UserFactory(email="bob@example.com", profile__display_name="Bob")


@pytest.fixture
def carol(db):
    return UserFactory(email="carol@example.com", profile__display_name="Carol")


@pytest.fixture
def friends(alice, bob):
    make_friends(alice, bob)
    return alice, bob


@pytest.fixture
def direct_id(alice, bob):
    return direct_conversation_id(alice.pk, bob.pk)


@pytest.fixture
def trip(alice, bob, carol):
    """Group "Trip" created by Alice with Bob and Carol."""
    from chat.services import GroupService

    return GroupService.create_group(alice, "Trip", member_ids=[bob.pk, carol.pk]).data


@pytest.fixture
def alice_token(alice):
    return access_token_for(alice)


@pytest.fixture
def bob_token(bob):
    return access_token_for(bob)


@pytest.fixture
def carol_token(carol):
    return access_token_for(carol)
