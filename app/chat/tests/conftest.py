"""
Test configuration and fixtures for chat tests.
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.identifiers import direct_conversation_id
from chat.services import GroupService
from social.tests.factories import make_friends


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
    """Alice and Bob are friends."""
    return make_friends(alice, bob)


@pytest.fixture
def direct_id(alice, bob):
    return direct_conversation_id(alice.pk, bob.pk)


@pytest.fixture
def trip(alice, bob):
    """Group "Trip" created by Alice with Bob as member."""
    return GroupService.create_group(alice, "Trip", member_ids=[bob.pk]).data


@pytest.fixture
def alice_client(authenticated_client_factory, alice):
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(authenticated_client_factory, bob):
    return authenticated_client_factory(bob)


@pytest.fixture
def carol_client(authenticated_client_factory, carol):
    return authenticated_client_factory(carol)
