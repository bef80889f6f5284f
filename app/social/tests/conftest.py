"""
Test configuration and fixtures for relationship graph tests.
"""

import pytest

from authentication.tests.factories import UserFactory


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
def alice_client(authenticated_client_factory, alice):
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(authenticated_client_factory, bob):
    return authenticated_client_factory(bob)
