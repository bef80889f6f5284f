"""
Test configuration and fixtures for identity tests.

API client fixtures (api_client, authenticated_client_factory) live in the
root conftest.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/profile/')
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import NamedUserFactory, UserFactory


@pytest.fixture
def user(db):
    """User with an incomplete profile (no display name yet)."""
    return UserFactory()


@pytest.fixture
def named_user(db):
    """User with a completed profile."""
    return NamedUserFactory(profile__display_name="Ada")


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated user (is_active=False)."""
    return UserFactory(is_active=False)


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    """API client authenticated with a JWT for the default user fixture."""
    return authenticated_client_factory(user)
