"""
Test configuration and fixtures for media store tests.
"""

import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from authentication.tests.factories import UserFactory
from chat.identifiers import direct_conversation_id
from social.tests.factories import make_friends


def make_image_bytes(image_format: str = "PNG", size=(8, 8), color="red") -> bytes:
    """Encode a small solid-color image."""
    image = Image.new("RGB", size, color=color)
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


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
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", color="blue")


@pytest.fixture
def png_upload(png_bytes) -> SimpleUploadedFile:
    return SimpleUploadedFile("photo.png", png_bytes, content_type="image/png")


@pytest.fixture
def text_upload() -> SimpleUploadedFile:
    """Plain text pretending to be a JPEG."""
    return SimpleUploadedFile("photo.jpg", b"definitely not an image", content_type="image/jpeg")


@pytest.fixture
def alice_client(authenticated_client_factory, alice):
    return authenticated_client_factory(alice)
