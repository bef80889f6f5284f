"""
Tests for MediaStoreService.
"""

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from chat.identifiers import direct_conversation_id
from chat.tests.factories import GroupFactory
from core.exceptions import TransientError
from media.models import StoredObject
from media.services import MediaStoreService
from media.tests.conftest import make_image_bytes


@pytest.mark.django_db
class TestPut:
    """Tests for MediaStoreService.put."""

    def test_profile_photo_round_trip(self, alice, png_bytes):
        path = f"profiles/{alice.pk}"

        result = MediaStoreService.put(path, png_bytes, owner=alice)

        assert result.success
        stored = result.data
        assert stored.version == 1
        assert stored.content_type == "image/png"
        assert stored.size == len(png_bytes)
        assert default_storage.exists(stored.storage_name)
        assert MediaStoreService.resolve(path).data == (
            f"http://testserver/media/profiles/{alice.pk}.png?v=1"
        )

    def test_overwrite_bumps_version_and_url(self, alice, png_bytes):
        """
        Overwriting a path changes the resolved URL.

        Why it matters: Clients cache images by URL; a stale URL after a new
        profile photo would keep showing the old one.
        """
        path = f"profiles/{alice.pk}"
        MediaStoreService.put(path, png_bytes, owner=alice)
        first_url = MediaStoreService.resolve(path).data

        result = MediaStoreService.put(
            path, make_image_bytes("PNG", color="green"), owner=alice
        )

        assert result.data.version == 2
        assert StoredObject.objects.filter(pk=path).count() == 1
        second_url = MediaStoreService.resolve(path).data
        assert second_url != first_url
        assert second_url.endswith("?v=2")

    def test_overwrite_with_other_format_replaces_file(
        self, alice, png_bytes, jpeg_bytes, django_capture_on_commit_callbacks
    ):
        path = f"profiles/{alice.pk}"
        old_name = MediaStoreService.put(path, png_bytes, owner=alice).data.storage_name

        with django_capture_on_commit_callbacks(execute=True):
            stored = MediaStoreService.put(path, jpeg_bytes, owner=alice).data

        assert stored.content_type == "image/jpeg"
        assert stored.storage_name.endswith(".jpg")
        assert not default_storage.exists(old_name)

    def test_accepts_file_objects(self, alice, png_upload):
        result = MediaStoreService.put(f"profiles/{alice.pk}", png_upload, owner=alice)

        assert result.success

    def test_other_users_profile_is_forbidden(self, alice, bob, png_bytes):
        result = MediaStoreService.put(f"profiles/{bob.pk}", png_bytes, owner=alice)

        assert not result.success
        assert result.error_code == "FORBIDDEN"
        assert not StoredObject.objects.exists()

    def test_traversal_path_is_rejected(self, alice, png_bytes):
        result = MediaStoreService.put(
            f"profiles/{alice.pk}/../../secrets", png_bytes, owner=alice
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert "path" in result.errors

    def test_non_image_is_rejected(self, alice):
        result = MediaStoreService.put(
            f"profiles/{alice.pk}", b"#!/bin/sh\necho hi\n", owner=alice
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert "file" in result.errors
        assert not StoredObject.objects.exists()

    def test_oversized_image_is_rejected(self, alice, png_bytes, mocker):
        mocker.patch("media.validators.MEDIA_CONFIG.MAX_UPLOAD_BYTES", len(png_bytes) - 1)

        result = MediaStoreService.put(f"profiles/{alice.pk}", png_bytes, owner=alice)

        assert result.error_code == "VALIDATION_ERROR"

    def test_chat_image_for_direct_conversation(self, alice, bob, friends, png_bytes):
        cid = direct_conversation_id(alice.pk, bob.pk)

        result = MediaStoreService.put(f"chats/{cid}/beach.png", png_bytes, owner=alice)

        assert result.success
        assert result.data.storage_name == f"chats/{cid}/beach.png"

    def test_chat_image_requires_conversation_access(self, alice, bob, carol, png_bytes):
        cid = direct_conversation_id(alice.pk, bob.pk)

        result = MediaStoreService.put(f"chats/{cid}/beach.png", png_bytes, owner=carol)

        assert result.error_code == "FORBIDDEN"

    def test_group_chat_image_requires_membership(self, alice, bob, carol, png_bytes):
        group = GroupFactory(created_by=alice, members=[bob])
        path = f"chats/{group.conversation_id}/cover.png"

        assert MediaStoreService.put(path, png_bytes, owner=bob).success
        assert MediaStoreService.put(path, png_bytes, owner=carol).error_code == "FORBIDDEN"

    def test_cannot_overwrite_another_members_object(self, alice, bob, friends, png_bytes):
        cid = direct_conversation_id(alice.pk, bob.pk)
        path = f"chats/{cid}/beach.png"
        MediaStoreService.put(path, png_bytes, owner=alice)

        result = MediaStoreService.put(path, png_bytes, owner=bob)

        assert result.error_code == "FORBIDDEN"
        assert StoredObject.objects.get(pk=path).owner == alice

    def test_storage_failure_is_transient(self, alice, png_bytes, mocker):
        mocker.patch.object(default_storage, "save", side_effect=OSError("disk full"))

        with pytest.raises(TransientError):
            MediaStoreService.put(f"profiles/{alice.pk}", png_bytes, owner=alice)

        assert not StoredObject.objects.exists()

    def test_failed_overwrite_keeps_previous_content(self, alice, png_bytes, mocker):
        """
        A storage failure during an overwrite leaves the old object intact.

        Why it matters: The row rolls back to the previous content; if that
        content were already gone the reference would resolve to a dead URL.
        """
        path = f"profiles/{alice.pk}"
        first = MediaStoreService.put(path, png_bytes, owner=alice).data
        mocker.patch.object(default_storage, "save", side_effect=OSError("disk full"))

        with pytest.raises(TransientError):
            MediaStoreService.put(
                path, make_image_bytes("PNG", color="green"), owner=alice
            )

        stored = StoredObject.objects.get(pk=path)
        assert stored.version == 1
        assert stored.storage_name == first.storage_name
        assert default_storage.exists(stored.storage_name)
        assert MediaStoreService.resolve(path).data.endswith("?v=1")

    def test_overwrite_deletes_previous_content_after_commit(
        self, alice, png_bytes, django_capture_on_commit_callbacks
    ):
        path = f"profiles/{alice.pk}"
        old_name = MediaStoreService.put(path, png_bytes, owner=alice).data.storage_name

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            stored = MediaStoreService.put(
                path, make_image_bytes("PNG", color="green"), owner=alice
            ).data

        assert stored.storage_name != old_name
        assert default_storage.exists(old_name)
        for callback in callbacks:
            callback()
        assert not default_storage.exists(old_name)
        assert default_storage.exists(stored.storage_name)

    def test_concurrent_first_write_becomes_overwrite(self, alice, png_bytes, mocker):
        """
        Losing the race to create a new path is applied as an overwrite.

        Both writers saw no row; the loser's insert hits the primary key and
        must not surface as a server error.
        """
        path = f"profiles/{alice.pk}"
        winner = StoredObject.objects.create(
            path=path,
            owner=alice,
            storage_name=f"profiles/{alice.pk}-winner.png",
            content_type="image/png",
            size=1,
            checksum="0" * 64,
        )
        mocker.patch.object(
            MediaStoreService, "_lock_object", side_effect=[None, winner]
        )

        result = MediaStoreService.put(path, png_bytes, owner=alice)

        assert result.success
        stored = StoredObject.objects.get(pk=path)
        assert stored.version == 2
        assert stored.size == len(png_bytes)
        assert default_storage.exists(stored.storage_name)

    def test_concurrent_first_write_by_other_user_is_forbidden(
        self, alice, bob, friends, direct_id, png_bytes, mocker
    ):
        path = f"chats/{direct_id}/beach.png"
        winner = StoredObject.objects.create(
            path=path,
            owner=bob,
            storage_name=f"chats/{direct_id}/beach-winner.png",
            content_type="image/png",
            size=1,
            checksum="0" * 64,
        )
        mocker.patch.object(
            MediaStoreService, "_lock_object", side_effect=[None, winner]
        )
        discard = mocker.spy(MediaStoreService, "_discard")

        result = MediaStoreService.put(path, png_bytes, owner=alice)

        assert result.error_code == "FORBIDDEN"
        assert StoredObject.objects.get(pk=path).owner == bob
        discard.assert_called_once()

    def test_former_friend_cannot_upload_to_direct_chat(
        self, alice, bob, direct_id, png_bytes
    ):
        """
        Uploading into a direct chat needs the same right as posting to it.

        Why it matters: A former friend can still read the old conversation
        but must not add content to it.
        """
        result = MediaStoreService.put(
            f"chats/{direct_id}/beach.png", png_bytes, owner=alice
        )

        assert result.error_code == "FORBIDDEN"
        assert not StoredObject.objects.exists()


@pytest.mark.django_db
class TestResolve:
    """Tests for MediaStoreService.resolve."""

    @pytest.mark.parametrize("path", ["profiles/nobody", "", None])
    def test_unknown_path_is_not_found(self, path):
        result = MediaStoreService.resolve(path)

        assert result.error_code == "NOT_FOUND"

    def test_absolute_storage_urls_are_kept(self, alice, png_bytes, mocker):
        stored = MediaStoreService.put(f"profiles/{alice.pk}", ContentFile(png_bytes), owner=alice).data
        mocker.patch.object(
            default_storage, "url", return_value="https://cdn.example.com/a.png?sig=1"
        )

        url = MediaStoreService.public_url(stored)

        assert url == "https://cdn.example.com/a.png?sig=1&v=1"
