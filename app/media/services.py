"""
Media store service.

MediaStoreService stores images at client-chosen paths and resolves those
paths (references) to public URLs.

    put      validate path + ownership + content, then write (overwrite)
    resolve  reference -> absolute URL carrying the content version

Authorization:
    profiles/{uid}          only the user {uid}
    chats/{cid}/{name}      users who can post to conversation {cid}; an
                            existing object can only be overwritten by its owner

Storage failures raise TransientError (rendered as 503 TRANSIENT); the
metadata row is only written when the content write succeeded. An overwrite
stores the new content under a fresh name and deletes the previous content
after commit, so a failed overwrite leaves the old object resolvable.

Usage:
    from media.services import MediaStoreService

    result = MediaStoreService.put(f"profiles/{user.pk}", upload, owner=user)
    url = MediaStoreService.resolve(result.data.path).data
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlparse

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import IntegrityError, transaction

from chat.services import ConversationService
from core.exceptions import ErrorCode, TransientError
from core.services import BaseService, ServiceResult
from media.constants import MEDIA_CONFIG
from media.models import StoredObject
from media.validators import ImageValidator, ObjectPath, validate_object_path

if TYPE_CHECKING:
    from authentication.models import User


def _checksum(file) -> str:
    digest = hashlib.sha256()
    file.seek(0)
    for chunk in iter(lambda: file.read(64 * 1024), b""):
        digest.update(chunk)
    file.seek(0)
    return digest.hexdigest()


class MediaStoreService(BaseService):
    """
    Put and resolve stored objects.

    Usage:
        result = MediaStoreService.put("chats/<cid>/beach.jpg", data, owner=alice)
        if result.success:
            MediaStoreService.public_url(result.data)
    """

    @classmethod
    def _authorize(cls, object_path: ObjectPath, owner: User) -> ServiceResult | None:
        if object_path.namespace == MEDIA_CONFIG.PROFILES_NAMESPACE:
            if object_path.owner_id != owner.pk:
                return ServiceResult.failure(
                    "You can only upload your own profile photo",
                    error_code=ErrorCode.FORBIDDEN,
                )
            return None

        access = ConversationService.check_post(object_path.conversation_id, owner)
        if not access:
            return ServiceResult.failure(
                "You cannot upload to this conversation",
                error_code=ErrorCode.FORBIDDEN,
            )
        return None

    @classmethod
    def put(
        cls,
        path: str,
        data,
        owner: User,
        content_type: str | None = None,
    ) -> ServiceResult[StoredObject]:
        """
        Store an image at path, replacing any previous content.

        Args:
            path: Object reference (see module docstring)
            data: bytes or a file-like object
            owner: Uploading user
            content_type: Declared content type; informational, the stored
                          type is the one detected from the content

        Returns:
            ServiceResult with the StoredObject (version 1 on first write)

        Error codes:
            VALIDATION_ERROR: malformed path, not an allowed image, too large
            FORBIDDEN: path outside the owner's namespaces, or another
                       user's object

        Raises:
            TransientError: storage backend failure
        """
        path_result = validate_object_path(path)
        if not path_result.is_valid:
            return ServiceResult.failure(
                path_result.error,
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"path": [path_result.error]},
            )
        object_path = path_result.object_path

        failure = cls._authorize(object_path, owner)
        if failure:
            return failure

        file = ContentFile(bytes(data)) if isinstance(data, (bytes, bytearray)) else data
        content = ImageValidator().validate(file)
        if not content.is_valid:
            return ServiceResult.failure(
                content.error,
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"file": [content.error]},
            )
        if content_type and content_type != content.content_type:
            cls.get_logger().debug(
                f"Declared type {content_type} differs from detected "
                f"{content.content_type} for {object_path.path}"
            )

        checksum = _checksum(file)
        target_name = object_path.path
        if not target_name.lower().endswith(content.extension):
            target_name += content.extension

        with cls.atomic():
            existing = cls._lock_object(object_path.path)
            failure = cls._check_owner(existing, owner)
            if failure:
                return failure

            # New content goes under a fresh name; the previous blob stays
            # readable until the row pointing at it is replaced and committed.
            try:
                storage_name = default_storage.save(target_name, file)
            except OSError as e:
                raise TransientError(
                    "Storage write failed", details={"path": object_path.path}
                ) from e

            fields = {
                "owner": owner,
                "storage_name": storage_name,
                "content_type": content.content_type,
                "size": file.size,
                "checksum": checksum,
            }

            if existing is None:
                try:
                    with transaction.atomic():
                        stored = StoredObject.objects.create(
                            path=object_path.path, **fields
                        )
                except IntegrityError:
                    # A concurrent first write won; apply this one on top of it.
                    existing = cls._lock_object(object_path.path)
                    failure = cls._check_owner(existing, owner)
                    if failure:
                        cls._discard(storage_name)
                        return failure

            if existing is not None:
                previous_name = existing.storage_name
                for key, value in fields.items():
                    setattr(existing, key, value)
                existing.version += 1
                existing.save()
                stored = existing
                if previous_name != storage_name:
                    transaction.on_commit(lambda: cls._discard(previous_name))

        cls.get_logger().info(
            f"Stored {stored.path} v{stored.version} ({stored.size} bytes) for {owner.pk}"
        )
        return ServiceResult.success(stored)

    @classmethod
    def _lock_object(cls, path: str) -> StoredObject | None:
        return StoredObject.objects.select_for_update().filter(pk=path).first()

    @staticmethod
    def _check_owner(existing: StoredObject | None, owner: User) -> ServiceResult | None:
        if existing and existing.owner_id not in (None, owner.pk):
            return ServiceResult.failure(
                "This object belongs to another user",
                error_code=ErrorCode.FORBIDDEN,
            )
        return None

    @classmethod
    def _discard(cls, storage_name: str) -> None:
        """Delete content no row points at any more."""
        try:
            default_storage.delete(storage_name)
        except OSError as e:
            cls.get_logger().warning(f"Could not delete stale content {storage_name}: {e}")

    @classmethod
    def public_url(cls, stored: StoredObject) -> str:
        """Absolute URL of the object's current content."""
        url = default_storage.url(stored.storage_name)
        if not urlparse(url).scheme:
            url = urljoin(settings.MEDIA_PUBLIC_BASE_URL.rstrip("/") + "/", url.lstrip("/"))
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}v={stored.version}"

    @classmethod
    def resolve(cls, path) -> ServiceResult[str]:
        """
        Resolve a reference to an absolute public URL.

        Error codes:
            NOT_FOUND: nothing stored at path
        """
        stored = (
            StoredObject.objects.filter(pk=path).first()
            if isinstance(path, str) and path
            else None
        )
        if stored is None:
            return ServiceResult.failure(
                "Object not found", error_code=ErrorCode.NOT_FOUND
            )
        return ServiceResult.success(cls.public_url(stored))
