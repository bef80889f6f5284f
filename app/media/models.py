"""
Media store models.

Models:
    StoredObject: Metadata of one object at a client-chosen path

Design Decisions:
    - The path is the object's reference and its primary key. Writing to an
      existing path overwrites the content and bumps `version`.
    - Content lives in Django's default storage under `storage_name`: the
      path plus the extension of the detected image format, suffixed by the
      storage when that name is taken. An overwrite writes a new name and
      the previous content is deleted after commit.
    - Objects are never deleted through the API.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class StoredObject(BaseModel):
    """
    One stored object.

    Fields:
        path: Reference (profiles/{uid} or chats/{cid}/{name})
        owner: User who last wrote the object
        storage_name: Name of the content in default storage
        content_type: Detected content type
        size: Content size in bytes
        version: Incremented on every overwrite, embedded in resolved URLs
        checksum: SHA-256 of the content
    """

    path = models.CharField(
        max_length=255,
        primary_key=True,
        help_text="Object reference",
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="stored_objects",
        help_text="User who last wrote the object",
    )

    storage_name = models.CharField(
        max_length=300,
        help_text="Name of the content in default storage",
    )

    content_type = models.CharField(max_length=100)

    size = models.PositiveBigIntegerField(help_text="Size in bytes")

    version = models.PositiveIntegerField(default=1)

    checksum = models.CharField(max_length=64, help_text="SHA-256 hex digest")

    class Meta:
        db_table = "media_stored_object"
        ordering = ["path"]

    def __str__(self) -> str:
        return f"StoredObject({self.path} v{self.version})"
