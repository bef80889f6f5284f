"""
Object path and content validators for the media store.

Object paths:
    profiles/{user_id}                   A user's profile photo
    chats/{conversation_id}/{name}       An image shared in a conversation

Paths are plain strings chosen by the client; they are also the object's
reference. Anything outside these two shapes is rejected before storage is
touched.

Content:
    Every object is an image. The content is identified and verified with
    Pillow rather than trusting the declared content type or file name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from chat.identifiers import parse_conversation_id
from core.exceptions import ErrorCode
from core.helpers import parse_uuid
from media.constants import MEDIA_CONFIG

OBJECT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ObjectPath:
    """A parsed object path.

    Attributes:
        path: The normalized path string (the reference)
        namespace: "profiles" or "chats"
        owner_id: User id of a profile object
        conversation_id: Conversation of a chat object
        name: File name of a chat object
    """

    path: str
    namespace: str
    owner_id: object = None
    conversation_id: str | None = None
    name: str | None = None


@dataclass
class ValidationResult:
    """Result of path or content validation.

    Attributes:
        is_valid: Whether validation passed
        content_type: Detected content type (content validation)
        extension: File extension matching the detected format
        object_path: Parsed path (path validation)
        error: Human-readable error message if validation failed
        error_code: Machine-readable error code if validation failed
    """

    is_valid: bool
    content_type: str | None = None
    extension: str | None = None
    object_path: ObjectPath | None = None
    error: str | None = None
    error_code: str = ErrorCode.VALIDATION_ERROR


def _invalid(error: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=error)


# =============================================================================
# Paths
# =============================================================================


def validate_object_path(path) -> ValidationResult:
    """
    Parse and validate an object path.

    Rejects traversal ("..", "."), absolute paths, backslashes, empty
    segments and unknown namespaces.

    Example:
        result = validate_object_path(f"profiles/{user.pk}")
        if result.is_valid:
            result.object_path.owner_id  # UUID
    """
    if not isinstance(path, str) or not path:
        return _invalid("Path is required")
    if len(path) > MEDIA_CONFIG.MAX_PATH_LENGTH:
        return _invalid("Path is too long")
    if path.startswith("/") or "\\" in path:
        return _invalid("Path must be relative")

    segments = path.split("/")
    if any(s in ("", ".", "..") for s in segments):
        return _invalid("Path contains empty or relative segments")

    namespace = segments[0]

    if namespace == MEDIA_CONFIG.PROFILES_NAMESPACE:
        owner_id = parse_uuid(segments[1]) if len(segments) == 2 else None
        if owner_id is None:
            return _invalid("Profile paths must be profiles/{user_id}")
        return ValidationResult(
            is_valid=True,
            object_path=ObjectPath(
                path=f"{namespace}/{owner_id}", namespace=namespace, owner_id=owner_id
            ),
        )

    if namespace == MEDIA_CONFIG.CHATS_NAMESPACE:
        if len(segments) != 3:
            return _invalid("Chat paths must be chats/{conversation_id}/{name}")
        ref = parse_conversation_id(segments[1])
        if ref is None:
            return _invalid("Unknown conversation id in path")
        if not OBJECT_NAME_RE.match(segments[2]):
            return _invalid("Invalid object name")
        return ValidationResult(
            is_valid=True,
            object_path=ObjectPath(
                path=f"{namespace}/{ref.conversation_id}/{segments[2]}",
                namespace=namespace,
                conversation_id=ref.conversation_id,
                name=segments[2],
            ),
        )

    return _invalid(f"Unknown namespace '{namespace}'")


# =============================================================================
# Content
# =============================================================================


class ImageValidator:
    """Validates uploaded images with Pillow.

    Checks, in order: empty file, size limit, decodable image, allowed
    format. The file position is reset to 0 afterwards.

    Example:
        result = ImageValidator().validate(uploaded_file)
        if result.is_valid:
            print(result.content_type)
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._max_bytes = max_bytes or MEDIA_CONFIG.MAX_UPLOAD_BYTES

    def validate(self, file: BinaryIO) -> ValidationResult:
        file.seek(0, 2)
        size = file.tell()
        file.seek(0)

        if size == 0:
            return _invalid("File is empty")

        if size > self._max_bytes:
            limit_mb = self._max_bytes // (1024 * 1024)
            return _invalid(f"File size exceeds {limit_mb}MB limit")

        try:
            with Image.open(file) as img:
                image_format = img.format
                if img.width * img.height > MEDIA_CONFIG.MAX_IMAGE_PIXELS:
                    return _invalid("Image dimensions are too large")
                img.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError):
            return _invalid("File is not a valid image")
        finally:
            file.seek(0)

        if image_format not in MEDIA_CONFIG.IMAGE_FORMATS:
            return _invalid(f"Image format '{image_format}' is not allowed")

        content_type, extension = MEDIA_CONFIG.IMAGE_FORMATS[image_format]
        return ValidationResult(
            is_valid=True, content_type=content_type, extension=extension
        )
