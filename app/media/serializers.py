"""
Serializers for the media store API.

Related files:
    - models.py: StoredObject
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from media.constants import MEDIA_CONFIG
from media.models import StoredObject
from media.services import MediaStoreService


class ObjectUploadSerializer(serializers.Serializer):
    """
    Multipart input for storing an object.

    Path rules and image checks are applied by MediaStoreService.
    """

    path = serializers.CharField(max_length=MEDIA_CONFIG.MAX_PATH_LENGTH)
    file = serializers.FileField(allow_empty_file=True)


class StoredObjectSerializer(serializers.ModelSerializer):
    """Stored object metadata with its resolved URL."""

    url = serializers.SerializerMethodField()

    class Meta:
        model = StoredObject
        fields = ["path", "url", "content_type", "size", "version", "updated_at"]
        read_only_fields = fields

    def get_url(self, obj) -> str:
        return MediaStoreService.public_url(obj)


class ResolveQuerySerializer(serializers.Serializer):
    path = serializers.CharField(max_length=MEDIA_CONFIG.MAX_PATH_LENGTH)
