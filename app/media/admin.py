"""Django admin configuration for media app."""

from django.contrib import admin

from media.models import StoredObject


@admin.register(StoredObject)
class StoredObjectAdmin(admin.ModelAdmin):
    """Admin configuration for StoredObject model."""

    list_display = ["path", "content_type", "size", "version", "owner", "updated_at"]
    list_filter = ["content_type"]
    search_fields = ["path", "owner__email"]
    raw_id_fields = ["owner"]
    readonly_fields = [
        "path",
        "storage_name",
        "content_type",
        "size",
        "version",
        "checksum",
        "created_at",
        "updated_at",
    ]
