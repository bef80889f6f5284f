"""
Django admin configuration for the relationship graph.
"""

from django.contrib import admin

from social.models import FriendRequest, Friendship


@admin.register(FriendRequest)
class FriendRequestAdmin(admin.ModelAdmin):
    """Pending friend requests."""

    list_display = ("id", "sender", "recipient", "from_name", "created_at")
    search_fields = ("sender__email", "recipient__email", "from_name")
    ordering = ("-created_at",)
    raw_id_fields = ("sender", "recipient")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Friendship)
class FriendshipAdmin(admin.ModelAdmin):
    """
    Directional friend edges.

    Edges come in pairs; edit through FriendshipService, not here.
    """

    list_display = ("owner", "friend", "display_name", "created_at")
    search_fields = ("owner__email", "friend__email", "display_name")
    ordering = ("-created_at",)
    raw_id_fields = ("owner", "friend")
    readonly_fields = ("created_at", "updated_at")
