"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Group management with member and membership log inlines
- Message log browsing (read-only, messages are immutable)
"""

from django.contrib import admin

from chat.models import ConversationLog, Group, GroupMember, MembershipEvent, Message


class GroupMemberInline(admin.TabularInline):
    """Inline display of current members."""

    model = GroupMember
    extra = 0
    readonly_fields = ["created_at"]
    raw_id_fields = ["user"]


class MembershipEventInline(admin.TabularInline):
    """Inline display of the membership log."""

    model = MembershipEvent
    extra = 0
    can_delete = False
    readonly_fields = ["user", "action", "actor", "created_at"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Group model."""

    list_display = ["id", "name", "created_by", "created_at"]
    search_fields = ["name", "id"]
    raw_id_fields = ["created_by"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [GroupMemberInline, MembershipEventInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "conversation_id",
        "sequence",
        "message_type",
        "sender",
        "timestamp",
        "seen",
    ]
    list_filter = ["message_type", "seen"]
    search_fields = ["conversation_id", "sender__email"]
    raw_id_fields = ["sender"]
    readonly_fields = [
        "id",
        "conversation_id",
        "sequence",
        "message_type",
        "text",
        "image_url",
        "sender",
        "sender_name",
        "timestamp",
        "event",
    ]
    ordering = ["conversation_id", "timestamp", "sequence"]


@admin.register(ConversationLog)
class ConversationLogAdmin(admin.ModelAdmin):
    list_display = ["conversation_id", "last_sequence", "last_timestamp"]
    search_fields = ["conversation_id"]
    readonly_fields = ["conversation_id", "last_sequence", "last_timestamp"]
