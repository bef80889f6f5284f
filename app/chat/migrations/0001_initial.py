import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ConversationLog",
            fields=[
                (
                    "conversation_id",
                    models.CharField(
                        help_text="Group id or direct conversation id",
                        max_length=80,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("last_sequence", models.PositiveBigIntegerField(default=0)),
                ("last_timestamp", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "chat_conversation_log",
            },
        ),
        migrations.CreateModel(
            name="Group",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name",
                    models.CharField(help_text="Group display name", max_length=100),
                ),
                (
                    "photo_url",
                    models.URLField(
                        blank=True, help_text="Group photo URL", max_length=500
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        help_text="Creator and admin of the group",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_groups",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_group",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "conversation_id",
                    models.CharField(
                        help_text="Group id or direct conversation id",
                        max_length=80,
                    ),
                ),
                (
                    "sequence",
                    models.PositiveBigIntegerField(
                        help_text="Insertion order within the conversation"
                    ),
                ),
                (
                    "message_type",
                    models.CharField(
                        choices=[
                            ("text", "Text"),
                            ("image", "Image"),
                            ("system", "System"),
                        ],
                        default="text",
                        max_length=10,
                    ),
                ),
                ("text", models.TextField(blank=True)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("sender_name", models.CharField(blank=True, max_length=80)),
                ("timestamp", models.DateTimeField()),
                ("seen", models.BooleanField(default=False)),
                ("event", models.JSONField(blank=True, null=True)),
                (
                    "sender",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["timestamp", "sequence"],
                "indexes": [
                    models.Index(
                        fields=["conversation_id", "timestamp", "sequence"],
                        name="chat_msg_conv_order_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("conversation_id", "sequence"),
                        name="chat_unique_message_sequence",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="GroupMember",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        help_text="Group the user belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="members",
                        to="chat.group",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Member",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="group_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_group_member",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["user", "group"], name="chat_member_user_idx")
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("group", "user"), name="chat_unique_group_member"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="MembershipEvent",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "action",
                    models.CharField(
                        choices=[("add", "Add"), ("remove", "Remove")],
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "actor",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="membership_events",
                        to="chat.group",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_membership_event",
                "ordering": ["id"],
                "indexes": [
                    models.Index(
                        fields=["group", "id"], name="chat_membership_group_idx"
                    )
                ],
            },
        ),
    ]
