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
            name="StoredObject",
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
                    "path",
                    models.CharField(
                        help_text="Object reference",
                        max_length=255,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "storage_name",
                    models.CharField(
                        help_text="Name of the content in default storage",
                        max_length=300,
                    ),
                ),
                ("content_type", models.CharField(max_length=100)),
                ("size", models.PositiveBigIntegerField(help_text="Size in bytes")),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "checksum",
                    models.CharField(help_text="SHA-256 hex digest", max_length=64),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User who last wrote the object",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stored_objects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "media_stored_object",
                "ordering": ["path"],
            },
        ),
    ]
