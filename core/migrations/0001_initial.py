import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FailedJob",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("task_id", models.CharField(db_index=True, max_length=255)),
                ("task_name", models.CharField(max_length=255)),
                ("args", models.JSONField(blank=True, default=list)),
                ("kwargs", models.JSONField(blank=True, default=dict)),
                ("reason", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "verbose_name": "Failed Job",
                "verbose_name_plural": "Failed Jobs",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Source",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("RSS", "RSS")], default="RSS", max_length=20, verbose_name="Type")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("display_name", models.CharField(blank=True, default="", max_length=255, verbose_name="Display Name")),
                (
                    "alignment",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Editorial leaning of the outlet, shown next to its articles",
                        max_length=255,
                        verbose_name="Alignment",
                    ),
                ),
                ("url", models.URLField(blank=True, max_length=1024, null=True, verbose_name="Feed URL")),
                ("language", models.CharField(default="he", max_length=16, verbose_name="Language")),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Source",
                "verbose_name_plural": "Sources",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["type", "active"], name="core_source_type_active_idx")],
            },
        ),
        migrations.CreateModel(
            name="ContentItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("ARTICLE", "Article")], default="ARTICLE", max_length=20)),
                ("title", models.TextField(blank=True, null=True)),
                ("url", models.URLField(blank=True, max_length=2048, null=True, unique=True)),
                ("content_hash", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("original_language", models.CharField(max_length=16)),
                ("original_text", models.TextField()),
                ("translated_text", models.TextField(blank=True, null=True)),
                ("translated_language", models.CharField(blank=True, max_length=16, null=True)),
                (
                    "translation_status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("TRANSLATED", "Translated"), ("FAILED", "Failed")],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("raw_json", models.JSONField(blank=True, default=dict)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("translated_tags", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "source",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="core.source",
                    ),
                ),
            ],
            options={
                "verbose_name": "Content Item",
                "verbose_name_plural": "Content Items",
                "ordering": ["-published_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("content_hash__isnull", True), ("url__isnull", False)),
                            models.Q(("content_hash__isnull", False), ("url__isnull", True)),
                            _connector="OR",
                        ),
                        name="content_item_single_identity",
                    )
                ],
            },
        ),
    ]
