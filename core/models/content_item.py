from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from .source import Source


class ContentItem(models.Model):
    class Type(models.TextChoices):
        ARTICLE = "ARTICLE", _("Article")

    class TranslationStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        TRANSLATED = "TRANSLATED", _("Translated")
        FAILED = "FAILED", _("Failed")

    source = models.ForeignKey(Source, on_delete=models.CASCADE, related_name="items")
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.ARTICLE)
    title = models.TextField(null=True, blank=True)
    url = models.URLField(max_length=2048, unique=True, null=True, blank=True)
    content_hash = models.CharField(max_length=64, unique=True, null=True, blank=True)

    original_language = models.CharField(max_length=16)
    original_text = models.TextField()
    translated_text = models.TextField(null=True, blank=True)
    translated_language = models.CharField(max_length=16, null=True, blank=True)
    translation_status = models.CharField(
        max_length=20,
        choices=TranslationStatus.choices,
        default=TranslationStatus.PENDING,
        db_index=True,
    )

    published_at = models.DateTimeField(null=True, blank=True, db_index=True)
    raw_json = models.JSONField(default=dict, blank=True)
    tags = models.JSONField(default=list, blank=True)
    translated_tags = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Content Item")
        verbose_name_plural = _("Content Items")
        ordering = ["-published_at", "-id"]
        constraints = [
            # the URL is the identity when present, otherwise the content hash
            models.CheckConstraint(
                condition=(
                    Q(url__isnull=False, content_hash__isnull=True)
                    | Q(url__isnull=True, content_hash__isnull=False)
                ),
                name="content_item_single_identity",
            ),
        ]

    def __str__(self):
        return self.title or self.url or self.content_hash

    @property
    def is_translated(self) -> bool:
        return (
            self.translation_status == self.TranslationStatus.TRANSLATED
            and bool(self.translated_text)
        )
