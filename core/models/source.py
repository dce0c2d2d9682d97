from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Source(models.Model):
    class Type(models.TextChoices):
        RSS = "RSS", _("RSS")

    type = models.CharField(_("Type"), max_length=20, choices=Type.choices, default=Type.RSS)
    name = models.CharField(_("Name"), max_length=255)
    display_name = models.CharField(_("Display Name"), max_length=255, blank=True, default="")
    alignment = models.CharField(
        _("Alignment"),
        max_length=255,
        blank=True,
        default="",
        help_text=_("Editorial leaning of the outlet, shown next to its articles"),
    )
    url = models.URLField(_("Feed URL"), max_length=1024, null=True, blank=True)
    language = models.CharField(
        _("Language"), max_length=16, default=settings.DEFAULT_SOURCE_LANGUAGE
    )
    active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Source")
        verbose_name_plural = _("Sources")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["type", "active"], name="core_source_type_active_idx"),
        ]

    def __str__(self):
        return self.display_name or self.name
