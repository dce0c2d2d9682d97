from django.conf import settings
from django.contrib import admin
from django.contrib.auth.models import Group, User
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from utils.modelAdmin_utils import status_icon

from .actions import (
    content_item_retranslate,
    source_activate,
    source_deactivate,
    source_ingest_now,
)
from .custom_admin_site import core_admin_site
from .models import ContentItem, FailedJob, Source


class SourceAdmin(admin.ModelAdmin):
    list_display = ["name", "display_name", "type", "language", "show_url", "active", "item_count", "updated_at"]
    search_fields = ["name", "display_name", "url"]
    list_filter = ["type", "active", "language"]
    readonly_fields = ["created_at", "updated_at"]
    actions = [source_activate, source_deactivate, source_ingest_now]
    list_per_page = 20

    @admin.display(description=_("URL"))
    def show_url(self, obj):
        if not obj.url:
            return "-"
        return format_html("<a href='{0}' target='_blank'>{0}</a>", obj.url)

    @admin.display(description=_("Items"))
    def item_count(self, obj):
        return obj.items.count()


class ContentItemAdmin(admin.ModelAdmin):
    list_display = ["show_title", "source", "translation_icon", "translation_status", "published_at", "created_at"]
    list_filter = ["translation_status", "source", "original_language", "translated_language"]
    search_fields = ["title", "url", "original_text", "translated_text"]
    readonly_fields = ["content_hash", "raw_json", "created_at", "updated_at"]
    list_select_related = ["source"]
    actions = [content_item_retranslate]
    list_per_page = 50

    @admin.display(description=_("Title"), ordering="title")
    def show_title(self, obj):
        title = obj.title or obj.original_text[:80]
        if obj.url:
            return format_html("<a href='{}' target='_blank'>{}</a>", obj.url, title)
        return title

    @admin.display(description=_("Translated"))
    def translation_icon(self, obj):
        return status_icon(obj.translation_status)


class FailedJobAdmin(admin.ModelAdmin):
    list_display = ["task_name", "task_id", "short_reason", "created_at"]
    list_filter = ["task_name"]
    search_fields = ["task_id", "reason"]

    @admin.display(description=_("Reason"))
    def short_reason(self, obj):
        return obj.reason[:120]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


core_admin_site.register(Source, SourceAdmin)
core_admin_site.register(ContentItem, ContentItemAdmin)
core_admin_site.register(FailedJob, FailedJobAdmin)

if settings.DEBUG:
    core_admin_site.register(User)
    core_admin_site.register(Group)
