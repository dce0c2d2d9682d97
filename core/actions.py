import logging

from django.contrib import admin, messages
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from .models import ContentItem
from .queues import enqueue_ingest_source, enqueue_translation


@admin.display(description=_("Activate selected sources"))
def source_activate(modeladmin, request, queryset):
    updated = queryset.update(active=True)
    modeladmin.message_user(request, _("%d sources activated") % updated, messages.SUCCESS)


@admin.display(description=_("Deactivate selected sources"))
def source_deactivate(modeladmin, request, queryset):
    updated = queryset.update(active=False)
    modeladmin.message_user(request, _("%d sources deactivated") % updated, messages.SUCCESS)


@admin.display(description=_("Ingest selected sources now"))
def source_ingest_now(modeladmin, request, queryset):
    logging.info("Call source_ingest_now: %s", queryset)
    source_ids = list(queryset.filter(active=True).values_list("id", flat=True))
    for source_id in source_ids:
        enqueue_ingest_source(source_id)
    modeladmin.message_user(request, _("%d ingestion jobs queued") % len(source_ids), messages.SUCCESS)


@admin.display(description=_("Retranslate selected items"))
def content_item_retranslate(modeladmin, request, queryset):
    logging.info("Call content_item_retranslate: %s", queryset)
    item_ids = list(queryset.values_list("id", flat=True))
    with transaction.atomic():
        ContentItem.objects.filter(id__in=item_ids).update(
            translation_status=ContentItem.TranslationStatus.PENDING,
            translated_text=None,
            translated_language=None,
        )
    for item_id in item_ids:
        enqueue_translation(item_id)
    modeladmin.message_user(request, _("%d translation jobs queued") % len(item_ids), messages.SUCCESS)
