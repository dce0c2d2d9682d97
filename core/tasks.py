import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from translator.providers import TranslationError

from . import ingest
from .models import FailedJob
from .repository import PersistenceError
from .runtime import get_runtime
from .translate import translate_item

log = logging.getLogger("celery")

# transient store failures; a missing content item is not retried
STORE_ERRORS = (DatabaseError, PersistenceError)


@shared_task(
    name="core.ingest_all_sources",
    autoretry_for=STORE_ERRORS,
    max_retries=2,
    retry_backoff=5,
    retry_jitter=False,
)
def ingest_all_sources_task():
    return ingest.ingest_all_sources(get_runtime())


@shared_task(
    name="core.ingest_source",
    autoretry_for=STORE_ERRORS,
    max_retries=2,
    retry_backoff=5,
    retry_jitter=False,
)
def ingest_source_task(source_id: int):
    return ingest.ingest_source(source_id, get_runtime())


@shared_task(
    bind=True,
    name="core.translate_content_item",
    autoretry_for=(TranslationError,) + STORE_ERRORS,
    max_retries=2,
    retry_backoff=5,
    retry_jitter=False,
)
def translate_content_item_task(self, content_item_id: int, target_language: str = None):
    target_language = target_language or settings.TARGET_LANGUAGE
    log.info(
        "Translate content item %s to %s (attempt %s)",
        content_item_id,
        target_language,
        self.request.retries + 1,
    )
    return translate_item(content_item_id, target_language, get_runtime().provider)


@shared_task(name="core.prune_failed_jobs")
def prune_failed_jobs_task(days: int = None):
    days = settings.FAILED_JOB_RETENTION_DAYS if days is None else days
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = FailedJob.objects.filter(created_at__lt=cutoff).delete()
    log.info("Pruned %s failed jobs older than %s days", deleted, days)
    return deleted
