from datetime import timedelta
from unittest import mock

import pytest
from celery.signals import task_retry
from django.conf import settings as django_settings
from django.db import DatabaseError
from django.utils import timezone

from core import translate
from core.models import ContentItem, FailedJob
from core.queues import enqueue_ingest_source, enqueue_translation
from core.tasks import (
    ingest_all_sources_task,
    ingest_source_task,
    prune_failed_jobs_task,
    translate_content_item_task,
)
from core.repository import PersistenceError
from core.translate import translate_item
from translator.providers import TranslationError

from .conftest import EchoProvider

pytestmark = pytest.mark.django_db


@pytest.fixture
def item(source):
    return ContentItem.objects.create(
        source=source,
        url="https://news.example.co.il/a/1",
        title="כותרת",
        original_language="he",
        original_text="תוכן ראשון",
    )


def test_translate_item(item, provider):
    assert translate_item(item.id, "en", provider) == {"translated": True}

    item.refresh_from_db()
    assert item.translated_text == "EN:תוכן ראשון"
    assert item.translated_language == "en"
    assert item.translation_status == ContentItem.TranslationStatus.TRANSLATED
    assert provider.calls == [("תוכן ראשון", "he", "en")]


def test_translate_item_twice_calls_provider_once(item, provider):
    translate_item(item.id, "en", provider)
    assert translate_item(item.id, "en", provider) == {"skipped": True}
    assert len(provider.calls) == 1


def test_translate_missing_item_is_fatal(provider):
    with pytest.raises(ContentItem.DoesNotExist):
        translate_item(12345, "en", provider)
    assert provider.calls == []


def test_translate_failure_marks_item_failed(item):
    with pytest.raises(TranslationError):
        translate_item(item.id, "en", EchoProvider(fail=True))

    item.refresh_from_db()
    assert item.translation_status == ContentItem.TranslationStatus.FAILED
    assert item.translated_text is None
    assert item.original_text == "תוכן ראשון"


def test_translation_task_policy():
    assert translate_content_item_task.name == "core.translate_content_item"
    assert translate_content_item_task.max_retries == 2
    assert translate_content_item_task.retry_backoff == 5
    assert translate_content_item_task.retry_jitter is False
    assert TranslationError in translate_content_item_task.autoretry_for
    assert PersistenceError in translate_content_item_task.autoretry_for
    assert DatabaseError in translate_content_item_task.autoretry_for
    assert ContentItem.DoesNotExist not in translate_content_item_task.autoretry_for
    assert ingest_source_task.max_retries == 2
    assert PersistenceError in ingest_source_task.autoretry_for
    assert ingest_source_task.retry_backoff == 5


def test_task_routes_and_schedule():
    routes = django_settings.CELERY_TASK_ROUTES
    assert routes["core.ingest_source"]["queue"] == "ingest"
    assert routes["core.ingest_all_sources"]["queue"] == "ingest"
    assert routes["core.translate_content_item"]["queue"] == "translation"
    schedule = django_settings.CELERY_BEAT_SCHEDULE["ingest-all"]
    assert schedule["task"] == "core.ingest_all_sources"
    assert schedule["schedule"] == django_settings.INGEST_INTERVAL


def test_translation_task_success(item, runtime):
    result = translate_content_item_task.apply(args=[item.id, "en"])

    assert result.successful()
    assert result.get() == {"translated": True}
    assert ContentItem.objects.get(pk=item.pk).is_translated
    assert FailedJob.objects.count() == 0


def test_translation_task_exhausts_retries(item, make_fetcher, translation_cache):
    from core.runtime import close_runtime, open_runtime

    failing = EchoProvider(fail=True)
    open_runtime(fetcher=make_fetcher(), provider=failing, cache=translation_cache)
    try:
        result = translate_content_item_task.apply(args=[item.id, "en"])
    finally:
        close_runtime()

    assert result.failed()
    assert len(failing.calls) == 3
    item.refresh_from_db()
    assert item.translation_status == ContentItem.TranslationStatus.FAILED
    assert item.original_text == "תוכן ראשון"
    failed = FailedJob.objects.get()
    assert failed.task_name == "core.translate_content_item"
    assert failed.args == [item.id, "en"]
    assert "TranslationError" in failed.reason


def test_translation_task_missing_item_not_retried(runtime):
    result = translate_content_item_task.apply(args=[999999, "en"])

    assert result.failed()
    assert runtime.provider.calls == []
    assert FailedJob.objects.get().task_name == "core.translate_content_item"


def test_ingest_source_task(source, runtime):
    with mock.patch("core.ingest.enqueue_translation") as enqueue:
        result = ingest_source_task.apply(args=[source.id])

    assert result.get()["created"] == 2
    assert enqueue.call_count == 2


def test_ingest_all_sources_task(source, runtime):
    with mock.patch("core.ingest.enqueue_translation"):
        result = ingest_all_sources_task.apply()

    assert result.get()["count"] == 1
    assert ContentItem.objects.count() == 2


def test_end_to_end_ingest_then_translate(source, runtime):
    def run_translation(content_item_id, target_language):
        return translate_content_item_task.apply(args=[content_item_id, target_language])

    with mock.patch("core.ingest.enqueue_translation", side_effect=run_translation):
        ingest_source_task.apply(args=[source.id])

    item = ContentItem.objects.get(url="https://news.example.co.il/a/1")
    assert item.translation_status == ContentItem.TranslationStatus.TRANSLATED
    assert item.translated_text == "EN:תוכן ראשון"
    assert item.tags == ["חינוך", "ביטחון"]
    assert item.translated_tags == ["EN:חינוך", "EN:ביטחון"]
    assert not ContentItem.objects.exclude(
        translation_status=ContentItem.TranslationStatus.TRANSLATED
    ).exists()


def test_enqueue_helpers_use_apply_async():
    with mock.patch("core.tasks.translate_content_item_task") as task:
        enqueue_translation(5, "en")
    task.apply_async.assert_called_once_with(args=[5, "en"])

    with mock.patch("core.tasks.ingest_source_task") as task:
        enqueue_ingest_source(3)
    task.apply_async.assert_called_once_with(args=[3])


def test_prune_failed_jobs():
    old = FailedJob.objects.create(task_id="old", task_name="core.ingest_source", reason="x")
    FailedJob.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=8))
    FailedJob.objects.create(task_id="new", task_name="core.ingest_source", reason="x")

    assert prune_failed_jobs_task.apply().get() == 1
    assert list(FailedJob.objects.values_list("task_id", flat=True)) == ["new"]


def test_translation_task_retries_store_errors(item, runtime):
    real_update = translate.update_content_item
    calls = []

    def flaky_update(content_item_id, **fields):
        calls.append(fields)
        if len(calls) == 1:
            raise PersistenceError("database is locked")
        return real_update(content_item_id, **fields)

    with mock.patch("core.translate.update_content_item", side_effect=flaky_update):
        result = translate_content_item_task.apply(args=[item.id, "en"])

    assert result.successful()
    assert len(runtime.provider.calls) == 2
    item.refresh_from_db()
    assert item.translation_status == ContentItem.TranslationStatus.TRANSLATED
    assert FailedJob.objects.count() == 0


def test_translation_retry_countdowns_back_off(item, make_fetcher, translation_cache):
    from core.runtime import close_runtime, open_runtime

    countdowns = []

    def record(sender=None, reason=None, **kwargs):
        countdowns.append(reason.when)

    task_retry.connect(record, weak=False)
    open_runtime(fetcher=make_fetcher(), provider=EchoProvider(fail=True), cache=translation_cache)
    try:
        translate_content_item_task.apply(args=[item.id, "en"])
    finally:
        close_runtime()
        task_retry.disconnect(record)

    assert countdowns == [5, 10]


def test_translate_item_logs_persist_failure(item, provider, caplog):
    with mock.patch("core.translate.update_content_item", side_effect=PersistenceError("database is locked")):
        with pytest.raises(PersistenceError):
            translate_item(item.id, "en", provider)

    assert f"content item {item.id}" in caplog.text
    assert "database is locked" in caplog.text
