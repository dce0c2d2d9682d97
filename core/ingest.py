import logging
from typing import Optional

from django.conf import settings

from translator.categories import translate_categories
from utils.feed_action import FetchError, ParseError, parse_feed, polite_delay, sanitize_xml

from .models import ContentItem, Source
from .queues import enqueue_translation
from .repository import (
    IdentityKey,
    PersistenceError,
    find_source_by_id,
    list_active_sources,
    upsert_content_item,
)
from .runtime import Runtime

COUNTERS = ("created", "updated", "skipped", "enqueued")


def _empty_result(source: Source) -> dict:
    return {"source": source.id, **{name: 0 for name in COUNTERS}}


def ingest_source(source_id: int, runtime: Runtime) -> Optional[dict]:
    source = find_source_by_id(source_id)
    if source is None:
        logging.warning("Source %s not found, skip ingestion", source_id)
        return None
    if not source.active or source.type != Source.Type.RSS or not source.url:
        logging.info("Source %s is inactive or not an RSS source, skip ingestion", source)
        return None
    return ingest_rss_source(source, runtime)


def ingest_all_sources(runtime: Runtime) -> dict:
    """Ingest every active RSS source; one source failing never stops the sweep."""
    sources = list_active_sources(Source.Type.RSS)
    totals = {"count": len(sources), **{name: 0 for name in COUNTERS}}
    logging.info("Start ingesting %s sources", len(sources))

    for source in sources:
        try:
            result = ingest_rss_source(source, runtime)
        except Exception as e:
            logging.exception("Task ingest_all_sources %s: %s", source.url, str(e))
            continue
        for name in COUNTERS:
            totals[name] += result[name]

    logging.info("Ingestion sweep completed: %s", totals)
    return totals


def ingest_rss_source(source: Source, runtime: Runtime) -> dict:
    result = _empty_result(source)
    try:
        try:
            runtime.fetcher.warm_up(source.url)
            document = runtime.fetcher.fetch(source.url)
            entries = parse_feed(sanitize_xml(document))
        except (FetchError, ParseError) as e:
            logging.error("Ingest %s failed: %s", source.url, str(e))
            return result

        logging.info("Fetched %s entries from %s", len(entries), source.url)
        for entry in entries:
            identity = IdentityKey.for_entry(
                source.id, entry.link, entry.title, entry.published_at, entry.text
            )
            translated_tags = translate_categories(
                entry.tags,
                from_lang=source.language,
                to_lang=settings.TARGET_LANGUAGE,
                provider=runtime.provider,
                cache=runtime.cache,
            )
            try:
                item, created = upsert_content_item(
                    identity,
                    create_fields={
                        "source": source,
                        "type": ContentItem.Type.ARTICLE,
                        "title": entry.title,
                        "original_language": source.language,
                        "original_text": entry.text,
                        "translation_status": ContentItem.TranslationStatus.PENDING,
                        "published_at": entry.published_at,
                        "raw_json": entry.raw,
                        "tags": entry.tags,
                        "translated_tags": translated_tags,
                    },
                    update_fields={
                        "tags": entry.tags,
                        "translated_tags": translated_tags,
                    },
                )
            except PersistenceError as e:
                logging.error("Persist entry %s=%s failed: %s", identity.field, identity.value, str(e))
                result["skipped"] += 1
                continue

            result["created" if created else "updated"] += 1
            if not item.is_translated:
                try:
                    enqueue_translation(item.id, settings.TARGET_LANGUAGE)
                except Exception as e:
                    logging.exception("Enqueue translation of content item %s failed: %s", item.id, str(e))
                    result["skipped"] += 1
                    continue
                result["enqueued"] += 1

        logging.info("Ingest %s completed: %s", source.url, result)
        return result
    finally:
        polite_delay()
