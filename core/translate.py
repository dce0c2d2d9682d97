import logging

from translator.providers import TranslationError, TranslationProvider

from .models import ContentItem
from .repository import PersistenceError, find_content_item_by_id, update_content_item


def translate_item(content_item_id: int, target_language: str, provider: TranslationProvider) -> dict:
    """
    Translate one content item's original text into target_language.

    Already translated items are skipped without calling the provider.
    A provider failure marks the item FAILED and propagates, so the
    queue's retry policy decides whether to try again.
    """
    item = find_content_item_by_id(content_item_id)
    if item is None:
        raise ContentItem.DoesNotExist(f"Content item {content_item_id} not found")

    if item.is_translated:
        logging.info("Content item %s already translated, skip", content_item_id)
        return {"skipped": True}

    try:
        translated = provider.translate_text(item.original_text, item.original_language, target_language)
    except TranslationError as e:
        logging.error("Translate content item %s to %s failed: %s", content_item_id, target_language, str(e))
        update_content_item(content_item_id, translation_status=ContentItem.TranslationStatus.FAILED)
        raise

    try:
        update_content_item(
            content_item_id,
            translated_text=translated,
            translated_language=target_language,
            translation_status=ContentItem.TranslationStatus.TRANSLATED,
        )
    except PersistenceError as e:
        logging.error("Persist translation of content item %s failed: %s", content_item_id, str(e))
        raise
    logging.info("Content item %s translated to %s", content_item_id, target_language)
    return {"translated": True}
