from django.conf import settings


def enqueue_ingest_source(source_id: int):
    from .tasks import ingest_source_task

    return ingest_source_task.apply_async(args=[source_id])


def enqueue_translation(content_item_id: int, target_language: str = None):
    from .tasks import translate_content_item_task

    return translate_content_item_task.apply_async(
        args=[content_item_id, target_language or settings.TARGET_LANGUAGE]
    )
